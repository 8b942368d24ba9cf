"""
Coin Pool - Denomination to count bookkeeping.

A pool models a physical stash of coins (the vault or the hopper).
Counts never go negative; denominations with zero coins are dropped.
"""

from __future__ import annotations

from typing import Iterator, Mapping, Optional

from vending_machine.core.exceptions import InvalidAmountError


class CoinPool:
    """
    Mutable stash of coins keyed by denomination (kopecks).

    All mutation goes through ``add``/``deduct``/``absorb``/``drain`` so
    the non-negative count invariant holds in one place.
    """

    def __init__(self, coins: Optional[Mapping[int, int]] = None) -> None:
        """
        Initialize the pool.

        Args:
            coins: Optional initial denomination -> count map.
        """
        self._counts: dict[int, int] = {}
        if coins:
            for denomination, count in coins.items():
                self.add(denomination, count)

    @property
    def total(self) -> int:
        """Total value in kopecks."""
        return sum(denomination * count for denomination, count in self._counts.items())

    @property
    def is_empty(self) -> bool:
        return not self._counts

    def count(self, denomination: int) -> int:
        """Number of coins of a denomination."""
        return self._counts.get(int(denomination), 0)

    def add(self, denomination: int, count: int = 1) -> None:
        """
        Add coins of one denomination.

        Args:
            denomination: Coin value in kopecks.
            count: Number of coins (zero is a no-op).

        Raises:
            InvalidAmountError: If count is negative.
        """
        if count < 0:
            raise InvalidAmountError(
                f"Cannot add {count} coins of {denomination}",
                details={"denomination": int(denomination), "count": count},
            )
        if count == 0:
            return
        key = int(denomination)
        self._counts[key] = self._counts.get(key, 0) + count

    def deduct(self, denomination: int, count: int) -> int:
        """
        Remove up to ``count`` coins of one denomination.

        Args:
            denomination: Coin value in kopecks.
            count: Number of coins wanted.

        Returns:
            Shortfall: how many of the wanted coins were not in the pool.
        """
        if count <= 0:
            return 0
        key = int(denomination)
        have = self._counts.get(key, 0)
        used = min(have, count)
        if have - used == 0:
            self._counts.pop(key, None)
        else:
            self._counts[key] = have - used
        return count - used

    def merged(self, other: CoinPool) -> CoinPool:
        """New pool holding the coins of both pools."""
        result = self.copy()
        for denomination, count in other:
            result.add(denomination, count)
        return result

    def absorb(self, other: CoinPool) -> None:
        """Move every coin of ``other`` into this pool."""
        for denomination, count in other.drain().items():
            self.add(denomination, count)

    def drain(self) -> dict[int, int]:
        """Return the whole content and empty the pool."""
        content = dict(self._counts)
        self._counts.clear()
        return content

    def copy(self) -> CoinPool:
        return CoinPool(self._counts)

    def to_dict(self) -> dict[int, int]:
        """Copy of the content as a denomination -> count map."""
        return dict(self._counts)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(sorted(self._counts.items(), reverse=True))

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, denomination: object) -> bool:
        return denomination in self._counts

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CoinPool):
            return self._counts == other._counts
        if isinstance(other, Mapping):
            return self._counts == {int(d): c for d, c in other.items() if c}
        return NotImplemented

    def __repr__(self) -> str:
        return f"CoinPool({dict(self)!r})"
