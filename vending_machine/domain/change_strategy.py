"""
Change Strategy - Deterministic greedy change decomposition.

Walks denominations from the largest face value down, taking as many
coins of each as fit and are available. The result is all-or-nothing:
a remainder left after the smallest denomination fails the whole
decomposition and no partial breakdown is returned.

Greedy is not complete when availability is limited: a decomposition
may exist that it does not find. That behaviour is intentional.
"""

from typing import Mapping


def greedy_change(amount: int, available: Mapping[int, int]) -> tuple[bool, dict[int, int]]:
    """
    Decompose ``amount`` into coins from ``available``.

    Args:
        amount: Target amount in kopecks.
        available: Coins that may be used, denomination -> count.

    Returns:
        (True, breakdown) on success, (False, {}) on failure.
        Zero always succeeds with an empty breakdown; negative always fails.
    """
    change: dict[int, int] = {}
    if amount < 0:
        return False, change
    if amount == 0:
        return True, change

    remaining = amount
    for denomination in sorted(available, reverse=True):
        if remaining <= 0:
            break

        have = available[denomination]
        if have <= 0 or denomination > remaining:
            continue

        use = min(have, remaining // denomination)
        change[int(denomination)] = use
        remaining -= use * denomination

    if remaining == 0:
        return True, change

    change.clear()
    return False, change


class GreedyChangeStrategy:
    """Callable wrapper around :func:`greedy_change`."""

    def __call__(self, amount: int, available: Mapping[int, int]) -> tuple[bool, dict[int, int]]:
        return greedy_change(amount, available)

    def __repr__(self) -> str:
        return "GreedyChangeStrategy()"
