"""
Interfaces (Protocols) for the vending machine.

Defines contracts for the change algorithm, the product catalog and
admin credential checks using Python's Protocol for structural
subtyping (duck typing with type hints).
"""

from __future__ import annotations

from typing import Mapping, Optional, Protocol, runtime_checkable

from vending_machine.core.value_objects import InventoryItem


# =============================================================================
# Change Strategy Interface
# =============================================================================


@runtime_checkable
class ChangeStrategy(Protocol):
    """
    Pluggable change decomposition function.

    Given a target amount and a denomination->count pool, decides whether
    the amount can be paid out and with which coins. On failure the
    returned breakdown is empty.
    """

    def __call__(
        self,
        amount: int,
        available: Mapping[int, int],
    ) -> tuple[bool, dict[int, int]]:
        """
        Decompose an amount into available coins.

        Args:
            amount: Target amount in kopecks.
            available: Coins that may be used, denomination -> count.

        Returns:
            (success, denomination -> count breakdown).
        """
        ...


# =============================================================================
# Catalog Interface
# =============================================================================


@runtime_checkable
class ProductCatalog(Protocol):
    """Protocol for product catalog storage."""

    def find(self, product_id: str) -> Optional[InventoryItem]:
        """Find a product line by id."""
        ...

    def decrease_stock(self, product_id: str, amount: int = 1) -> bool:
        """Remove items from stock. Returns False if not possible."""
        ...

    def increase_stock(self, product_id: str, amount: int) -> bool:
        """Add items to stock. Returns False if not possible."""
        ...

    def items(self) -> list[InventoryItem]:
        """Get all catalog lines."""
        ...


# =============================================================================
# Admin Credential Interface
# =============================================================================


@runtime_checkable
class CredentialVerifier(Protocol):
    """Protocol for admin credential checks."""

    def verify(self, credential: str) -> bool:
        """Check whether the credential grants admin access."""
        ...
