"""
Purchase State Machine - Tracks one purchase attempt.

IDLE -> FUNDS_CHECKED -> CHANGE_VERIFIED -> COMMITTED -> DONE

Any check before COMMITTED may abort back to IDLE with nothing changed.
Once COMMITTED there is no way back: the attempt either reaches DONE or
the machine raises an inconsistency error.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Mapping, Optional

from vending_machine.core.exceptions import CashRegisterInconsistencyError
from vending_machine.core.value_objects import (
    CurrencyAmount,
    Product,
    PurchaseFailureReason,
    PurchaseResult,
    Receipt,
)
from vending_machine.loggers import logger


# =============================================================================
# Purchase Phases
# =============================================================================


class PurchasePhase(Enum):
    """Phases of a purchase attempt."""

    IDLE = auto()             # Nothing verified yet
    FUNDS_CHECKED = auto()    # Product in stock, customer paid enough
    CHANGE_VERIFIED = auto()  # Change is payable from vault + hopper
    COMMITTED = auto()        # Coins moved, change dispensed
    DONE = auto()             # Stock decremented, receipt issued


_TRANSITIONS: dict[PurchasePhase, PurchasePhase] = {
    PurchasePhase.IDLE: PurchasePhase.FUNDS_CHECKED,
    PurchasePhase.FUNDS_CHECKED: PurchasePhase.CHANGE_VERIFIED,
    PurchasePhase.CHANGE_VERIFIED: PurchasePhase.COMMITTED,
    PurchasePhase.COMMITTED: PurchasePhase.DONE,
}

_ABORTABLE: frozenset[PurchasePhase] = frozenset(
    {PurchasePhase.IDLE, PurchasePhase.FUNDS_CHECKED, PurchasePhase.CHANGE_VERIFIED}
)


# =============================================================================
# Purchase Transaction
# =============================================================================


class PurchaseTransaction:
    """
    Context of a single purchase attempt.

    Holds the amounts fixed at each step so later steps cannot drift
    from what earlier steps verified.
    """

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        self.phase = PurchasePhase.IDLE
        self.price: Optional[CurrencyAmount] = None
        self.paid: Optional[CurrencyAmount] = None
        self.failure_reason: Optional[PurchaseFailureReason] = None

    @property
    def change_amount(self) -> Optional[CurrencyAmount]:
        """Paid minus price, once funds are checked."""
        if self.price is None or self.paid is None:
            return None
        return self.paid - self.price

    @property
    def is_finished(self) -> bool:
        return self.phase == PurchasePhase.DONE

    def _advance(self, target: PurchasePhase) -> None:
        """Move to the next phase, refusing to skip or repeat one."""
        if _TRANSITIONS.get(self.phase) != target:
            raise CashRegisterInconsistencyError(
                f"Illegal purchase transition {self.phase.name} -> {target.name}",
                details={"product_id": self.product_id},
            )
        logger.debug(f"Purchase {self.product_id}: {self.phase.name} -> {target.name}")
        self.phase = target

    def funds_checked(self, price: CurrencyAmount, paid: CurrencyAmount) -> CurrencyAmount:
        """
        Record a price covered by the inserted amount.

        Returns:
            Change owed (never negative).
        """
        if paid < price:
            raise CashRegisterInconsistencyError(
                f"Paid {paid.minor_units} is below price {price.minor_units}",
                details={"product_id": self.product_id},
            )
        self._advance(PurchasePhase.FUNDS_CHECKED)
        self.price = price
        self.paid = paid
        return paid - price

    def change_verified(self) -> None:
        self._advance(PurchasePhase.CHANGE_VERIFIED)

    def committed(self) -> None:
        self._advance(PurchasePhase.COMMITTED)

    def complete(self, product: Product, change: Mapping[int, int]) -> PurchaseResult:
        """
        Finish the attempt and issue the receipt.

        Args:
            product: Product sold.
            change: Dispensed change breakdown.

        Returns:
            Successful PurchaseResult.
        """
        self._advance(PurchasePhase.DONE)
        receipt = Receipt.issue(
            product=product,
            price=self.price,
            paid=self.paid,
            change_amount=self.change_amount,
            change=change,
        )
        logger.info(
            f"Purchase completed: {product.product_id} for {self.price.minor_units / 100:.2f} RUB, "
            f"paid {self.paid.minor_units / 100:.2f} RUB, change {receipt.change}"
        )
        return PurchaseResult.completed(receipt)

    def abort(self, reason: PurchaseFailureReason) -> PurchaseResult:
        """
        Give up before anything was committed.

        Args:
            reason: Why the purchase cannot happen.

        Returns:
            Failed PurchaseResult.
        """
        if self.phase not in _ABORTABLE:
            raise CashRegisterInconsistencyError(
                f"Cannot abort purchase in phase {self.phase.name}",
                details={"product_id": self.product_id},
            )
        logger.info(f"Purchase {self.product_id} failed: {reason.message}")
        self.failure_reason = reason
        self.phase = PurchasePhase.IDLE
        return PurchaseResult.failed(reason)
