"""
Vending Machine - Purchase orchestration and operator access.

Ties the cash register to the product catalog. A purchase checks stock,
funds and change feasibility without touching any state, then commits
cash and decrements stock. Stock is only decremented after the cash
commit succeeded.
"""

from __future__ import annotations

import threading

from vending_machine.core.exceptions import AdminAccessDeniedError, CashRegisterInconsistencyError
from vending_machine.core.interfaces import CredentialVerifier, ProductCatalog
from vending_machine.core.value_objects import (
    CashSnapshot,
    Coin,
    CurrencyAmount,
    Denomination,
    InventoryItem,
    PurchaseFailureReason,
    PurchaseResult,
)
from vending_machine.domain.cash_register import CashRegister
from vending_machine.domain.purchase_state_machine import PurchaseTransaction
from vending_machine.loggers import logger


class PinVerifier:
    """
    Admin PIN check.

    The PIN is kept in plain text and compared for equality.
    """

    def __init__(self, pin: str) -> None:
        self._pin = pin

    def verify(self, credential: str) -> bool:
        return credential == self._pin


class VendingMachine:
    """
    Customer-facing machine.

    All operations that touch the cash register or the catalog are
    serialized on one lock, so the check-then-commit sequence of a
    purchase always sees a consistent state.
    """

    def __init__(
        self,
        catalog: ProductCatalog,
        cash_register: CashRegister,
        credential_verifier: CredentialVerifier,
    ) -> None:
        """
        Initialize the machine.

        Args:
            catalog: Product catalog with stock levels.
            cash_register: Coin bookkeeping.
            credential_verifier: Admin credential check.
        """
        self._catalog = catalog
        self._cash = cash_register
        self._credential_verifier = credential_verifier
        self._lock = threading.RLock()

    @property
    def current_inserted(self) -> CurrencyAmount:
        """Amount inserted by the current customer."""
        with self._lock:
            return self._cash.inserted_amount

    def insert_coin(self, denomination: Denomination) -> CurrencyAmount:
        """
        Accept one coin from the customer.

        Returns:
            New inserted total.
        """
        with self._lock:
            self._cash.insert(Coin(denomination))
            return self._cash.inserted_amount

    def cancel_and_refund(self) -> dict[int, int]:
        """Return the customer's coins unchanged."""
        with self._lock:
            return self._cash.refund_inserted()

    def list_products(self) -> list[InventoryItem]:
        with self._lock:
            return self._catalog.items()

    def enter_admin(self, credential: str) -> AdminSession:
        """
        Open an operator session.

        Raises:
            AdminAccessDeniedError: If the credential is rejected.
        """
        if not self._credential_verifier.verify(credential):
            logger.warning("Admin access denied")
            raise AdminAccessDeniedError("Invalid PIN")
        logger.info("Admin session opened")
        return AdminSession(self._catalog, self._cash, self._lock)

    def buy(self, product_id: str) -> PurchaseResult:
        """
        Sell one product for the coins currently inserted.

        Business failures (unknown product, out of stock, insufficient
        funds, change impossible) come back as a failed result and leave
        hopper, vault and stock untouched.

        Args:
            product_id: Catalog id of the product.

        Returns:
            PurchaseResult with a receipt on success.

        Raises:
            CashRegisterInconsistencyError: If the commit fails after
                every check passed.
        """
        with self._lock:
            transaction = PurchaseTransaction(product_id)

            item = self._catalog.find(product_id)
            if item is None:
                return transaction.abort(PurchaseFailureReason.NOT_FOUND)
            if item.quantity <= 0:
                return transaction.abort(PurchaseFailureReason.OUT_OF_STOCK)

            price = item.product.price
            paid = self._cash.inserted_amount
            if paid < price:
                return transaction.abort(PurchaseFailureReason.INSUFFICIENT_FUNDS)

            change_amount = transaction.funds_checked(price, paid)

            if not self._cash.can_make_change(change_amount):
                return transaction.abort(PurchaseFailureReason.CHANGE_IMPOSSIBLE)
            transaction.change_verified()

            change = self._cash.commit_purchase_and_make_change(change_amount)
            transaction.committed()

            if not self._catalog.decrease_stock(product_id, 1):
                logger.critical(f"Stock decrement failed after cash commit for {product_id}")
                raise CashRegisterInconsistencyError(
                    f"Stock of {product_id} could not be decremented after payment",
                    change_amount=change_amount.minor_units,
                    details={"product_id": product_id},
                )

            return transaction.complete(item.product, change)


class AdminSession:
    """
    Operator session: restocking, float management and cash collection.

    Shares the machine lock so admin actions never interleave with a
    purchase.
    """

    def __init__(
        self,
        catalog: ProductCatalog,
        cash_register: CashRegister,
        lock: threading.RLock,
    ) -> None:
        self._catalog = catalog
        self._cash = cash_register
        self._lock = lock

    @property
    def vault_balance(self) -> CurrencyAmount:
        with self._lock:
            return self._cash.vault_balance

    def products_snapshot(self) -> list[InventoryItem]:
        with self._lock:
            return self._catalog.items()

    def add_stock(self, product_id: str, amount: int) -> bool:
        with self._lock:
            return self._catalog.increase_stock(product_id, amount)

    def add_float(self, denomination: Denomination, count: int) -> None:
        with self._lock:
            self._cash.add_float(denomination, count)

    def collect_all_cash(self) -> dict[int, int]:
        """Empty the vault."""
        with self._lock:
            return self._cash.empty_vault()

    def cash_snapshot(self) -> CashSnapshot:
        with self._lock:
            return self._cash.snapshot()
