"""
Cash Register - Owns the coin pools and commits purchases.

The vault holds machine money (float plus completed sales). The hopper
holds coins inserted by the current customer that are not yet the
machine's property. Change feasibility is always judged against the
merged vault + hopper content, since the customer's own coins can be
handed back as change once the purchase commits.
"""

from typing import Optional

from vending_machine.core.exceptions import CashRegisterInconsistencyError
from vending_machine.core.interfaces import ChangeStrategy
from vending_machine.core.value_objects import CashSnapshot, Coin, CurrencyAmount, Denomination
from vending_machine.domain.change_strategy import greedy_change
from vending_machine.domain.coin_pool import CoinPool
from vending_machine.loggers import logger


class CashRegister:
    """
    Coin bookkeeping for one machine.

    No other component mutates coin counts; everything goes through
    the methods below.
    """

    def __init__(self, change_strategy: Optional[ChangeStrategy] = None) -> None:
        """
        Initialize the register with empty pools.

        Args:
            change_strategy: Change decomposition function (greedy by default).
        """
        self._vault = CoinPool()
        self._hopper = CoinPool()
        self._change_strategy: ChangeStrategy = change_strategy or greedy_change

    @property
    def inserted_amount(self) -> CurrencyAmount:
        """Total value inserted by the current customer."""
        return CurrencyAmount(self._hopper.total)

    @property
    def vault_balance(self) -> CurrencyAmount:
        """Total value of machine-owned coins."""
        return CurrencyAmount(self._vault.total)

    def insert(self, coin: Coin) -> None:
        """Put one customer coin into the hopper."""
        self._hopper.add(coin.denomination)
        logger.debug(
            f"Coin inserted: {coin.minor_units / 100:.2f} RUB. "
            f"Inserted: {self._hopper.total / 100:.2f} RUB"
        )

    def refund_inserted(self) -> dict[int, int]:
        """
        Return exactly the coins the customer inserted and empty the hopper.

        Returns:
            Denomination -> count map of the returned coins.
        """
        refund = self._hopper.drain()
        if refund:
            logger.info(f"Refunded inserted coins: {refund}")
        return refund

    def add_float(self, denomination: Denomination, count: int) -> None:
        """Top up the vault. Non-positive counts are ignored."""
        if count <= 0:
            return
        self._vault.add(denomination, count)
        logger.info(f"Float added: {count} x {int(denomination) / 100:.2f} RUB")

    def empty_vault(self) -> dict[int, int]:
        """
        Collect all machine money.

        Returns:
            Denomination -> count map of everything that was in the vault.
        """
        collected = self._vault.drain()
        logger.info(f"Vault emptied: {collected}")
        return collected

    def can_make_change(self, amount: CurrencyAmount) -> bool:
        """
        Check whether change can be paid from vault + hopper.

        Pure query: the hypothetical breakdown is discarded.
        """
        available = self._vault.merged(self._hopper)
        ok, _ = self._change_strategy(amount.minor_units, available.to_dict())
        return ok

    def commit_purchase_and_make_change(self, change_amount: CurrencyAmount) -> dict[int, int]:
        """
        Take the customer's coins and pay out change.

        The caller must have verified ``can_make_change`` first. Hopper
        coins move into the vault, then change is deducted from the
        vault (and the hopper for any shortfall).

        Args:
            change_amount: Change owed to the customer.

        Returns:
            Denomination -> count map of dispensed change.

        Raises:
            CashRegisterInconsistencyError: If the change cannot be
                decomposed or deducted although it was verified.
        """
        available = self._vault.merged(self._hopper)
        ok, change = self._change_strategy(change_amount.minor_units, available.to_dict())
        if not ok:
            logger.critical(
                f"Change of {change_amount.minor_units} kopecks not decomposable at commit. "
                f"Vault: {self._vault.to_dict()}, hopper: {self._hopper.to_dict()}"
            )
            raise CashRegisterInconsistencyError(
                "Change could not be computed although it was verified",
                change_amount=change_amount.minor_units,
            )

        self._vault.absorb(self._hopper)

        dispensed: dict[int, int] = {}
        for denomination, need in change.items():
            shortfall = self._vault.deduct(denomination, need)
            shortfall = self._hopper.deduct(denomination, shortfall)
            if shortfall != 0:
                logger.critical(
                    f"Cannot deduct {need} x {denomination}: short by {shortfall}"
                )
                raise CashRegisterInconsistencyError(
                    "Cash register content does not match the change breakdown",
                    change_amount=change_amount.minor_units,
                    details={"denomination": denomination, "shortfall": shortfall},
                )
            dispensed[denomination] = need

        logger.info(
            f"Purchase committed. Change: {change_amount.minor_units / 100:.2f} RUB {dispensed}. "
            f"Vault: {self._vault.total / 100:.2f} RUB"
        )
        return dispensed

    def snapshot(self) -> CashSnapshot:
        """Read-only copy of vault and hopper."""
        return CashSnapshot.from_pools(self._vault.to_dict(), self._hopper.to_dict())
