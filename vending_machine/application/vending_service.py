"""
Vending Service - Application service for customer and operator actions.

Wraps the domain machine with input validation, event publication and
dictionary responses suitable for the command channel.
"""

import asyncio
from typing import Any, Optional

from vending_machine.core.exceptions import AdminAccessDeniedError, InvalidDenominationError
from vending_machine.core.value_objects import CurrencyAmount, Denomination
from vending_machine.domain.machine import AdminSession, VendingMachine
from vending_machine.event_system import EventConsumer, EventPublisher, EventType
from vending_machine.loggers import logger
from vending_machine.send_to_ws import send_to_ws


def _failure(message: str) -> dict[str, Any]:
    return {"success": False, "message": message}


def _positive_int(value: Any) -> Optional[int]:
    """Parse a strictly positive integer, None if not one."""
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _coins_total(coins: dict[int, int]) -> CurrencyAmount:
    return CurrencyAmount(sum(d * c for d, c in coins.items()))


class VendingService:
    """
    Application service for the vending machine.

    Coordinates the domain machine, the event bus and front-end
    notifications. Business failures come back as ``{"success": False}``
    responses; ``CashRegisterInconsistencyError`` is never caught here.
    """

    def __init__(self, machine: VendingMachine) -> None:
        """
        Initialize the vending service.

        Args:
            machine: Domain vending machine.
        """
        self._machine = machine

        # Event system
        self._event_queue: asyncio.Queue = asyncio.Queue()
        self._event_publisher = EventPublisher(self._event_queue)
        self._event_consumer = EventConsumer(self._event_queue)
        self._is_started = False

    @property
    def machine(self) -> VendingMachine:
        return self._machine

    @property
    def event_consumer(self) -> EventConsumer:
        return self._event_consumer

    @property
    def is_started(self) -> bool:
        return self._is_started

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Register front-end forwarding and start consuming events."""
        if self._is_started:
            return
        for event_type in EventType:
            self._event_consumer.register_handler(event_type, self._forward_to_ws)
        await self._event_consumer.start_consuming()
        self._is_started = True
        logger.info("Vending service started")

    async def shutdown(self) -> None:
        """Stop consuming events."""
        await self._event_consumer.stop_consuming()
        self._is_started = False
        logger.info("Vending service shut down")

    async def _forward_to_ws(self, event: dict[str, Any]) -> None:
        """Send a machine event to the front-end."""
        event_type = event.get("type")
        name = event_type.value if isinstance(event_type, EventType) else str(event_type)
        data = {key: value for key, value in event.items() if key != "type"}
        await send_to_ws(event=name, data=data)

    # =========================================================================
    # Customer Operations
    # =========================================================================

    async def insert_coin(self, denomination: Any) -> dict[str, Any]:
        """
        Insert one coin.

        Args:
            denomination: Face value in rubles (1, 2, 5, 10; "5р" also accepted).

        Returns:
            Dictionary with the new inserted amount.
        """
        try:
            coin = Denomination.parse(denomination)
        except InvalidDenominationError as e:
            logger.warning(f"Rejected coin: {e.message}")
            return _failure(e.message)

        inserted = self._machine.insert_coin(coin)
        await self._event_publisher.publish(
            EventType.COIN_INSERTED,
            coin_value=int(coin),
            inserted_amount=inserted.minor_units,
        )
        return {
            "success": True,
            "message": f"Inserted: {inserted}",
            "data": {"inserted_amount": inserted.minor_units},
        }

    async def buy(self, product_id: Any) -> dict[str, Any]:
        """
        Buy a product with the coins inserted so far.

        Args:
            product_id: Catalog id.

        Returns:
            Dictionary with the receipt, or the failure reason.
        """
        result = self._machine.buy(str(product_id))

        if result.success:
            await self._event_publisher.publish(
                EventType.PURCHASE_COMPLETED,
                receipt=result.receipt.to_dict(),
            )
        else:
            await self._event_publisher.publish(
                EventType.PURCHASE_FAILED,
                product_id=str(product_id),
                reason=result.reason.value,
            )
        return result.to_dict()

    async def cancel(self) -> dict[str, Any]:
        """
        Cancel and return inserted coins.

        Returns:
            Dictionary with the returned coins and their total.
        """
        refund = self._machine.cancel_and_refund()
        if not refund:
            return {"success": True, "message": "Nothing to refund", "data": {"refund": {}, "total": 0}}

        total = _coins_total(refund)
        await self._event_publisher.publish(
            EventType.COINS_REFUNDED,
            refund=refund,
            total=total.minor_units,
        )
        return {
            "success": True,
            "message": f"Refunded: {total}",
            "data": {"refund": refund, "total": total.minor_units},
        }

    async def status(self) -> dict[str, Any]:
        """Get inserted amount and product list."""
        return {
            "success": True,
            "message": "OK",
            "data": {
                "inserted_amount": self._machine.current_inserted.minor_units,
                "products": [item.to_dict() for item in self._machine.list_products()],
            },
        }

    async def list_products(self) -> dict[str, Any]:
        """Get product list with stock."""
        return {
            "success": True,
            "message": "OK",
            "data": [item.to_dict() for item in self._machine.list_products()],
        }

    # =========================================================================
    # Operator Operations
    # =========================================================================

    def _admin(self, pin: Any) -> Optional[AdminSession]:
        try:
            return self._machine.enter_admin(str(pin))
        except AdminAccessDeniedError:
            return None

    async def admin_add_stock(self, pin: Any, product_id: Any, amount: Any) -> dict[str, Any]:
        """Restock a product."""
        admin = self._admin(pin)
        if admin is None:
            return _failure("Access denied")

        count = _positive_int(amount)
        if count is None:
            return _failure(f"Invalid amount: {amount}")

        if not admin.add_stock(str(product_id), count):
            return _failure(f"Product not found: {product_id}")

        await self._event_publisher.publish(
            EventType.STOCK_ADDED, product_id=str(product_id), amount=count
        )
        return {"success": True, "message": f"Stock of {product_id} increased by {count}"}

    async def admin_add_float(self, pin: Any, denomination: Any, count: Any) -> dict[str, Any]:
        """Add coins to the vault."""
        admin = self._admin(pin)
        if admin is None:
            return _failure("Access denied")

        try:
            coin = Denomination.parse(denomination)
        except InvalidDenominationError as e:
            return _failure(e.message)

        coins = _positive_int(count)
        if coins is None:
            return _failure(f"Invalid count: {count}")

        admin.add_float(coin, coins)
        await self._event_publisher.publish(
            EventType.FLOAT_ADDED, denomination=int(coin), count=coins
        )
        return {
            "success": True,
            "message": f"Float added. Vault: {admin.vault_balance}",
            "data": {"vault_balance": admin.vault_balance.minor_units},
        }

    async def admin_collect_cash(self, pin: Any) -> dict[str, Any]:
        """Empty the vault."""
        admin = self._admin(pin)
        if admin is None:
            return _failure("Access denied")

        collected = admin.collect_all_cash()
        total = _coins_total(collected)
        await self._event_publisher.publish(
            EventType.CASH_COLLECTED, collected=collected, total=total.minor_units
        )
        return {
            "success": True,
            "message": f"Collected: {total}",
            "data": {"collected": collected, "total": total.minor_units},
        }

    async def admin_cash_snapshot(self, pin: Any) -> dict[str, Any]:
        """Get vault and hopper content."""
        admin = self._admin(pin)
        if admin is None:
            return _failure("Access denied")

        snapshot = admin.cash_snapshot()
        return {
            "success": True,
            "message": f"Vault balance: {snapshot.vault_total}",
            "data": snapshot.to_dict(),
        }
