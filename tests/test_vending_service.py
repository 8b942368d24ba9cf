"""
Tests for VendingService: dictionary responses and published events.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from conftest import ADMIN_PIN
from vending_machine.application.vending_service import VendingService
from vending_machine.core.exceptions import CashRegisterInconsistencyError
from vending_machine.event_system import EventType


def _drain_events(service: VendingService) -> list[dict]:
    queue = service.event_consumer.event_queue
    events = []
    while not queue.empty():
        events.append(queue.get_nowait())
        queue.task_done()
    return events


@pytest.fixture
def service(machine):
    return VendingService(machine)


# =============================================================================
# Customer Operations
# =============================================================================


class TestCustomerOperations:
    """Tests for coin insertion, purchase and refund."""

    @pytest.mark.asyncio
    async def test_insert_coin(self, service):
        """Test a valid coin raises the inserted amount and emits an event."""
        result = await service.insert_coin(10)
        assert result["success"] is True
        assert result["data"] == {"inserted_amount": 1000}

        events = _drain_events(service)
        assert events == [
            {"type": EventType.COIN_INSERTED, "coin_value": 1000, "inserted_amount": 1000}
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("denomination", [3, "abc", "50"])
    async def test_insert_invalid_coin(self, service, denomination):
        """Test unsupported coins are rejected without side effects."""
        result = await service.insert_coin(denomination)
        assert result["success"] is False
        assert service.machine.current_inserted.minor_units == 0
        assert _drain_events(service) == []

    @pytest.mark.asyncio
    async def test_buy_success(self, service):
        """Test a purchase returns the receipt."""
        await service.insert_coin("10")
        _drain_events(service)

        result = await service.buy("I1")

        assert result["success"] is True
        assert result["data"]["change"] == {200: 1, 100: 1}
        assert result["data"]["change_amount"] == 300
        events = _drain_events(service)
        assert events[0]["type"] is EventType.PURCHASE_COMPLETED
        assert events[0]["receipt"]["paid"] == 1000

    @pytest.mark.asyncio
    async def test_buy_insufficient_funds(self, service):
        """Test a failed purchase reports its reason."""
        await service.insert_coin(1)
        _drain_events(service)

        result = await service.buy("I1")

        assert result == {
            "success": False,
            "message": "Insufficient funds",
            "reason": "insufficient_funds",
        }
        assert _drain_events(service) == [
            {"type": EventType.PURCHASE_FAILED, "product_id": "I1", "reason": "insufficient_funds"}
        ]

    @pytest.mark.asyncio
    async def test_buy_inconsistency_propagates(self, service):
        """Test a fatal register error is not turned into a response."""
        with patch.object(
            service.machine,
            "buy",
            side_effect=CashRegisterInconsistencyError("broken"),
        ):
            with pytest.raises(CashRegisterInconsistencyError):
                await service.buy("I1")

    @pytest.mark.asyncio
    async def test_cancel_refunds(self, service):
        """Test cancel returns the inserted coins."""
        await service.insert_coin(2)
        await service.insert_coin(1)
        _drain_events(service)

        result = await service.cancel()

        assert result["success"] is True
        assert result["data"] == {"refund": {200: 1, 100: 1}, "total": 300}
        assert _drain_events(service)[0]["type"] is EventType.COINS_REFUNDED

    @pytest.mark.asyncio
    async def test_cancel_nothing(self, service):
        """Test cancel with an empty hopper."""
        result = await service.cancel()
        assert result["success"] is True
        assert result["data"] == {"refund": {}, "total": 0}
        assert _drain_events(service) == []

    @pytest.mark.asyncio
    async def test_status_and_list(self, service):
        """Test status and product listing."""
        await service.insert_coin(5)
        status = await service.status()
        assert status["data"]["inserted_amount"] == 500
        assert status["data"]["products"][0]["id"] == "I1"

        listing = await service.list_products()
        assert listing["data"][0]["quantity"] == 5


# =============================================================================
# Operator Operations
# =============================================================================


class TestOperatorOperations:
    """Tests for PIN-protected operations."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, args",
        [
            ("admin_add_stock", ("I1", 1)),
            ("admin_add_float", (1, 1)),
            ("admin_collect_cash", ()),
            ("admin_cash_snapshot", ()),
        ],
    )
    async def test_wrong_pin(self, service, method, args):
        """Test every operator command checks the PIN."""
        result = await getattr(service, method)("0000", *args)
        assert result == {"success": False, "message": "Access denied"}

    @pytest.mark.asyncio
    async def test_add_stock(self, service):
        """Test restocking."""
        result = await service.admin_add_stock(ADMIN_PIN, "I1", "3")
        assert result["success"] is True
        listing = await service.list_products()
        assert listing["data"][0]["quantity"] == 8
        assert _drain_events(service) == [
            {"type": EventType.STOCK_ADDED, "product_id": "I1", "amount": 3}
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -2, "x", True])
    async def test_add_stock_invalid_amount(self, service, amount):
        """Test non-positive or non-numeric restock amounts."""
        result = await service.admin_add_stock(ADMIN_PIN, "I1", amount)
        assert result["success"] is False

    @pytest.mark.asyncio
    async def test_add_stock_unknown_product(self, service):
        """Test restocking a missing product."""
        result = await service.admin_add_stock(ADMIN_PIN, "Z", 1)
        assert result == {"success": False, "message": "Product not found: Z"}

    @pytest.mark.asyncio
    async def test_add_float(self, service):
        """Test adding coins to the vault."""
        result = await service.admin_add_float(ADMIN_PIN, "5", 2)
        assert result["success"] is True
        assert result["data"]["vault_balance"] == 25000

    @pytest.mark.asyncio
    async def test_add_float_invalid(self, service):
        """Test bad denomination and count."""
        assert (await service.admin_add_float(ADMIN_PIN, 3, 2))["success"] is False
        assert (await service.admin_add_float(ADMIN_PIN, 5, 0))["success"] is False

    @pytest.mark.asyncio
    async def test_collect_cash(self, service):
        """Test cash collection empties the vault."""
        result = await service.admin_collect_cash(ADMIN_PIN)
        assert result["data"]["total"] == 24000
        snapshot = await service.admin_cash_snapshot(ADMIN_PIN)
        assert snapshot["data"]["vault_total"] == 0
        events = _drain_events(service)
        assert events[0]["type"] is EventType.CASH_COLLECTED


# =============================================================================
# Lifecycle
# =============================================================================


class TestLifecycle:
    """Tests for event forwarding to the front-end."""

    @pytest.mark.asyncio
    async def test_events_forwarded_to_ws(self, service):
        """Test started service sends events over WebSocket."""
        with patch(
            "vending_machine.application.vending_service.send_to_ws",
            new=AsyncMock(return_value=True),
        ) as mock_send:
            await service.start()
            assert service.is_started
            await service.insert_coin(10)
            await asyncio.wait_for(service.event_consumer.event_queue.join(), timeout=2)
            await service.shutdown()

        mock_send.assert_awaited_once_with(
            event="coin_inserted",
            data={"coin_value": 1000, "inserted_amount": 1000},
        )
        assert not service.is_started

    @pytest.mark.asyncio
    async def test_start_twice(self, service):
        """Test repeated start registers handlers once."""
        await service.start()
        await service.start()
        assert len(service.event_consumer.handlers[EventType.COIN_INSERTED]) == 1
        await service.shutdown()
