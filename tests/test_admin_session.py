"""
Tests for operator actions and the product inventory.
"""

import pytest

from conftest import ADMIN_PIN
from vending_machine.core.exceptions import DuplicateProductError, InvalidQuantityError
from vending_machine.core.interfaces import ProductCatalog
from vending_machine.core.value_objects import CurrencyAmount, Denomination, Product
from vending_machine.domain.inventory import Inventory


@pytest.fixture
def admin(machine):
    return machine.enter_admin(ADMIN_PIN)


class TestAdminSession:
    """Tests for AdminSession."""

    def test_add_stock(self, admin):
        """Test restocking an existing product."""
        assert admin.add_stock("I1", 3) is True
        assert admin.products_snapshot()[0].quantity == 8

    def test_add_stock_unknown_product(self, admin):
        """Test restocking a missing product fails."""
        assert admin.add_stock("nope", 3) is False

    @pytest.mark.parametrize("amount", [0, -1])
    def test_add_stock_non_positive(self, admin, amount):
        """Test non-positive restock is refused."""
        assert admin.add_stock("I1", amount) is False
        assert admin.products_snapshot()[0].quantity == 5

    def test_add_float(self, admin):
        """Test float raises the vault balance."""
        before = admin.vault_balance
        admin.add_float(Denomination.R5, 2)
        assert admin.vault_balance == before + CurrencyAmount(1000)

    def test_collect_all_cash(self, admin, machine):
        """Test collection empties the vault but not the hopper."""
        machine.insert_coin(Denomination.R2)
        collected = admin.collect_all_cash()
        assert collected == {1000: 10, 500: 10, 200: 20, 100: 50}
        assert admin.vault_balance == CurrencyAmount(0)
        assert admin.cash_snapshot().hopper == {200: 1}

    def test_collect_includes_sales(self, admin, machine):
        """Test sold money is part of the collection."""
        machine.insert_coin(Denomination.R10)
        machine.buy("I1")
        collected = admin.collect_all_cash()
        assert collected[1000] == 11
        assert collected[200] == 19
        assert collected[100] == 49

    def test_cash_snapshot(self, admin):
        """Test snapshot totals."""
        snapshot = admin.cash_snapshot()
        assert snapshot.vault_total == CurrencyAmount(24000)
        assert snapshot.hopper_total == CurrencyAmount(0)


class TestInventory:
    """Tests for Inventory."""

    def test_add_and_find(self):
        """Test adding and looking up a product."""
        inventory = Inventory()
        product = Product("D1", "Вода", CurrencyAmount(200))
        inventory.add_new(product, 10)
        item = inventory.find("D1")
        assert item.product is product
        assert item.quantity == 10
        assert "D1" in inventory
        assert len(inventory) == 1

    def test_find_missing(self):
        """Test unknown ids return None."""
        assert Inventory().find("X") is None

    def test_duplicate_rejected(self):
        """Test adding the same id twice."""
        inventory = Inventory()
        inventory.add_new(Product("D1", "Вода", CurrencyAmount(200)), 1)
        with pytest.raises(DuplicateProductError) as exc_info:
            inventory.add_new(Product("D1", "Другое", CurrencyAmount(300)), 1)
        assert exc_info.value.product_id == "D1"

    def test_negative_quantity_rejected(self):
        """Test negative initial stock."""
        with pytest.raises(InvalidQuantityError):
            Inventory().add_new(Product("D1", "Вода", CurrencyAmount(200)), -1)

    def test_decrease_stock(self):
        """Test decrement succeeds only while stock lasts."""
        inventory = Inventory()
        inventory.add_new(Product("D1", "Вода", CurrencyAmount(200)), 1)
        assert inventory.decrease_stock("D1") is True
        assert inventory.decrease_stock("D1") is False
        assert inventory.decrease_stock("missing") is False
        assert inventory.find("D1").quantity == 0

    def test_items_keep_insertion_order(self):
        """Test listing order."""
        inventory = Inventory()
        for pid in ("S1", "D1", "D2"):
            inventory.add_new(Product(pid, pid, CurrencyAmount(100)), 1)
        assert [i.product.product_id for i in inventory.items()] == ["S1", "D1", "D2"]

    def test_satisfies_catalog_protocol(self):
        """Test Inventory is a ProductCatalog."""
        assert isinstance(Inventory(), ProductCatalog)
