"""
Pytest configuration for vending machine tests.

Adds the repository root to sys.path so tests import the package
without installation, and provides shared machine fixtures.
"""

import sys
from pathlib import Path

import pytest


repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from vending_machine.core.value_objects import CurrencyAmount, Denomination, Product, ProductKind  # noqa: E402
from vending_machine.domain.cash_register import CashRegister  # noqa: E402
from vending_machine.domain.change_strategy import GreedyChangeStrategy  # noqa: E402
from vending_machine.domain.inventory import Inventory  # noqa: E402
from vending_machine.domain.machine import PinVerifier, VendingMachine  # noqa: E402


ADMIN_PIN = "1234"


def seed_float(cash: CashRegister) -> None:
    """Ten 10 ₽, ten 5 ₽, twenty 2 ₽, fifty 1 ₽."""
    cash.add_float(Denomination.R10, 10)
    cash.add_float(Denomination.R5, 10)
    cash.add_float(Denomination.R2, 20)
    cash.add_float(Denomination.R1, 50)


def one_item_inventory(product_id: str, name: str, price_rub: str, quantity: int) -> Inventory:
    inventory = Inventory()
    inventory.add_new(
        Product(product_id, name, CurrencyAmount.from_major_units(price_rub), ProductKind.DRINK),
        quantity,
    )
    return inventory


@pytest.fixture
def cash():
    """Empty cash register with the greedy strategy."""
    return CashRegister(GreedyChangeStrategy())


@pytest.fixture
def seeded_cash(cash):
    seed_float(cash)
    return cash


@pytest.fixture
def machine(seeded_cash):
    """Machine selling one 7 ₽ drink with a full float."""
    inventory = one_item_inventory("I1", "Тестовый напиток", "7", quantity=5)
    return VendingMachine(inventory, seeded_cash, PinVerifier(ADMIN_PIN))
