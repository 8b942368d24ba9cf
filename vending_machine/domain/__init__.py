"""
Domain layer - Business logic and domain models.

Contains:
- Coin pools and change decomposition
- Cash register with the purchase commit
- Product inventory
- Purchase state machine and orchestration
"""

from .coin_pool import CoinPool
from .change_strategy import GreedyChangeStrategy, greedy_change
from .cash_register import CashRegister
from .inventory import Inventory
from .purchase_state_machine import (
    PurchasePhase,
    PurchaseTransaction,
)
from .machine import (
    AdminSession,
    PinVerifier,
    VendingMachine,
)


__all__ = [
    # Cash
    "CoinPool",
    "GreedyChangeStrategy",
    "greedy_change",
    "CashRegister",
    # Catalog
    "Inventory",
    # Purchase
    "PurchasePhase",
    "PurchaseTransaction",
    "VendingMachine",
    "AdminSession",
    "PinVerifier",
]
