"""
Core module - Foundation layer with no external dependencies.

Contains:
- Exceptions
- Interfaces (Protocols)
- Value Objects
"""

from .exceptions import (
    VendingMachineError,
    CashRegisterError,
    CashRegisterInconsistencyError,
    InvalidAmountError,
    InvalidDenominationError,
    CatalogError,
    DuplicateProductError,
    InvalidQuantityError,
    AdminError,
    AdminAccessDeniedError,
)
from .interfaces import (
    ChangeStrategy,
    ProductCatalog,
    CredentialVerifier,
)
from .value_objects import (
    CurrencyAmount,
    Denomination,
    Coin,
    Product,
    ProductKind,
    InventoryItem,
    Receipt,
    PurchaseResult,
    PurchaseFailureReason,
    CashSnapshot,
)


__all__ = [
    # Exceptions
    "VendingMachineError",
    "CashRegisterError",
    "CashRegisterInconsistencyError",
    "InvalidAmountError",
    "InvalidDenominationError",
    "CatalogError",
    "DuplicateProductError",
    "InvalidQuantityError",
    "AdminError",
    "AdminAccessDeniedError",
    # Interfaces
    "ChangeStrategy",
    "ProductCatalog",
    "CredentialVerifier",
    # Value Objects
    "CurrencyAmount",
    "Denomination",
    "Coin",
    "Product",
    "ProductKind",
    "InventoryItem",
    "Receipt",
    "PurchaseResult",
    "PurchaseFailureReason",
    "CashSnapshot",
]
