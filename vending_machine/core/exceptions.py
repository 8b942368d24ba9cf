"""
Custom exceptions for the vending machine.

Provides a hierarchy of typed exceptions for better error handling
and more informative error messages.

Business failures of a purchase (unknown product, out of stock,
insufficient funds, change impossible) are not exceptions; they are
returned as ``PurchaseResult`` values. Exceptions here signal either
invalid input at a boundary or a broken internal invariant.
"""

from typing import Any, Optional


class VendingMachineError(Exception):
    """Base exception for all vending machine errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            code: Optional error code for programmatic handling.
            details: Optional additional error details.
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# Cash Register Errors
# =============================================================================


class CashRegisterError(VendingMachineError):
    """Base exception for cash register errors."""

    pass


class CashRegisterInconsistencyError(CashRegisterError):
    """
    Coin bookkeeping no longer matches what was verified.

    Raised when the change decomposition fails at commit time after a
    successful feasibility check, or when computed change cannot be
    deducted from the actual pools. This is a bug, not a customer error:
    it must never be retried or reported as an ordinary failure.
    """

    def __init__(
        self,
        message: str,
        change_amount: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        if change_amount is not None:
            self.details["change_amount"] = change_amount


class InvalidAmountError(VendingMachineError):
    """Invalid coin count or amount."""

    pass


class InvalidDenominationError(VendingMachineError):
    """Value is not one of the supported coin denominations."""

    def __init__(self, message: str, value: Any = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        if value is not None:
            self.details["value"] = value


# =============================================================================
# Catalog Errors
# =============================================================================


class CatalogError(VendingMachineError):
    """Base exception for product catalog errors."""

    pass


class DuplicateProductError(CatalogError):
    """A product with the same id is already in the catalog."""

    def __init__(self, message: str, product_id: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.product_id = product_id
        if product_id:
            self.details["product_id"] = product_id


class InvalidQuantityError(CatalogError):
    """Invalid stock quantity."""

    pass


# =============================================================================
# Admin Errors
# =============================================================================


class AdminError(VendingMachineError):
    """Base exception for operator (admin) errors."""

    pass


class AdminAccessDeniedError(AdminError):
    """The supplied admin credential was rejected."""

    pass
