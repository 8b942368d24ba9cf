"""
Value Objects for the vending machine.

Immutable objects that represent values in the domain.
Value objects are compared by value, not by identity.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum, IntEnum, auto
from typing import Any, Mapping, Optional, Union

from vending_machine.core.exceptions import InvalidAmountError, InvalidDenominationError


# =============================================================================
# Enums
# =============================================================================


class Denomination(IntEnum):
    """Coin face values in kopecks. Closed set."""

    R1 = 100
    R2 = 200
    R5 = 500
    R10 = 1000

    @classmethod
    def parse(cls, text: Union[str, int]) -> "Denomination":
        """
        Parse a denomination typed in rubles ("1", "2р", "5₽", 10).

        Args:
            text: Ruble face value, optionally suffixed with "р" or "₽".

        Returns:
            Matching denomination.

        Raises:
            InvalidDenominationError: If the value is not a known coin.
        """
        token = str(text).strip().rstrip("р₽").strip()
        try:
            return cls(int(token) * 100)
        except ValueError as e:
            raise InvalidDenominationError(
                f"Unknown denomination: {text!r}", value=str(text)
            ) from e


class ProductKind(Enum):
    """Kind of product sold by the machine."""

    DRINK = auto()
    SNACK = auto()


class PurchaseFailureReason(Enum):
    """Why a purchase did not happen. No state was changed in any of these cases."""

    NOT_FOUND = "not_found"
    OUT_OF_STOCK = "out_of_stock"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    CHANGE_IMPOSSIBLE = "change_impossible"

    @property
    def message(self) -> str:
        """Human-readable description."""
        return _FAILURE_MESSAGES[self]


_FAILURE_MESSAGES: dict[PurchaseFailureReason, str] = {
    PurchaseFailureReason.NOT_FOUND: "Product not found",
    PurchaseFailureReason.OUT_OF_STOCK: "Product is out of stock",
    PurchaseFailureReason.INSUFFICIENT_FUNDS: "Insufficient funds",
    PurchaseFailureReason.CHANGE_IMPOSSIBLE: "Machine cannot make change",
}


# =============================================================================
# Currency Amount Value Object
# =============================================================================


@dataclass(frozen=True, order=True)
class CurrencyAmount:
    """
    Immutable monetary amount.

    Stored in kopecks (minor units) so arithmetic is exact. A difference
    of two amounts may be negative; callers validate the sign where it
    matters.

    Attributes:
        minor_units: Amount in kopecks.
    """

    minor_units: int = 0

    def __post_init__(self) -> None:
        """Validate the amount."""
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise TypeError(f"minor_units must be int, got {type(self.minor_units).__name__}")

    @classmethod
    def from_major_units(cls, value: Union[Decimal, int, float, str]) -> "CurrencyAmount":
        """
        Create an amount from rubles, rounding half away from zero.

        Floats are read through their shortest repr, so 1.005 means
        the decimal 1.005 and becomes 101 kopecks.

        Args:
            value: Amount in rubles.

        Returns:
            CurrencyAmount instance.

        Raises:
            InvalidAmountError: If the value is not a number.
        """
        if isinstance(value, float):
            value = repr(value)
        try:
            kopecks = (Decimal(value) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)
            minor_units = int(kopecks)
        except (InvalidOperation, ValueError) as e:
            raise InvalidAmountError(f"Invalid amount: {value!r}") from e
        return cls(minor_units=minor_units)

    @classmethod
    def from_minor_units(cls, kopecks: int) -> "CurrencyAmount":
        """Create an amount from kopecks."""
        return cls(minor_units=kopecks)

    @classmethod
    def zero(cls) -> "CurrencyAmount":
        return cls(minor_units=0)

    @property
    def major_units(self) -> Decimal:
        """Get amount in rubles."""
        return Decimal(self.minor_units) / 100

    def __add__(self, other: "CurrencyAmount") -> "CurrencyAmount":
        """Add two amounts."""
        if not isinstance(other, CurrencyAmount):
            return NotImplemented
        return CurrencyAmount(minor_units=self.minor_units + other.minor_units)

    def __sub__(self, other: "CurrencyAmount") -> "CurrencyAmount":
        """Subtract two amounts. The result may be negative."""
        if not isinstance(other, CurrencyAmount):
            return NotImplemented
        return CurrencyAmount(minor_units=self.minor_units - other.minor_units)

    def __str__(self) -> str:
        """String representation in rubles, e.g. "12,34 ₽"."""
        sign = "-" if self.minor_units < 0 else ""
        rubles, kopecks = divmod(abs(self.minor_units), 100)
        return f"{sign}{rubles},{kopecks:02d} ₽"

    def __repr__(self) -> str:
        """Detailed representation."""
        return f"CurrencyAmount(minor_units={self.minor_units})"


# =============================================================================
# Coin / Product Value Objects
# =============================================================================


@dataclass(frozen=True)
class Coin:
    """A single physical coin."""

    denomination: Denomination

    @property
    def minor_units(self) -> int:
        """Face value in kopecks."""
        return int(self.denomination)


@dataclass(frozen=True)
class Product:
    """
    Catalog entry.

    Attributes:
        product_id: Unique identifier typed by the customer.
        name: Display name.
        price: Unit price.
        kind: Product kind.
    """

    product_id: str
    name: str
    price: CurrencyAmount
    kind: ProductKind = ProductKind.SNACK

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.product_id,
            "name": self.name,
            "price": self.price.minor_units,
            "kind": self.kind.name.lower(),
        }


@dataclass(frozen=True)
class InventoryItem:
    """Read-only view of one catalog line."""

    product: Product
    quantity: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {**self.product.to_dict(), "quantity": self.quantity}


def _coin_tuple(coins: Mapping[int, int]) -> tuple[tuple[int, int], ...]:
    """Freeze a denomination->count map, largest coins first."""
    return tuple(
        sorted(((int(d), c) for d, c in coins.items() if c > 0), reverse=True)
    )


# =============================================================================
# Receipt / Result Value Objects
# =============================================================================


@dataclass(frozen=True)
class Receipt:
    """
    Record of one successful purchase.

    Attributes:
        product: Product sold.
        price: Price charged.
        paid: Amount the customer had inserted.
        change_amount: Change returned (paid - price).
        change_coins: Change breakdown as (denomination, count) pairs.
    """

    product: Product
    price: CurrencyAmount
    paid: CurrencyAmount
    change_amount: CurrencyAmount
    change_coins: tuple[tuple[int, int], ...] = field(default_factory=tuple)

    @classmethod
    def issue(
        cls,
        product: Product,
        price: CurrencyAmount,
        paid: CurrencyAmount,
        change_amount: CurrencyAmount,
        change: Mapping[int, int],
    ) -> "Receipt":
        """Create a receipt from a change breakdown map."""
        return cls(
            product=product,
            price=price,
            paid=paid,
            change_amount=change_amount,
            change_coins=_coin_tuple(change),
        )

    @property
    def change(self) -> dict[int, int]:
        """Change breakdown as a denomination->count map."""
        return dict(self.change_coins)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "product": self.product.to_dict(),
            "price": self.price.minor_units,
            "paid": self.paid.minor_units,
            "change_amount": self.change_amount.minor_units,
            "change": self.change,
        }


@dataclass(frozen=True)
class PurchaseResult:
    """
    Result of a purchase attempt.

    Attributes:
        success: Whether the product was sold.
        receipt: Receipt when successful.
        reason: Failure reason when not successful.
        message: Human-readable message.
    """

    success: bool
    receipt: Optional[Receipt] = None
    reason: Optional[PurchaseFailureReason] = None
    message: str = ""

    @classmethod
    def completed(cls, receipt: Receipt) -> "PurchaseResult":
        """Create a result for a completed purchase."""
        return cls(
            success=True,
            receipt=receipt,
            message=(
                f"Sold {receipt.product.name} for {receipt.price}. "
                f"Change: {receipt.change_amount}"
            ),
        )

    @classmethod
    def failed(cls, reason: PurchaseFailureReason) -> "PurchaseResult":
        """Create a failed result."""
        return cls(success=False, reason=reason, message=reason.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        result: dict[str, Any] = {
            "success": self.success,
            "message": self.message,
        }
        if self.receipt:
            result["data"] = self.receipt.to_dict()
        if self.reason:
            result["reason"] = self.reason.value
        return result


@dataclass(frozen=True)
class CashSnapshot:
    """
    Point-in-time copy of the coin pools.

    Attributes:
        vault_coins: Machine-owned coins.
        hopper_coins: Coins inserted by the current customer.
    """

    vault_coins: tuple[tuple[int, int], ...] = field(default_factory=tuple)
    hopper_coins: tuple[tuple[int, int], ...] = field(default_factory=tuple)

    @classmethod
    def from_pools(cls, vault: Mapping[int, int], hopper: Mapping[int, int]) -> "CashSnapshot":
        return cls(vault_coins=_coin_tuple(vault), hopper_coins=_coin_tuple(hopper))

    @property
    def vault(self) -> dict[int, int]:
        return dict(self.vault_coins)

    @property
    def hopper(self) -> dict[int, int]:
        return dict(self.hopper_coins)

    @property
    def vault_total(self) -> CurrencyAmount:
        return CurrencyAmount(sum(d * c for d, c in self.vault_coins))

    @property
    def hopper_total(self) -> CurrencyAmount:
        return CurrencyAmount(sum(d * c for d, c in self.hopper_coins))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "vault": self.vault,
            "hopper": self.hopper,
            "vault_total": self.vault_total.minor_units,
            "hopper_total": self.hopper_total.minor_units,
        }
