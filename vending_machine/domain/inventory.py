"""
Inventory - In-memory product catalog with stock levels.
"""

from dataclasses import dataclass
from typing import Optional

from vending_machine.core.exceptions import DuplicateProductError, InvalidQuantityError
from vending_machine.core.value_objects import InventoryItem, Product
from vending_machine.loggers import logger


@dataclass
class _Line:
    """Mutable catalog line."""

    product: Product
    quantity: int

    def view(self) -> InventoryItem:
        return InventoryItem(product=self.product, quantity=self.quantity)


class Inventory:
    """
    Product catalog keyed by product id.

    Lines keep insertion order, which is the order products are listed.
    """

    def __init__(self) -> None:
        self._lines: dict[str, _Line] = {}

    def add_new(self, product: Product, quantity: int) -> None:
        """
        Register a new product.

        Args:
            product: Product to add.
            quantity: Initial stock.

        Raises:
            InvalidQuantityError: If quantity is negative.
            DuplicateProductError: If the id is already registered.
        """
        if quantity < 0:
            raise InvalidQuantityError(f"Invalid quantity: {quantity}")
        if product.product_id in self._lines:
            raise DuplicateProductError(
                f"Product {product.product_id} already exists",
                product_id=product.product_id,
            )
        self._lines[product.product_id] = _Line(product, quantity)
        logger.debug(f"Product added: {product.product_id} ({product.name}) x {quantity}")

    def find(self, product_id: str) -> Optional[InventoryItem]:
        line = self._lines.get(product_id)
        return line.view() if line else None

    def decrease_stock(self, product_id: str, amount: int = 1) -> bool:
        """Remove items from stock. False if unknown id or not enough stock."""
        line = self._lines.get(product_id)
        if line is None or line.quantity < amount:
            return False
        line.quantity -= amount
        return True

    def increase_stock(self, product_id: str, amount: int) -> bool:
        """Add items to stock. False if unknown id or non-positive amount."""
        line = self._lines.get(product_id)
        if line is None or amount <= 0:
            return False
        line.quantity += amount
        logger.info(f"Stock of {product_id} increased by {amount} to {line.quantity}")
        return True

    def items(self) -> list[InventoryItem]:
        return [line.view() for line in self._lines.values()]

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._lines
