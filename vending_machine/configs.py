"""
Configuration module for the vending machine.

This module provides centralized static configuration: external service
endpoints, log file location, and the default coin float and product
catalog loaded when the machine starts.
"""

import os
from typing import Final

from vending_machine.core.value_objects import Denomination, ProductKind


# =============================================================================
# External Services Configuration
# =============================================================================

# Empty value disables the Loki handler
LOKI_URL: Final[str] = os.environ.get("VENDING_LOKI_URL", "")
WS_URL: Final[str] = os.environ.get("VENDING_WS_URL", "ws://localhost:8005/ws")


# =============================================================================
# Logging Configuration
# =============================================================================

# Empty value disables the file handler
LOG_FILE: Final[str] = os.environ.get("VENDING_LOG_FILE", "logs/vending_machine.log")
LOG_APP_NAME: Final[str] = "vending_machine"


# =============================================================================
# Machine Bootstrap
# =============================================================================

DEFAULT_FLOAT: Final[dict[Denomination, int]] = {
    Denomination.R10: 5,
    Denomination.R5: 5,
    Denomination.R2: 10,
    Denomination.R1: 20,
}

# (id, name, price in rubles, kind, quantity)
DEFAULT_PRODUCTS: Final[tuple[tuple[str, str, str, ProductKind, int], ...]] = (
    ("D1", "Вода", "2", ProductKind.DRINK, 10),
    ("D2", "Кола", "7", ProductKind.DRINK, 8),
    ("S1", "Сникерс", "5", ProductKind.SNACK, 5),
)
