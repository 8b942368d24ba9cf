"""
Application layer - Application services and use cases.

Contains:
- Vending service
- Command handlers
"""

from .vending_service import VendingService
from .command_handler import CommandHandler, CommandResponse, vending_machine_commands


__all__ = [
    "VendingService",
    "CommandHandler",
    "CommandResponse",
    "vending_machine_commands",
]
