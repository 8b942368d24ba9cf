"""
Command Handler - Routes Redis commands to service methods.

Provides clean command routing with validation and error handling.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from vending_machine.core.exceptions import CashRegisterInconsistencyError
from vending_machine.loggers import logger


# Type alias for command handlers
CommandHandlerFunc = Callable[..., Awaitable[dict[str, Any]]]


@dataclass
class CommandResponse:
    """
    Standardized response for command execution.

    Attributes:
        command_id: The ID of the executed command.
        success: Whether the command succeeded.
        message: Human-readable message.
        data: Optional response data.
        reason: Failure reason code of a refused purchase.
    """

    command_id: Optional[int] = None
    success: bool = False
    message: Optional[str] = None
    data: Any = None
    reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert the response to a dictionary."""
        return {
            "command_id": self.command_id,
            "success": self.success,
            "message": self.message,
            "data": self.data,
            "reason": self.reason,
        }


@dataclass
class CommandDefinition:
    """
    Definition of a command.

    Attributes:
        name: Command name.
        handler: Handler function.
        required_args: List of required argument names.
        description: Human-readable description.
    """

    name: str
    handler: CommandHandlerFunc
    required_args: list[str]
    description: str = ""


class CommandHandler:
    """
    Routes commands to their appropriate handlers.

    Provides a clean way to register and dispatch commands
    to their handler methods on the vending service.
    """

    def __init__(self, service: Any) -> None:
        """
        Initialize the command handler.

        Args:
            service: The VendingService instance.
        """
        self._service = service
        self._commands: dict[str, CommandDefinition] = {}
        self._register_default_commands()

    def _register_default_commands(self) -> None:
        """Register all default command handlers."""
        # Customer flow
        self.register(
            "insert_coin",
            self._service.insert_coin,
            ["denomination"],
            "Insert one coin (1, 2, 5 or 10 rubles)",
        )
        self.register(
            "buy",
            self._service.buy,
            ["product_id"],
            "Buy a product with the inserted coins",
        )
        self.register(
            "cancel",
            self._service.cancel,
            [],
            "Cancel and return inserted coins",
        )
        self.register(
            "status",
            self._service.status,
            [],
            "Get inserted amount and products",
        )
        self.register(
            "list_products",
            self._service.list_products,
            [],
            "List products with stock",
        )

        # Operator commands
        self.register(
            "admin_add_stock",
            self._service.admin_add_stock,
            ["pin", "product_id", "amount"],
            "Restock a product",
        )
        self.register(
            "admin_add_float",
            self._service.admin_add_float,
            ["pin", "denomination", "count"],
            "Add coins to the vault",
        )
        self.register(
            "admin_collect_cash",
            self._service.admin_collect_cash,
            ["pin"],
            "Collect all cash from the vault",
        )
        self.register(
            "admin_cash_snapshot",
            self._service.admin_cash_snapshot,
            ["pin"],
            "Get vault and hopper content",
        )

    def register(
        self,
        command_name: str,
        handler: CommandHandlerFunc,
        required_args: list[str],
        description: str = "",
    ) -> None:
        """
        Register a command handler.

        Args:
            command_name: The name of the command.
            handler: The async handler function.
            required_args: List of required argument names.
            description: Human-readable description.
        """
        self._commands[command_name] = CommandDefinition(
            name=command_name,
            handler=handler,
            required_args=required_args,
            description=description,
        )

    def get_available_commands(self) -> list[dict[str, Any]]:
        """Get list of available commands with their descriptions."""
        return [
            {
                "name": cmd.name,
                "required_args": cmd.required_args,
                "description": cmd.description,
            }
            for cmd in self._commands.values()
        ]

    async def execute(self, command_data: dict[str, Any]) -> dict[str, Any]:
        """
        Execute a command based on command data.

        Args:
            command_data: Dictionary containing 'command', 'command_id', and 'data'.

        Returns:
            Response dictionary with execution result.

        Raises:
            CashRegisterInconsistencyError: Propagated unchanged; the
                machine state can no longer be trusted.
        """
        command = command_data.get("command")
        command_id = command_data.get("command_id")
        data = command_data.get("data", {}) or {}

        response = CommandResponse(command_id=command_id)

        if command not in self._commands:
            logger.warning(f"Unknown command: {command}")
            response.message = f"Unknown command: {command}"
            return response.to_dict()

        definition = self._commands[command]

        kwargs = {arg: data.get(arg) for arg in definition.required_args}
        missing = [arg for arg in definition.required_args if kwargs.get(arg) is None]
        if missing:
            response.message = f"Missing required arguments: {missing}"
            return response.to_dict()

        try:
            result = await definition.handler(**kwargs)
        except CashRegisterInconsistencyError as e:
            logger.critical(f"Cash register inconsistency during '{command}': {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error executing command '{command}': {e}")
            response.success = False
            response.message = f"Error: {e}"
            return response.to_dict()

        if isinstance(result, dict):
            response.success = result.get("success", False)
            response.message = result.get("message")
            response.data = result.get("data")
            response.reason = result.get("reason")
        else:
            response.success = True
            response.data = result

        return response.to_dict()


async def vending_machine_commands(
    command_data: dict[str, Any],
    service: Any,
) -> dict[str, Any]:
    """
    Execute a command on the vending service.

    This is the main entry point for command execution from Redis pub/sub.

    Args:
        command_data: Dictionary containing command name, ID, and data.
        service: The VendingService instance.

    Returns:
        Response dictionary with execution result.
    """
    handler = CommandHandler(service)
    return await handler.execute(command_data)
