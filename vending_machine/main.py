"""
Vending Machine Service - Main entry point.

Builds the machine with its default float and catalog, then serves
customer and operator commands received over Redis pub/sub.
"""

import asyncio
import json
from typing import Optional

from redis.asyncio import Redis

from vending_machine.application.command_handler import CommandHandler
from vending_machine.application.vending_service import VendingService
from vending_machine.configs import DEFAULT_FLOAT, DEFAULT_PRODUCTS
from vending_machine.core.exceptions import CashRegisterInconsistencyError
from vending_machine.core.value_objects import CurrencyAmount, Product
from vending_machine.domain.cash_register import CashRegister
from vending_machine.domain.change_strategy import greedy_change
from vending_machine.domain.inventory import Inventory
from vending_machine.domain.machine import PinVerifier, VendingMachine
from vending_machine.infrastructure.settings import Settings, get_settings
from vending_machine.loggers import logger


# =============================================================================
# Machine Bootstrap
# =============================================================================


def build_machine(settings: Optional[Settings] = None) -> VendingMachine:
    """
    Create a machine stocked with the default catalog and coin float.

    Args:
        settings: Application settings (singleton by default).

    Returns:
        Ready-to-use VendingMachine.
    """
    settings = settings or get_settings()

    inventory = Inventory()
    for product_id, name, price, kind, quantity in DEFAULT_PRODUCTS:
        inventory.add_new(
            Product(product_id, name, CurrencyAmount.from_major_units(price), kind),
            quantity,
        )

    cash = CashRegister(greedy_change)
    for denomination, count in DEFAULT_FLOAT.items():
        cash.add_float(denomination, count)

    logger.info(
        f"Machine ready: {len(inventory)} products, float {cash.vault_balance}"
    )
    return VendingMachine(inventory, cash, PinVerifier(settings.machine.admin_pin))


# =============================================================================
# Redis Command Listener
# =============================================================================


async def listen_to_redis(
    redis: Redis,
    service: VendingService,
    settings: Optional[Settings] = None,
) -> None:
    """
    Listen for commands on Redis pub/sub and process them.

    Malformed or failing commands are logged and skipped. A cash
    register inconsistency stops the listener.

    Args:
        redis: Redis client instance.
        service: VendingService for command execution.
        settings: Application settings (singleton by default).
    """
    settings = settings or get_settings()
    command_channel = settings.machine.command_channel
    response_channel = settings.machine.response_channel
    handler = CommandHandler(service)

    pubsub = redis.pubsub()
    await pubsub.subscribe(command_channel)
    logger.info(f"Listening for commands on channel: {command_channel}")

    async for message in pubsub.listen():
        if message.get("type") != "message":
            continue

        raw_data = message.get("data")

        # Handle ping messages
        if raw_data == "ping":
            continue

        try:
            command = json.loads(raw_data)
            logger.info(f"Received command: {command}")

            response = await handler.execute(command)

            await redis.publish(response_channel, json.dumps(response, ensure_ascii=False))
            logger.info(f"Response sent to {response_channel}: {response}")

        except CashRegisterInconsistencyError:
            logger.critical("Stopping command listener: cash register state is inconsistent")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"Command parsing error: {e}")
        except Exception as e:
            logger.error(f"Unexpected error processing command: {e}")


# =============================================================================
# Main Entry Point
# =============================================================================


async def main() -> None:
    """
    Main entry point for the vending machine service.

    Initializes the machine and Redis connection, starts event
    forwarding and the command listener.
    """
    settings = get_settings()

    redis = Redis(
        host=settings.redis.host,
        port=settings.redis.port,
        decode_responses=settings.redis.decode_responses,
    )

    service = VendingService(build_machine(settings))
    await service.start()

    try:
        await listen_to_redis(redis, service, settings)
    finally:
        await service.shutdown()
        await redis.aclose()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Application stopped by user")
