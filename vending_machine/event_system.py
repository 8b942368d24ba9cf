"""
Event system for the vending machine.

This module provides a publish-subscribe event system for handling
machine events like coin insertion, purchases and cash collection.
"""

import asyncio
import inspect
from enum import Enum
from typing import Any, Callable, Union

from vending_machine.loggers import logger


class EventType(str, Enum):
    """
    Enumeration of event types in the vending machine.

    These events are published when customer or operator actions
    change the machine state.
    """

    COIN_INSERTED = "coin_inserted"
    COINS_REFUNDED = "coins_refunded"
    PURCHASE_COMPLETED = "purchase_completed"
    PURCHASE_FAILED = "purchase_failed"
    FLOAT_ADDED = "float_added"
    CASH_COLLECTED = "cash_collected"
    STOCK_ADDED = "stock_added"


class EventPublisher:
    """
    Publisher for sending events to the event queue.

    Attributes:
        event_queue: The asyncio queue to publish events to.
    """

    def __init__(self, event_queue: asyncio.Queue) -> None:
        """
        Initialize the event publisher.

        Args:
            event_queue: The asyncio queue for event distribution.
        """
        self.event_queue = event_queue

    async def publish(self, event_type: Union[EventType, str], **data: Any) -> None:
        """
        Publish an event to the queue.

        Args:
            event_type: The type of event to publish.
            **data: Additional event data as keyword arguments.
        """
        event = {"type": event_type, **data}
        await self.event_queue.put(event)


class EventConsumer:
    """
    Consumer for processing events from the event queue.

    Handles event dispatch to registered handlers based on event type.

    Attributes:
        event_queue: The asyncio queue to consume events from.
        handlers: Mapping of event types to their handler functions.
        is_consuming: Flag indicating if the consumer is active.
    """

    def __init__(self, event_queue: asyncio.Queue) -> None:
        """
        Initialize the event consumer.

        Args:
            event_queue: The asyncio queue to consume events from.
        """
        self.event_queue = event_queue
        self.handlers: dict[Union[EventType, str], list[Callable]] = {}
        self.is_consuming = False
        self._consume_task: asyncio.Task | None = None

    def register_handler(
        self,
        event_type: Union[EventType, str],
        handler: Callable,
    ) -> None:
        """
        Register a handler for an event type.

        Args:
            event_type: The event type to handle.
            handler: The handler function (sync or async).
        """
        self.handlers.setdefault(event_type, []).append(handler)

    def unregister_handler(
        self,
        event_type: Union[EventType, str],
        handler: Callable,
    ) -> None:
        """
        Unregister a handler for an event type.

        Args:
            event_type: The event type.
            handler: The handler function to remove.
        """
        handlers = self.handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    async def process_event(self, event: dict[str, Any]) -> None:
        """
        Process a single event by calling all registered handlers.

        Handler failures are logged and do not stop other handlers.

        Args:
            event: The event dictionary containing type and data.
        """
        handlers = self.handlers.get(event.get("type"), [])
        if not handlers:
            return

        pending = []
        for handler in handlers:
            try:
                result = handler(event)
            except Exception as e:
                logger.error(f"Event handler error for {event.get('type')}: {e}")
                continue
            if inspect.isawaitable(result):
                pending.append(result)

        if pending:
            results = await asyncio.gather(*pending, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error(f"Event handler error for {event.get('type')}: {result}")

    async def _consume_loop(self) -> None:
        """Main consumption loop that processes events from the queue."""
        while self.is_consuming:
            try:
                # Timeout lets the loop notice is_consuming going False
                event = await asyncio.wait_for(self.event_queue.get(), timeout=0.5)
            except asyncio.TimeoutError:
                continue
            try:
                await self.process_event(event)
            finally:
                self.event_queue.task_done()

    async def start_consuming(self) -> None:
        """Start the event consumption loop."""
        if self.is_consuming:
            return

        self.is_consuming = True
        self._consume_task = asyncio.create_task(self._consume_loop())

    async def stop_consuming(self) -> None:
        """Stop processing events and cancel the consumption task."""
        self.is_consuming = False

        if self._consume_task:
            self._consume_task.cancel()
            try:
                await self._consume_task
            except asyncio.CancelledError:
                pass
            self._consume_task = None
