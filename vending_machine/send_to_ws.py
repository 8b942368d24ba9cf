"""
WebSocket client for sending events to the frontend.

This module provides utilities for sending real-time machine events
(coins inserted, purchases, refunds) to connected WebSocket clients.
"""

import json
from typing import Any, Optional

import websockets
from websockets.exceptions import WebSocketException

from vending_machine.configs import WS_URL
from vending_machine.loggers import logger


async def send_to_ws(
    event: str,
    data: Optional[dict[str, Any]] = None,
    ws_url: str = WS_URL,
) -> bool:
    """
    Send an event to the WebSocket server.

    Args:
        event: The event name/type to send.
        data: Optional dictionary of event data.
        ws_url: WebSocket URL to connect to (default from config).

    Returns:
        True if the message was sent successfully, False otherwise.

    Example:
        await send_to_ws(
            event='coin_inserted',
            data={'coin_value': 1000, 'inserted_amount': 1000},
        )
    """
    message = {"event": event, "data": data}

    try:
        async with websockets.connect(ws_url) as ws:
            await ws.send(json.dumps(message, ensure_ascii=False))
            logger.debug(f"WebSocket message sent: {event}")
            return True
    except WebSocketException as e:
        logger.warning(f"WebSocket connection error: {e}")
        return False
    except OSError as e:
        logger.error(f"Failed to send WebSocket message: {e}")
        return False
