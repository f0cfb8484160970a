# supportdesk/client/realtime.py
"""
Subscriber side of the `/ws/tickets` channel.

The feed reconnects on its own after any transport failure. Events sent while
disconnected are lost; callers that care should reload full state.
"""

import asyncio
import contextlib
import inspect
import json
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

import websockets
from websockets.exceptions import WebSocketException

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


class TicketFeed:
    def __init__(self, url: str, reconnect_delay: float = 2.0):
        self.url = url
        self.reconnect_delay = reconnect_delay
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)
        self._task: Optional[asyncio.Task] = None
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def on(self, event_type: str, handler: Handler):
        """Registers `handler(data)`; coroutine functions are awaited."""
        self._handlers[event_type].append(handler)

    async def start(self):
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        self._connected = False

    async def _run(self):
        while True:
            try:
                async with websockets.connect(self.url) as ws:
                    self._connected = True
                    logger.info(f"Subscribed to {self.url}")
                    async for message in ws:
                        await self._dispatch(message)
                logger.warning(f"Feed closed by server, reconnecting in {self.reconnect_delay}s")
            except (OSError, asyncio.TimeoutError, WebSocketException) as e:
                logger.warning(f"Feed connection lost ({e}), reconnecting in {self.reconnect_delay}s")
            finally:
                self._connected = False
            await asyncio.sleep(self.reconnect_delay)

    async def _dispatch(self, raw):
        try:
            frame = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring non-JSON frame: {raw!r:.80}")
            return
        if not isinstance(frame, dict):
            return

        for handler in self._handlers.get(frame.get("type"), []):
            try:
                result = handler(frame.get("data"))
                if inspect.isawaitable(result):
                    await result
            except Exception:
                # One bad handler must not kill the subscription
                logger.exception(f"Handler for {frame.get('type')} failed")
