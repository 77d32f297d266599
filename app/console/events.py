import asyncio
import json
import logging
import httpx
from typing import AsyncIterator, Awaitable, Callable, Optional
from pydantic import ValidationError
from app.api.schemas import ProgressEvent
from app.console.store import ProgressStore
from app.core.config import settings
from app.utils.sse_utils import aiter_sse_data

logger = logging.getLogger("event_feed")

def decode_frame(data: str) -> Optional[ProgressEvent]:
    """
    Decode one feed message, or return None when it is malformed.

    A message is malformed when it is not a JSON object, has no string
    "file" field, or carries a "bytes" value that is not a non-negative
    integer. Strings, booleans and floats are not converted.
    """
    try:
        payload = json.loads(data)
    except ValueError:
        return None
    if not isinstance(payload, dict) or "file" not in payload:
        return None
    try:
        return ProgressEvent.model_validate(payload)
    except ValidationError:
        return None

class EventFeedClient:
    """
    Standing subscription to the server's /events feed.

    Every decoded event goes straight to the progress store, in arrival
    order. httpx does not reconnect by itself, so ``run`` reconnects with
    exponential backoff; events emitted while disconnected are lost.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        store: ProgressStore,
        path: str = "/events",
        base_delay: Optional[float] = None,
        max_delay: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.store = store
        self.path = path
        self.base_delay = settings.RECONNECT_BASE_DELAY if base_delay is None else base_delay
        self.max_delay = settings.RECONNECT_MAX_DELAY if max_delay is None else max_delay
        self._sleep = sleep
        self._stopped = False
        self.connected = False

    def handle_frame(self, data: str) -> Optional[ProgressEvent]:
        event = decode_frame(data)
        if event is None:
            logger.debug(f"Discarding malformed event frame: {data!r}")
            return None
        self.store.apply_event(event)
        return event

    async def consume(self, lines: AsyncIterator[str]) -> int:
        """
        Apply every message found in a stream of SSE lines.

        Returns the number of events applied.
        """
        applied = 0
        async for data in aiter_sse_data(lines):
            if self.handle_frame(data) is not None:
                applied += 1
        return applied

    async def listen_once(self) -> int:
        # No read timeout: the feed may stay quiet between keepalives.
        timeout = httpx.Timeout(settings.REQUEST_TIMEOUT_SECONDS, read=None)
        async with self.client.stream("GET", self.path, timeout=timeout) as response:
            response.raise_for_status()
            self.connected = True
            logger.info(f"Subscribed to event feed at {response.url}")
            return await self.consume(response.aiter_lines())

    async def run(self) -> None:
        """
        Keep the subscription open until ``stop`` is called.
        """
        delay = self.base_delay
        while not self._stopped:
            try:
                await self.listen_once()
                logger.warning("Event feed closed by server")
            except httpx.HTTPError as e:
                logger.warning(f"Event feed error: {str(e)}")

            if self._stopped:
                break
            if self.connected:
                delay = self.base_delay
                self.connected = False

            logger.info(f"Reconnecting to event feed in {delay}s")
            await self._sleep(delay)
            delay = min(delay * 2, self.max_delay)

    def stop(self) -> None:
        self._stopped = True
