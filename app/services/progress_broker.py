import asyncio
import logging
from typing import Any, AsyncGenerator, Dict, Optional, Set
from app.core.config import settings
from app.utils.sse_utils import encode_sse_frame, KEEPALIVE_FRAME

logger = logging.getLogger("progress_broker")

class ProgressBroker:
    """
    Fan-out of upload progress events to every connected /events subscriber.

    Each subscriber owns a bounded queue. Publishing never waits: when a
    subscriber's queue is full the event is dropped for that subscriber
    only, which keeps one slow client from stalling uploads.
    """

    def __init__(self, queue_size: Optional[int] = None):
        self.queue_size = settings.EVENT_QUEUE_SIZE if queue_size is None else queue_size
        self._subscribers: Set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        queue = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers.add(queue)
        logger.info(f"Event subscriber connected ({len(self._subscribers)} active)")
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)
        logger.info(f"Event subscriber disconnected ({len(self._subscribers)} active)")

    def publish(self, event: Dict[str, Any]) -> None:
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(f"Dropping event for slow subscriber: {event}")

    def progress(self, filename: str, bytes_received: int) -> None:
        self.publish({"file": filename, "status": "progress", "bytes": bytes_received})

    def done(self, filename: str) -> None:
        self.publish({"file": filename, "status": "done"})

async def event_frames(queue: asyncio.Queue, keepalive: Optional[float] = None) -> AsyncGenerator[str, None]:
    """
    Turn a subscriber queue into server-sent event frames.

    Emits a comment frame after ``keepalive`` idle seconds so proxies keep
    the connection open.
    """
    if keepalive is None:
        keepalive = settings.EVENT_KEEPALIVE_SECONDS
    while True:
        try:
            event = await asyncio.wait_for(queue.get(), timeout=keepalive)
        except asyncio.TimeoutError:
            yield KEEPALIVE_FRAME
            continue
        yield encode_sse_frame(event)
