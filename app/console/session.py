import asyncio
import logging
import httpx
from typing import Optional, Sequence
from app.console.directory import DirectoryConfigurator
from app.console.events import EventFeedClient
from app.console.outcome import Outcome
from app.console.store import ProgressStore
from app.console.submitter import SelectedFile, UploadSubmitter
from app.console.view import InfoPanel, ProgressView
from app.core.config import settings

logger = logging.getLogger("console_session")

class ConsoleSession:
    """
    One upload console, from ``start`` to ``close``.

    Owns the progress store and hands it to the feed client and the
    submitter. Everything runs on a single event loop, so the store needs no
    locking.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        view: Optional[ProgressView] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url or settings.CONSOLE_SERVER_URL
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
        )
        self.store = ProgressStore(view)
        self.panel = InfoPanel()
        self.feed = EventFeedClient(self.client, self.store)
        self.submitter = UploadSubmitter(self.client, self.store)
        self.configurator = DirectoryConfigurator(self.client, self.panel)
        self._feed_task: Optional[asyncio.Task] = None

    @property
    def view(self) -> ProgressView:
        return self.store.view

    async def start(self) -> Outcome:
        """
        Open the event feed and load the server info once.
        """
        if self._feed_task is not None:
            raise RuntimeError("Console session already started")
        self._feed_task = asyncio.create_task(self.feed.run())
        return await self.configurator.fetch_info()

    async def upload(self, selection: Sequence[SelectedFile]) -> Outcome:
        return await self.submitter.submit(selection)

    async def upload_paths(self, paths: Sequence[str]) -> Outcome:
        return await self.upload([SelectedFile.from_path(p) for p in paths])

    async def set_directory(self, path: str) -> Outcome:
        return await self.configurator.set_directory(path)

    async def close(self) -> None:
        self.feed.stop()
        try:
            if self._feed_task is not None:
                task, self._feed_task = self._feed_task, None
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        finally:
            await self.client.aclose()
            logger.info("Console session closed")

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
