import logging
import mimetypes
import httpx
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence
from app.console.outcome import Outcome
from app.console.store import ProgressStore

logger = logging.getLogger("upload_submitter")

@dataclass
class SelectedFile:
    name: str
    content: bytes

    @classmethod
    def from_path(cls, path) -> "SelectedFile":
        path = Path(path)
        return cls(name=path.name, content=path.read_bytes())

    @property
    def content_type(self) -> str:
        return mimetypes.guess_type(self.name)[0] or "application/octet-stream"

class UploadSubmitter:
    """
    Sends a selection of files to /upload as one multipart request.

    The response is only checked for transport or HTTP failure; progress is
    observed on the event feed.
    """

    def __init__(self, client: httpx.AsyncClient, store: ProgressStore, path: str = "/upload"):
        self.client = client
        self.store = store
        self.path = path

    async def submit(self, selection: Sequence[SelectedFile]) -> Outcome:
        if not selection:
            raise ValueError("At least one file must be selected")

        for selected in selection:
            self.store.ensure_entry(selected.name)

        # Every part shares the field name "file"
        files = [
            ("file", (selected.name, selected.content, selected.content_type))
            for selected in selection
        ]
        names = ", ".join(selected.name for selected in selection)

        try:
            response = await self.client.post(self.path, files=files)
        except httpx.HTTPError as e:
            logger.error(f"Upload of {names} failed: {str(e)}")
            self.store.record_failure(f"{names} ({str(e)})")
            return Outcome.failure(str(e))

        if response.is_success:
            return Outcome.success(status_code=response.status_code)

        logger.error(f"Upload of {names} rejected with HTTP {response.status_code}")
        self.store.record_failure(f"{names} (HTTP {response.status_code})")
        return Outcome.failure(f"HTTP {response.status_code}", status_code=response.status_code)
