import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional
from app.api.schemas import ProgressEvent
from app.console.view import ProgressView, RenderedLine

logger = logging.getLogger("progress_store")

class UploadStatus(str, Enum):
    STARTING = "starting"
    IN_PROGRESS = "in_progress"
    DONE = "done"

@dataclass
class ProgressEntry:
    filename: str
    status: UploadStatus = UploadStatus.STARTING
    bytes_transferred: int = 0
    element: Optional[RenderedLine] = None

def render(entry: ProgressEntry) -> str:
    """
    Display text for an entry; depends on nothing but the entry's state.
    """
    if entry.status is UploadStatus.IN_PROGRESS:
        return f"{entry.filename}: {entry.bytes_transferred} bytes"
    if entry.status is UploadStatus.DONE:
        return f"{entry.filename}: complete"
    return f"{entry.filename}: starting"

class ProgressStore:
    """
    Per-filename upload state as last reported by the event feed.

    Holds at most one entry per filename. Entries are created on first
    sighting, rendered into the view in first-seen order and never removed.
    Events are applied as they arrive: the latest event for a file always
    wins, even when it reports fewer bytes than an earlier one, because the
    feed carries nothing that would tell a stale event from a fresh one.

    Not thread-safe. All calls must come from the session's event loop.
    """

    def __init__(self, view: Optional[ProgressView] = None):
        self.view = view if view is not None else ProgressView()
        self._entries: Dict[str, ProgressEntry] = {}
        self.failures: List[RenderedLine] = []

    def __contains__(self, filename: str) -> bool:
        return filename in self._entries

    def __len__(self):
        return len(self._entries)

    def get(self, filename: str) -> Optional[ProgressEntry]:
        return self._entries.get(filename)

    def entries(self) -> List[ProgressEntry]:
        return list(self._entries.values())

    def ensure_entry(self, filename: str) -> ProgressEntry:
        """
        Return the entry for ``filename``, creating a "starting" one if needed.
        """
        entry = self._entries.get(filename)
        if entry is None:
            entry = ProgressEntry(filename=filename)
            entry.element = self.view.append(render(entry))
            self._entries[filename] = entry
        return entry

    def apply_event(self, event: ProgressEvent) -> ProgressEntry:
        entry = self.ensure_entry(event.file)

        if event.status == "progress":
            entry.status = UploadStatus.IN_PROGRESS
            if event.bytes is not None:
                entry.bytes_transferred = event.bytes
        elif event.status == "done":
            entry.status = UploadStatus.DONE
        else:
            logger.debug(f"Ignoring unknown status {event.status!r} for {event.file}")
            return entry

        self.view.update(entry.element, render(entry))
        return entry

    def record_failure(self, detail: str) -> RenderedLine:
        """
        Show a failed submission. Kept apart from feed-driven entries.
        """
        line = self.view.append(f"upload failed: {detail}")
        self.failures.append(line)
        return line
