from typing import Callable, List, Optional
from app.api.schemas import ServerInfo

class RenderedLine:
    """
    Handle to one visible line of the progress list.

    Owned by whoever created it; its text is replaced in place.
    """

    def __init__(self, text: str = ""):
        self.text = text

    def __repr__(self):
        return f"RenderedLine({self.text!r})"

class ProgressView:
    """
    Append-only list of rendered lines, in the order they were created.

    ``on_change`` is called with the line after every create or update,
    which is how a terminal front-end echoes changes as they happen.
    """

    def __init__(self, on_change: Optional[Callable[[RenderedLine], None]] = None):
        self._lines: List[RenderedLine] = []
        self.on_change = on_change

    def append(self, text: str) -> RenderedLine:
        line = RenderedLine(text)
        self._lines.append(line)
        self._notify(line)
        return line

    def update(self, line: RenderedLine, text: str) -> None:
        line.text = text
        self._notify(line)

    @property
    def lines(self) -> List[str]:
        return [line.text for line in self._lines]

    def __len__(self):
        return len(self._lines)

    def _notify(self, line: RenderedLine) -> None:
        if self.on_change:
            self.on_change(line)

class InfoPanel:
    """
    Server info text and the directory input field of the configurator.
    """

    def __init__(self):
        self.info_text = ""
        self.dir_input = ""

    def show(self, info: ServerInfo) -> None:
        self.info_text = f"IPs: {', '.join(info.ips)} Port: {info.port}"
        self.dir_input = info.dir
