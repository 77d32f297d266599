import json
from typing import Any, AsyncIterator, Dict, Optional

KEEPALIVE_FRAME = ": keepalive\n\n"

def encode_sse_frame(payload: Dict[str, Any]) -> str:
    """
    Encode one event as a server-sent events message.

    Each message carries exactly one JSON object on a single data line.
    """
    return f"data: {json.dumps(payload, separators=(',', ':'))}\n\n"

class SSEDecoder:
    """
    Incremental decoder for a text/event-stream body.

    Feed it lines (without their trailing newline); it returns the joined
    data of a message once the blank line terminating that message arrives.
    Comment lines and fields other than "data" are ignored.
    """

    def __init__(self):
        self._data_lines = []

    def feed(self, line: str) -> Optional[str]:
        line = line.rstrip("\r")
        if not line:
            if not self._data_lines:
                return None
            data = "\n".join(self._data_lines)
            self._data_lines = []
            return data
        if line.startswith(":"):
            return None

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "data":
            self._data_lines.append(value)
        return None

async def aiter_sse_data(lines: AsyncIterator[str]) -> AsyncIterator[str]:
    """
    Yield the data payload of each complete message in a streaming body.
    """
    decoder = SSEDecoder()
    async for line in lines:
        data = decoder.feed(line)
        if data is not None:
            yield data
