from dataclasses import dataclass
from typing import AsyncIterator, Dict, List, Optional, Union
from fastapi import HTTPException, status
from python_multipart.exceptions import FormParserError, MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

@dataclass
class PartStart:
    name: str
    filename: Optional[str]

@dataclass
class PartData:
    data: bytes

@dataclass
class PartEnd:
    pass

PartEvent = Union[PartStart, PartData, PartEnd]

class MultipartStreamReader:
    """
    Incremental reader for a multipart/form-data request body.

    Part data is handed out as soon as the parser has seen it, so a caller
    can store and report a file while the rest of the body is still on the
    wire. The parser's callbacks are synchronous; they only queue events,
    which ``events`` yields after every chunk fed to the parser.
    """

    def __init__(self, content_type: str):
        media_type, params = parse_options_header(content_type)
        if media_type != b"multipart/form-data" or not params.get(b"boundary"):
            raise HTTPException(
                status_code=422,
                detail="Expected a multipart/form-data body"
            )

        self._pending: List[PartEvent] = []
        self._headers: Dict[bytes, bytes] = {}
        self._header_field = b""
        self._header_value = b""
        try:
            self._parser = MultipartParser(params[b"boundary"], {
                "on_part_begin": self._on_part_begin,
                "on_part_data": self._on_part_data,
                "on_part_end": self._on_part_end,
                "on_header_field": self._on_header_field,
                "on_header_value": self._on_header_value,
                "on_header_end": self._on_header_end,
                "on_headers_finished": self._on_headers_finished,
            })
        except FormParserError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Malformed multipart body: {str(e)}"
            )

    async def events(self, stream: AsyncIterator[bytes]) -> AsyncIterator[PartEvent]:
        try:
            async for chunk in stream:
                self._parser.write(chunk)
                for event in self._take_pending():
                    yield event
            self._parser.finalize()
        except MultipartParseError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Malformed multipart body: {str(e)}"
            )
        for event in self._take_pending():
            yield event

    def _take_pending(self) -> List[PartEvent]:
        pending, self._pending = self._pending, []
        return pending

    def _on_part_begin(self) -> None:
        self._headers = {}

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def _on_header_end(self) -> None:
        self._headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def _on_headers_finished(self) -> None:
        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        filename = options.get(b"filename")
        self._pending.append(PartStart(
            name=options.get(b"name", b"").decode("utf-8", errors="replace"),
            filename=filename.decode("utf-8", errors="replace") if filename is not None else None,
        ))

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._pending.append(PartData(data[start:end]))

    def _on_part_end(self) -> None:
        self._pending.append(PartEnd())
