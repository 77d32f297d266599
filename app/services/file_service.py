import logging
import aiofiles
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional
from fastapi import HTTPException, status
from app.core.config import settings
from app.services.progress_broker import ProgressBroker
from app.utils.file_utils import ensure_directory_exists, storage_name
from app.utils.multipart_utils import MultipartStreamReader, PartData, PartStart
from app.utils.net_utils import local_ipv4_addresses

logger = logging.getLogger("file_service")

@dataclass
class _IncomingFile:
    filename: str
    path: Path
    out_file: Any
    written: int = 0

class FileService:
    """
    Service to store uploaded files in the active storage directory and
    report their progress on the event feed.
    """

    def __init__(self, broker: ProgressBroker, upload_dir: Optional[Path] = None):
        self.broker = broker
        self.upload_dir = Path(upload_dir or settings.UPLOAD_DIR).resolve()
        self.max_upload_size = settings.MAX_UPLOAD_SIZE
        self.chunk_size = settings.UPLOAD_CHUNK_SIZE

        ensure_directory_exists(self.upload_dir)

    async def save_multipart(self, content_type: str, body: AsyncIterator[bytes]) -> List[Dict[str, Any]]:
        """
        Store every part named "file" of a multipart body while it arrives.

        Each part is written as soon as the parser hands out its bytes.
        A "progress" event with the cumulative byte count is published when
        the part starts and after every write of at most ``chunk_size``
        bytes, then a "done" event once the file is closed. Events are keyed
        by the filename the client declared. Other parts are skipped.
        """
        reader = MultipartStreamReader(content_type)
        stored = []
        part = None
        try:
            async for event in reader.events(body):
                if isinstance(event, PartStart):
                    if event.name == "file" and event.filename:
                        part = await self._open_part(event.filename)
                elif part is None:
                    continue
                elif isinstance(event, PartData):
                    await self._write_part(part, event.data)
                else:
                    stored.append(await self._finish_part(part))
                    part = None

            if part is not None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Upload of {part.filename} ended early"
                )
        except OSError as e:
            logger.error(f"Error writing upload {part.filename if part else ''}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Could not store upload"
            )
        finally:
            if part is not None:
                await self._discard_part(part)

        if not stored:
            raise HTTPException(status_code=422, detail="No files provided")
        return stored

    async def _open_part(self, filename: str) -> _IncomingFile:
        path = self.upload_dir / storage_name(filename)
        part = _IncomingFile(filename=filename, path=path, out_file=await aiofiles.open(path, "wb"))
        self.broker.progress(filename, 0)
        return part

    async def _write_part(self, part: _IncomingFile, data: bytes) -> None:
        for offset in range(0, len(data), self.chunk_size):
            piece = data[offset:offset + self.chunk_size]
            part.written += len(piece)
            if part.written > self.max_upload_size:
                logger.warning(f"Rejected oversize upload: {part.filename}")
                raise HTTPException(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    detail=f"File {part.filename} exceeds {self.max_upload_size} bytes"
                )
            await part.out_file.write(piece)
            self.broker.progress(part.filename, part.written)

    async def _finish_part(self, part: _IncomingFile) -> Dict[str, Any]:
        await part.out_file.close()
        self.broker.done(part.filename)
        logger.info(f"Stored {part.filename} ({part.written} bytes) at {part.path}")
        return {
            "filename": part.filename,
            "bytes_received": part.written,
            "stored_as": str(part.path)
        }

    async def _discard_part(self, part: _IncomingFile) -> None:
        await part.out_file.close()
        part.path.unlink(missing_ok=True)

    def set_directory(self, directory: str) -> Path:
        """
        Switch the active storage directory, creating it if needed.
        """
        if not directory.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Directory must not be empty"
            )

        new_dir = Path(directory).expanduser().resolve()
        if new_dir.exists() and not new_dir.is_dir():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{new_dir} is not a directory"
            )
        try:
            ensure_directory_exists(new_dir)
        except OSError as e:
            logger.error(f"Cannot create upload directory {new_dir}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot use {new_dir} as upload directory"
            )

        logger.info(f"Upload directory changed: {self.upload_dir} -> {new_dir}")
        self.upload_dir = new_dir
        return new_dir

    def server_info(self) -> Dict[str, Any]:
        """
        Snapshot of where the server listens and where it stores files.
        """
        return {
            "ips": local_ipv4_addresses(),
            "port": settings.PORT,
            "dir": str(self.upload_dir)
        }
