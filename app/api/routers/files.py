from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from app.api.schemas import UploadResponse, ServerInfo, SetDirRequest
from app.api.dependencies import get_file_service, get_progress_broker
from app.services.file_service import FileService
from app.services.progress_broker import ProgressBroker, event_frames

router = APIRouter(tags=["files"])

@router.post("/upload", response_model=UploadResponse)
async def upload_files(
    request: Request,
    file_service: FileService = Depends(get_file_service)
):
    """
    Store every part named "file" in the active upload directory.

    The body is parsed while it streams in, so progress for each part is
    reported on /events during the transfer, not in this response.
    """
    stored = await file_service.save_multipart(
        request.headers.get("content-type", ""),
        request.stream()
    )
    return UploadResponse(files=stored)

@router.get("/events")
async def stream_events(broker: ProgressBroker = Depends(get_progress_broker)):
    """
    Server-sent event feed of upload progress for all files and clients.
    """
    queue = broker.subscribe()

    async def event_stream():
        try:
            async for frame in event_frames(queue):
                yield frame
        finally:
            broker.unsubscribe(queue)

    headers = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}
    return StreamingResponse(event_stream(), media_type="text/event-stream", headers=headers)

@router.get("/info", response_model=ServerInfo)
async def get_info(file_service: FileService = Depends(get_file_service)):
    """
    Addresses and port the server listens on, and the active upload directory.
    """
    return ServerInfo(**file_service.server_info())

@router.post("/set_dir", response_model=ServerInfo)
async def set_dir(
    body: SetDirRequest,
    file_service: FileService = Depends(get_file_service)
):
    """
    Change the directory later uploads are stored in.
    """
    file_service.set_directory(body.dir)
    return ServerInfo(**file_service.server_info())
