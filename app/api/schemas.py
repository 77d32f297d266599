from pydantic import BaseModel, Field, StrictInt
from typing import Annotated, Optional, List

class ProgressEvent(BaseModel):
    file: str
    status: Optional[str] = None  # "progress", "done"
    bytes: Optional[Annotated[StrictInt, Field(ge=0)]] = None

class StoredFile(BaseModel):
    filename: str
    bytes_received: int
    stored_as: str

class UploadResponse(BaseModel):
    files: List[StoredFile]

class ServerInfo(BaseModel):
    ips: List[str]
    port: int
    dir: str

class SetDirRequest(BaseModel):
    dir: str

class GreetRequest(BaseModel):
    name: str

class GreetResponse(BaseModel):
    message: str

class PortResponse(BaseModel):
    port: int
