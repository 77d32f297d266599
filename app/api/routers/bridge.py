from fastapi import APIRouter
from app.api.schemas import GreetRequest, GreetResponse, PortResponse
from app.services import bridge_service

router = APIRouter(tags=["bridge"])

@router.post("/greet", response_model=GreetResponse)
async def greet(body: GreetRequest):
    return GreetResponse(message=bridge_service.greet(body.name))

@router.get("/server_port", response_model=PortResponse)
async def server_port():
    """
    Port the upload server listens on.
    """
    return PortResponse(port=bridge_service.server_port())
