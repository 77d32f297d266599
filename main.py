import logging
import uvicorn
from fastapi import FastAPI
from app.api.routers import files, bridge
from app.core.config import settings
from app.services.bridge_service import server_port

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("upload_server")

# Create FastAPI application
app = FastAPI(title=settings.PROJECT_NAME)

# Include routers
app.include_router(files.router)
app.include_router(bridge.router, prefix="/bridge")

@app.on_event("startup")
async def report_port():
    logger.info(f"Server running on port {server_port()}")

if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
