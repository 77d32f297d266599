import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = "Local Upload Server"

    # Server binding
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 8080))

    # Storage settings
    UPLOAD_DIR: Path = Path(os.getenv("UPLOAD_DIR", "uploads"))
    MAX_UPLOAD_SIZE: int = 4 * 1024 * 1024 * 1024  # 4 GiB per file
    UPLOAD_CHUNK_SIZE: int = 1024 * 1024  # largest write between two progress events

    # Event feed settings
    EVENT_QUEUE_SIZE: int = 1024
    EVENT_KEEPALIVE_SECONDS: float = 15.0

    # Console settings
    CONSOLE_SERVER_URL: str = os.getenv("CONSOLE_SERVER_URL", "http://127.0.0.1:8080")
    RECONNECT_BASE_DELAY: float = 1.0
    RECONNECT_MAX_DELAY: float = 30.0
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Create the upload directory if it doesn't exist
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)

# Global settings instance
settings = Settings()
