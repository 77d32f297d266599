from app.core.config import settings

def greet(name: str) -> str:
    return f"Hello, {name}! You've been greeted from the upload server!"

def server_port() -> int:
    """
    Port the HTTP server listens on.
    """
    return settings.PORT
