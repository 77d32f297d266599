import asyncio
import httpx

def drain(queue: asyncio.Queue) -> list:
    """Everything published to a subscriber queue so far."""
    events = []
    while not queue.empty():
        events.append(queue.get_nowait())
    return events

def mock_client(handler) -> httpx.AsyncClient:
    """An httpx client that answers every request with ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://testserver")
