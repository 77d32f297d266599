import pytest
from fastapi.testclient import TestClient
from main import app
from app.api.dependencies import get_file_service, get_progress_broker
from app.console.store import ProgressStore
from app.console.view import ProgressView
from app.services.file_service import FileService
from app.services.progress_broker import ProgressBroker

@pytest.fixture
def broker():
    return ProgressBroker()

@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"

@pytest.fixture
def file_service(broker, upload_dir):
    return FileService(broker, upload_dir)

@pytest.fixture
def test_client(broker, file_service):
    """Create a test client whose uploads land in a temporary directory."""
    app.dependency_overrides[get_progress_broker] = lambda: broker
    app.dependency_overrides[get_file_service] = lambda: file_service
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def subscriber(broker):
    """A queue registered on the broker, as an /events connection would have."""
    queue = broker.subscribe()
    yield queue
    broker.unsubscribe(queue)

@pytest.fixture
def view():
    return ProgressView()

@pytest.fixture
def store(view):
    return ProgressStore(view)
