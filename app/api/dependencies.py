from app.services.file_service import FileService
from app.services.progress_broker import ProgressBroker

# One broker and one storage location shared by every request
progress_broker = ProgressBroker()
file_service = FileService(progress_broker)

def get_progress_broker() -> ProgressBroker:
    return progress_broker

# Dependency to get the FileService instance
def get_file_service() -> FileService:
    """
    Dependency to get the shared FileService instance.
    """
    return file_service
