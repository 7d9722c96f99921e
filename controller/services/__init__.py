"""Record services: request construction for each record type."""

from controller.services.session_service import UploadSessionService
from controller.services.task_service import TaskService
from controller.services.upload_service import UploadService

__all__ = [
    "TaskService",
    "UploadService",
    "UploadSessionService",
]
