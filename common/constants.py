"""Project-wide constants (record types, upload limits, progress simulation)."""

UPLOAD_RECORD_TYPE: str = "upload_c"
TASK_RECORD_TYPE: str = "task_c"
UPLOAD_SESSION_RECORD_TYPE: str = "upload_session_c"

MAX_FILE_SIZE_BYTES: int = 10 * 1024 * 1024  # 10 MiB

ALLOWED_MIME_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "text/csv",
    "application/json",
)

PROGRESS_STEP_PERCENT: int = 10
PROGRESS_INTERVAL_SECONDS: float = 0.15

DEFAULT_PAGE_SIZE: int = 100

FILTER_ALL: str = "All"
