"""Checks applied before anything is sent to the record store."""

from common.constants import ALLOWED_MIME_TYPES, MAX_FILE_SIZE_BYTES
from common.exceptions import FileValidationError, ValidationError
from common.utils import format_file_size
from controller.types import LocalFile


def validate_file(file: LocalFile) -> bool:
    """
    Check a candidate file against the upload limits.

    Args:
        file: File descriptor with size and MIME type

    Returns:
        True when the file is accepted

    Raises:
        FileValidationError: If the file is larger than 10 MiB or its type is not allowed
    """
    if file.size > MAX_FILE_SIZE_BYTES:
        raise FileValidationError(
            f"File size exceeds {format_file_size(MAX_FILE_SIZE_BYTES)} limit. "
            f"Current size: {format_file_size(file.size)}",
            reason="size",
        )

    if file.mime_type not in ALLOWED_MIME_TYPES:
        raise FileValidationError(
            f'File type "{file.mime_type}" is not allowed. '
            "Supported types: images, PDF, Word documents, text, CSV and JSON files.",
            reason="type",
        )

    return True


def validate_task_name(name) -> str:
    """
    Return the task name if it has visible content.

    Raises:
        ValidationError: If the name is missing or blank
    """
    if name is None or not str(name).strip():
        raise ValidationError("Task name is required")
    return name
