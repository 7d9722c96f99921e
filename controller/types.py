"""Controller-specific data type definitions."""

import mimetypes
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from controller.models.records import Upload


@dataclass(frozen=True)
class LocalFile:
    """
    A file picked by the user, before it becomes an upload record.
    """
    name: str
    size: int
    mime_type: str
    content: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: str) -> "LocalFile":
        """
        Describe a file on disk without reading it.

        The MIME type is guessed from the extension; unknown extensions map to
        application/octet-stream and are rejected by validation.
        """
        mime_type, _ = mimetypes.guess_type(path)
        return cls(
            name=os.path.basename(path),
            size=os.path.getsize(path),
            mime_type=mime_type or "application/octet-stream",
        )


@dataclass(frozen=True)
class EnqueueFailure:
    """A selected file that was not turned into an upload record, and why."""
    file: LocalFile
    reason: str


@dataclass
class EnqueueResult:
    """Upload records created for a selection, and one failure entry per file that could not be prepared."""
    uploads: List[Upload] = field(default_factory=list)
    failures: List[EnqueueFailure] = field(default_factory=list)


@dataclass
class TransferReport:
    """Outcome of one transfer batch, per upload id."""
    completed: List[int] = field(default_factory=list)
    failed: Dict[int, str] = field(default_factory=dict)
    cancelled: List[int] = field(default_factory=list)
    session_id: Optional[int] = None
    session_error: Optional[str] = None

    @property
    def all_success(self) -> bool:
        return not self.failed and not self.cancelled


@dataclass(frozen=True)
class UploadSummary:
    """Counts per lifecycle status and the total size of the cached uploads."""
    total: int
    pending: int
    uploading: int
    completed: int
    error: int
    total_size: int
