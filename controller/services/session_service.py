"""Upload session service."""

import json
from typing import Optional, Sequence

from common.constants import UPLOAD_SESSION_RECORD_TYPE
from common.logging_config import get_logger
from common.utils import utc_now
from controller.models.records import Upload, UploadSession
from controller.services.base import RecordService

logger = get_logger(__name__)


class UploadSessionService(RecordService[UploadSession]):
    record_type = UPLOAD_SESSION_RECORD_TYPE
    label = "Upload session"
    model = UploadSession
    fields = (
        "Name",
        "files_c",
        "total_size_c",
        "started_at_c",
        "completed_at_c",
        "CreatedOn",
    )

    async def create_session(self, uploads: Sequence[Upload]) -> UploadSession:
        """
        Open a session over a batch of uploads.

        Args:
            uploads: Upload records the batch will transfer

        Returns:
            The created session, started now and not yet completed
        """
        started_at = utc_now().isoformat()
        session = await self._create({
            "Name": f"Upload Session {started_at}",
            "files_c": json.dumps([upload.id for upload in uploads]),
            "total_size_c": sum(upload.size for upload in uploads),
            "started_at_c": started_at,
            "completed_at_c": None,
        })
        logger.info(f"Opened upload session {session.id} for {len(uploads)} file(s)")
        return session

    async def complete_session(self, session_id: int) -> Optional[UploadSession]:
        session = await self._update(session_id, {"completed_at_c": utc_now().isoformat()})
        logger.info(f"Completed upload session {session_id}")
        return session
