"""Upload record service."""

from typing import Optional

from common.constants import UPLOAD_RECORD_TYPE
from controller.models.patches import UploadDraft, UploadPatch
from controller.models.records import Upload
from controller.services.base import RecordService


class UploadService(RecordService[Upload]):
    record_type = UPLOAD_RECORD_TYPE
    label = "Upload"
    model = Upload
    fields = (
        "Name",
        "Tags",
        "size_c",
        "type_c",
        "status_c",
        "progress_c",
        "uploaded_at_c",
        "url_c",
        "CreatedOn",
        "ModifiedOn",
    )

    async def create(self, draft: UploadDraft) -> Upload:
        return await self._create(draft.to_fields())

    async def update(self, upload_id: int, patch: UploadPatch) -> Optional[Upload]:
        """Send only the fields set on the patch."""
        return await self._update(upload_id, patch.to_fields())
