"""Upload lifecycle: validation, enqueueing and simulated sequential transfer."""

from typing import Callable, Dict, Iterable, List, Optional, Set

from common.constants import PROGRESS_STEP_PERCENT
from common.exceptions import (
    InvalidTransitionError,
    RecordNotFoundError,
    StoreError,
    StoreRequestError,
    ValidationError,
)
from common.logging_config import get_logger
from common.utils import utc_now
from controller.config import PROGRESS_INTERVAL
from controller.models.patches import UploadDraft, UploadPatch
from controller.models.records import Upload, UploadSession, UploadStatus
from controller.scheduler import AsyncioTicker, Ticker
from controller.services.session_service import UploadSessionService
from controller.services.upload_service import UploadService
from controller.types import EnqueueFailure, EnqueueResult, LocalFile, TransferReport, UploadSummary
from controller.validation import validate_file

logger = get_logger(__name__)

ProgressListener = Callable[[int, int], None]


class UploadController:
    """
    Owns the session-local list of uploads and drives them through
    pending -> uploading -> completed | error.

    Transfers are simulated: progress advances in steps of 10 percentage
    points, one interval apart, and every step is persisted before the next
    one starts. Uploads in a batch are processed one at a time, and a failure
    on one upload never stops the rest of the batch.
    """

    def __init__(
        self,
        upload_service: UploadService,
        session_service: Optional[UploadSessionService] = None,
        ticker: Optional[Ticker] = None,
        interval: float = PROGRESS_INTERVAL,
        on_progress: Optional[ProgressListener] = None,
    ):
        """
        Initialize the controller.

        Args:
            upload_service: Service persisting upload records
            session_service: When given, every batch is grouped in an upload session
            ticker: Waits between progress steps (asyncio.sleep by default)
            interval: Seconds between progress steps
            on_progress: Called with (upload_id, progress) after each persisted step
        """
        self.upload_service = upload_service
        self.session_service = session_service
        self.ticker = ticker or AsyncioTicker()
        self.interval = interval
        self.on_progress = on_progress
        self.uploads: List[Upload] = []
        self._payloads: Dict[int, LocalFile] = {}
        self._cancelled: Set[int] = set()
        self._active: Set[int] = set()

    def get(self, upload_id: int) -> Upload:
        for upload in self.uploads:
            if upload.id == upload_id:
                return upload
        raise RecordNotFoundError(f"Upload with ID {upload_id} not found")

    def payload(self, upload_id: int) -> Optional[LocalFile]:
        """Original file kept alongside an upload created by enqueue."""
        return self._payloads.get(upload_id)

    def _set(self, upload_id: int, **changes) -> Optional[Upload]:
        updated = None
        uploads = []
        for upload in self.uploads:
            if upload.id == upload_id:
                upload = upload.model_copy(update=changes)
                updated = upload
            uploads.append(upload)

        if updated is None:
            logger.debug(f"Upload {upload_id} is no longer cached, local update skipped")
            return None

        self.uploads = uploads
        return updated

    def validate(self, file: LocalFile) -> bool:
        return validate_file(file)

    async def load(self) -> List[Upload]:
        """Rebuild the cache from the store, dropping local-only state."""
        self.uploads = await self.upload_service.get_all()
        self._payloads = {uid: f for uid, f in self._payloads.items() if any(u.id == uid for u in self.uploads)}
        self._cancelled &= self._active
        logger.info(f"Loaded {len(self.uploads)} upload(s)")
        return self.uploads

    async def enqueue(self, files: Iterable[LocalFile]) -> EnqueueResult:
        """
        Create a pending upload record for each file.

        Each file is prepared on its own; a file that fails validation or
        cannot be created in the store is reported in the result and left out.
        """
        result = EnqueueResult()

        for file in files:
            try:
                validate_file(file)
                upload = await self.upload_service.create(
                    UploadDraft(name=file.name, size=file.size, mime_type=file.mime_type)
                )
            except (ValidationError, StoreError) as e:
                logger.warning(f"Failed to prepare {file.name}: {e}")
                result.failures.append(EnqueueFailure(file=file, reason=str(e)))
                continue

            self._payloads[upload.id] = file
            result.uploads.append(upload)

        if result.uploads:
            self.uploads = self.uploads + result.uploads
            logger.info(f"Enqueued {len(result.uploads)} file(s)")

        return result

    async def start_transfer(self, uploads: Optional[Iterable[Upload]] = None) -> TransferReport:
        """
        Transfer pending uploads, strictly one after another.

        Args:
            uploads: Cached uploads to consider; defaults to the whole cache.
                Anything not pending is ignored.

        Returns:
            Report of completed, failed and cancelled uploads
        """
        candidates = self.uploads if uploads is None else list(uploads)
        pending = []
        for upload in candidates:
            if upload.status != UploadStatus.PENDING:
                continue
            if upload.id in self._active:
                logger.info(f"Upload {upload.id} is still winding down a cancelled transfer, skipping")
                continue
            pending.append(upload)
        report = TransferReport()

        if not pending:
            return report

        session = await self._open_session(pending, report)

        for upload in pending:
            try:
                current = self.get(upload.id)
            except RecordNotFoundError:
                logger.info(f"Upload {upload.id} was removed before its turn, skipping")
                continue
            if current.status != UploadStatus.PENDING or upload.id in self._active:
                logger.info(f"Upload {upload.id} is {current.status.value} or already transferring, skipping")
                continue
            await self._transfer(upload.id, report)

        if session is not None:
            await self._close_session(session, report)

        logger.info(
            f"Transfer batch finished: {len(report.completed)} completed, "
            f"{len(report.failed)} failed, {len(report.cancelled)} cancelled"
        )
        return report

    async def retry(self, upload_id: int) -> TransferReport:
        """
        Run the transfer again for an upload that ended in error.

        Raises:
            RecordNotFoundError: If the upload is not cached
            InvalidTransitionError: If the upload is not in error, or a transfer for it is still running
        """
        upload = self.get(upload_id)
        if upload_id in self._active:
            raise InvalidTransitionError(f"Upload {upload_id} is already being transferred")
        if upload.status != UploadStatus.ERROR:
            raise InvalidTransitionError(
                f"Upload {upload_id} is {upload.status.value}; only failed uploads can be retried"
            )

        report = TransferReport()
        await self._transfer(upload_id, report)
        return report

    async def _transfer(self, upload_id: int, report: TransferReport) -> None:
        # At most one loop per upload; a cancel flag is consumed only by the loop it was raised for.
        self._active.add(upload_id)
        try:
            await self._advance(upload_id, report)
        finally:
            self._active.discard(upload_id)

    async def _advance(self, upload_id: int, report: TransferReport) -> None:
        self._set(upload_id, status=UploadStatus.UPLOADING, progress=0)
        logger.info(f"Uploading {upload_id}")

        try:
            for progress in range(0, 101, PROGRESS_STEP_PERCENT):
                if upload_id in self._cancelled:
                    await self._finish_cancelled(upload_id, report)
                    return

                await self.ticker.sleep(self.interval)
                status = UploadStatus.COMPLETED if progress == 100 else UploadStatus.UPLOADING
                await self.upload_service.update(upload_id, UploadPatch(progress=progress, status=status))

                if upload_id in self._cancelled:
                    await self._finish_cancelled(upload_id, report)
                    return

                self._set(upload_id, progress=progress)
                if self.on_progress is not None:
                    self.on_progress(upload_id, progress)

            completed_at = utc_now()
            url = f"/uploads/file-{upload_id}"
            await self.upload_service.update(
                upload_id,
                UploadPatch(status=UploadStatus.COMPLETED, url=url, uploaded_at=completed_at),
            )

            if upload_id in self._cancelled:
                await self._finish_cancelled(upload_id, report)
                return

        except StoreError as e:
            if upload_id in self._cancelled:
                await self._finish_cancelled(upload_id, report)
                return
            logger.error(f"Failed to upload {upload_id}: {e}")
            self._set(upload_id, status=UploadStatus.ERROR, progress=0)
            report.failed[upload_id] = str(e)
            return

        self._set(upload_id, status=UploadStatus.COMPLETED, progress=100, uploaded_at=completed_at, url=url)
        report.completed.append(upload_id)
        logger.info(f"Upload {upload_id} completed")

    async def _finish_cancelled(self, upload_id: int, report: TransferReport) -> None:
        self._cancelled.discard(upload_id)
        report.cancelled.append(upload_id)
        logger.info(f"Upload {upload_id} cancelled")
        try:
            await self.upload_service.update(upload_id, UploadPatch(status=UploadStatus.PENDING, progress=0))
        except StoreError as e:
            logger.warning(f"Could not persist cancellation of upload {upload_id}: {e}")

    async def _open_session(self, uploads: List[Upload], report: TransferReport) -> Optional[UploadSession]:
        if self.session_service is None:
            return None
        try:
            session = await self.session_service.create_session(uploads)
        except StoreError as e:
            logger.warning(f"Could not open upload session, continuing without one: {e}")
            report.session_error = str(e)
            return None
        report.session_id = session.id
        return session

    async def _close_session(self, session: UploadSession, report: TransferReport) -> None:
        try:
            await self.session_service.complete_session(session.id)
        except StoreError as e:
            logger.warning(f"Could not complete upload session {session.id}: {e}")
            report.session_error = str(e)

    def cancel(self, upload_id: int) -> Upload:
        """
        Reset an uploading record to pending with progress 0.

        A progress step already in flight still finishes; the transfer loop
        stops advancing this upload once that step returns.
        Until then the upload is still being transferred and a new batch skips it.

        Raises:
            RecordNotFoundError: If the upload is not cached
            InvalidTransitionError: If the upload is not uploading
        """
        upload = self.get(upload_id)
        if upload.status != UploadStatus.UPLOADING:
            raise InvalidTransitionError(
                f"Upload {upload_id} is {upload.status.value}; only uploading uploads can be cancelled"
            )

        if upload_id in self._active:
            self._cancelled.add(upload_id)
        logger.info(f"Cancellation requested for upload {upload_id}")
        return self._set(upload_id, status=UploadStatus.PENDING, progress=0)

    async def remove(self, upload_id: int) -> None:
        """
        Delete an upload from the store, then from the cache.

        Raises:
            StoreError: If the store does not confirm the deletion; the cache is left unchanged
        """
        deleted = await self.upload_service.delete(upload_id)
        if not deleted:
            raise StoreRequestError(f"Store did not confirm deletion of upload {upload_id}")

        self.uploads = [upload for upload in self.uploads if upload.id != upload_id]
        self._payloads.pop(upload_id, None)
        logger.info(f"Removed upload {upload_id}")

    def clear_all(self) -> None:
        """Forget every cached upload; nothing is deleted from the store."""
        self.uploads = []
        self._payloads.clear()
        self._cancelled &= self._active
        logger.info("Cleared all uploads")

    def summary(self) -> UploadSummary:
        counts = {status: 0 for status in UploadStatus}
        for upload in self.uploads:
            counts[upload.status] += 1
        return UploadSummary(
            total=len(self.uploads),
            pending=counts[UploadStatus.PENDING],
            uploading=counts[UploadStatus.UPLOADING],
            completed=counts[UploadStatus.COMPLETED],
            error=counts[UploadStatus.ERROR],
            total_size=sum(upload.size for upload in self.uploads),
        )
