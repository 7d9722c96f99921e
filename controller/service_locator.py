"""Builds the store client, record services, upload controller and task manager."""

from dataclasses import dataclass
from typing import Optional

import httpx

from common.logging_config import get_logger
from controller.config import PROGRESS_INTERVAL, TRACK_UPLOAD_SESSIONS
from controller.scheduler import Ticker
from controller.services import TaskService, UploadService, UploadSessionService
from controller.task_manager import TaskManager
from controller.upload_controller import ProgressListener, UploadController
from store.client import RecordStoreClient
from store.config import StoreConfig

logger = get_logger(__name__)


@dataclass
class Services:
    """Every component of one session, sharing a single store client."""
    client: RecordStoreClient
    upload_service: UploadService
    session_service: UploadSessionService
    task_service: TaskService
    uploads: UploadController
    tasks: TaskManager

    async def close(self) -> None:
        await self.client.close()


def build_services(
    config: Optional[StoreConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    ticker: Optional[Ticker] = None,
    on_progress: Optional[ProgressListener] = None,
    track_sessions: bool = TRACK_UPLOAD_SESSIONS,
) -> Services:
    """
    Wire all components around one explicitly constructed store client.

    Args:
        config: Store configuration (environment defaults when omitted)
        transport: Optional httpx transport for the store client
        ticker: Optional progress ticker for the upload controller
        on_progress: Optional progress listener for the upload controller
        track_sessions: Group each transfer batch in an upload session

    Returns:
        Services bundle; call ``close()`` when done
    """
    client = RecordStoreClient(config or StoreConfig(), transport=transport)
    upload_service = UploadService(client)
    session_service = UploadSessionService(client)
    task_service = TaskService(client)

    uploads = UploadController(
        upload_service,
        session_service=session_service if track_sessions else None,
        ticker=ticker,
        interval=PROGRESS_INTERVAL,
        on_progress=on_progress,
    )
    tasks = TaskManager(task_service)

    logger.debug(f"Built services [track_sessions={track_sessions}]")
    return Services(
        client=client,
        upload_service=upload_service,
        session_service=session_service,
        task_service=task_service,
        uploads=uploads,
        tasks=tasks,
    )
