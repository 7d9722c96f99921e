"""Shared pytest fixtures for all tests."""

import json

import pytest

from controller.scheduler import ImmediateTicker
from controller.services import TaskService, UploadService, UploadSessionService
from controller.task_manager import TaskManager
from controller.types import LocalFile
from controller.upload_controller import UploadController
from fakes import FakeRecordStore
from store.config import StoreConfig


@pytest.fixture
def temp_config_path(tmp_path):
    """
    Path for a temporary store config file.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path inside a temporary .dropzone directory (the file is not created)
    """
    config_dir = tmp_path / '.dropzone'
    config_dir.mkdir()
    return config_dir / 'config.json'


@pytest.fixture
def temp_config(temp_config_path):
    """
    Store config pointing at a test host with credentials.
    """
    temp_config_path.write_text(json.dumps({
        'store_url': 'http://test',
        'project_id': 'proj_123',
        'public_key': 'pk_secret',
    }))
    return StoreConfig(temp_config_path)


@pytest.fixture
def fake_store():
    return FakeRecordStore()


@pytest.fixture
def upload_service(fake_store):
    return UploadService(fake_store)


@pytest.fixture
def session_service(fake_store):
    return UploadSessionService(fake_store)


@pytest.fixture
def task_service(fake_store):
    return TaskService(fake_store)


@pytest.fixture
def ticker():
    return ImmediateTicker()


@pytest.fixture
def progress_events():
    """List collecting (upload_id, progress) notifications."""
    return []


@pytest.fixture
def controller(upload_service, ticker, progress_events):
    """UploadController without session tracking, recording progress notifications."""
    return UploadController(
        upload_service,
        ticker=ticker,
        interval=0.15,
        on_progress=lambda upload_id, progress: progress_events.append((upload_id, progress)),
    )


@pytest.fixture
def task_manager(task_service):
    return TaskManager(task_service)


@pytest.fixture
def sample_files():
    """
    Three acceptable files of different types.
    """
    return [
        LocalFile(name='report.pdf', size=2048, mime_type='application/pdf'),
        LocalFile(name='photo.png', size=4096, mime_type='image/png'),
        LocalFile(name='data.csv', size=512, mime_type='text/csv'),
    ]
