"""Configuration settings for the upload controller."""

import os

from common.constants import PROGRESS_INTERVAL_SECONDS


PROGRESS_INTERVAL = float(os.environ.get("DROPZONE_PROGRESS_INTERVAL", str(PROGRESS_INTERVAL_SECONDS)))

TRACK_UPLOAD_SESSIONS = os.environ.get("DROPZONE_TRACK_SESSIONS", "true").lower() in ("1", "true", "yes")
