"""Configuration management for the record store connection."""

import json
import os
from pathlib import Path
from typing import Optional

from common.logging_config import get_logger

logger = get_logger(__name__)


class StoreConfig:
    """Store connection settings from the environment, optionally overlaid by a JSON file."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_path: Optional path to a JSON file whose keys override the environment defaults
        """
        self.config_path = config_path
        self.data = self._load()

    @staticmethod
    def defaults() -> dict:
        return {
            "store_url": os.environ.get("DROPZONE_STORE_URL", "http://localhost:8080"),
            "project_id": os.environ.get("DROPZONE_PROJECT_ID"),
            "public_key": os.environ.get("DROPZONE_PUBLIC_KEY"),
            "timeout": 30,
        }

    def _load(self) -> dict:
        """
        Load configuration, ignoring a missing or unreadable file.

        Returns:
            Configuration dictionary
        """
        config = self.defaults()
        if self.config_path is None or not self.config_path.exists():
            return config

        try:
            with open(self.config_path, 'r') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config file {self.config_path}: {e}")
            return config

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.config_path}: expected a JSON object")
            return config

        config.update({k: v for k, v in data.items() if v is not None})
        return config

    def get_base_url(self) -> str:
        """
        Get the record store base URL.

        Returns:
            Base URL string without a trailing slash (e.g., "http://localhost:8080")
        """
        return str(self.data.get('store_url') or "http://localhost:8080").rstrip('/')

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return float(self.data.get('timeout', 30))

    def get_project_id(self) -> Optional[str]:
        return self.data.get('project_id')

    def get_public_key(self) -> Optional[str]:
        return self.data.get('public_key')

    def get_headers(self) -> dict:
        """
        Build the credential headers sent with every store request.

        Returns:
            Dictionary with Authorization and X-Project-Id headers, where configured
        """
        headers = {}
        public_key = self.get_public_key()
        if public_key:
            headers['Authorization'] = f'Bearer {public_key}'
        project_id = self.get_project_id()
        if project_id:
            headers['X-Project-Id'] = str(project_id)
        return headers
