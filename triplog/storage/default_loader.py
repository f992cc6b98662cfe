"""
Loader for the trip document shown when a session starts empty.

The source is either a local path or an http(s) URL (``TRIPLOG_DEFAULT_DOCUMENT``).
"""

import os
from typing import Optional

import requests

from ..config.config import get_config
from ..config.logging_config import get_logger
from .trip_store import TripDataStore

logger = get_logger(__name__)


class DefaultDocumentLoader:
    """Fetches the default trip document text."""

    def __init__(self, source: Optional[str] = None, timeout: Optional[int] = None,
                 session: Optional[requests.Session] = None):
        config = get_config()
        self.source = source or config.app.default_document
        self.timeout = timeout or config.map.request_timeout_seconds
        self.session = session or requests.Session()

    def is_remote(self) -> bool:
        return self.source.startswith(('http://', 'https://'))

    def fetch(self) -> Optional[str]:
        """
        Read the default document.

        Returns:
            Raw JSON text, or None if it could not be read (the error is logged)
        """
        if self.is_remote():
            try:
                response = self.session.get(self.source, timeout=self.timeout)
                response.raise_for_status()
            except requests.exceptions.RequestException as e:
                logger.error(f"Failed to fetch default trip document from {self.source}: {e}")
                return None
            logger.info(f"Fetched default trip document from {self.source} ({len(response.content)} bytes)")
            return response.text

        if not os.path.exists(self.source):
            logger.warning(f"Default trip document not found: {self.source}")
            return None
        try:
            with open(self.source, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            logger.error(f"Failed to read default trip document {self.source}: {e}")
            return None

        logger.info(f"Loaded default trip document from {self.source}")
        return content

    def load_into(self, store: TripDataStore) -> bool:
        """Load the default document into an empty store (once per store)."""
        return store.ensure_loaded(self.fetch)
