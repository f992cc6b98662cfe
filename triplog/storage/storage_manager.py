"""
Storage Manager for TripLog.
Saves and loads whole trip documents, preferring S3 when it is configured and
falling back to JSON files under the local data directory.
"""

import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..config.config import get_config
from ..config.logging_config import get_logger, log_function_entry, log_function_exit
from ..exceptions import MalformedDocument
from ..models import TripData
from .s3_storage import S3StorageBackend
from .trip_store import export_trip_data, import_trip_data

logger = get_logger(__name__)


def _normalize_name(name: str) -> str:
    name = os.path.basename(name.strip())
    if not name:
        raise ValueError("trip name must not be empty")
    return name if name.endswith('.json') else f"{name}.json"


class StorageManager:
    """Unified storage manager supporting local and S3 backends."""

    def __init__(self, data_directory: Optional[str] = None, s3_backend: Optional[S3StorageBackend] = None):
        """Initialize storage manager with appropriate backend.

        Args:
            data_directory: Local root directory (defaults to the configured one)
            s3_backend: Explicit S3 backend; built from config when S3 is enabled
        """
        self.config = get_config()
        self.local_data_dir = data_directory or self.config.app.data_directory
        self.s3_backend = s3_backend
        if self.s3_backend is None and self.config.s3.enabled:
            self.s3_backend = S3StorageBackend(self.config.s3)

        self.trips_dir = os.path.join(self.local_data_dir, 'trips')
        os.makedirs(self.trips_dir, exist_ok=True)

        logger.info(f"Storage manager initialized - S3: {self.is_s3_enabled()}, Local: {self.local_data_dir}")

    def is_s3_enabled(self) -> bool:
        return self.s3_backend is not None and self.s3_backend.is_available()

    def get_preferred_backend(self) -> str:
        return "s3" if self.is_s3_enabled() else "local"

    def _local_path(self, filename: str) -> str:
        return os.path.join(self.trips_dir, filename)

    def save_trip(self, data: TripData, name: str) -> bool:
        """
        Persist a trip document, S3 first with local fallback.

        Args:
            data: Trip document
            name: Document name (``.json`` appended when missing)

        Returns:
            Success status
        """
        filename = _normalize_name(name)
        log_function_entry(logger, "save_trip", filename=filename, backend=self.get_preferred_backend())

        content = export_trip_data(data)

        if self.is_s3_enabled():
            if self.s3_backend.save_document(content, filename):
                log_function_exit(logger, "save_trip", "success-s3")
                return True
            logger.warning("S3 save failed, falling back to local storage")

        try:
            with open(self._local_path(filename), 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Failed to save trip locally: {e}")
            return False

        logger.info(f"Trip saved locally: {filename} ({len(data.days)} days)")
        log_function_exit(logger, "save_trip", "success-local")
        return True

    def load_trip(self, name: str) -> Optional[TripData]:
        """
        Load a trip document by name.

        Returns:
            TripData, or None when no backend has it

        Raises:
            MalformedDocument: the stored document is not a valid trip
        """
        filename = _normalize_name(name)
        log_function_entry(logger, "load_trip", filename=filename)

        content = None
        if self.is_s3_enabled():
            content = self.s3_backend.load_document(filename)

        if content is None:
            path = self._local_path(filename)
            if not os.path.exists(path):
                logger.debug(f"Trip not found: {filename}")
                return None
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    content = f.read()
            except OSError as e:
                logger.error(f"Failed to read trip file {path}: {e}")
                return None

        try:
            data = import_trip_data(content)
        except MalformedDocument as e:
            logger.error(f"Stored trip {filename} is malformed: {e}")
            raise

        log_function_exit(logger, "load_trip", f"days={len(data.days)}")
        return data

    def list_trips(self) -> List[Dict[str, Any]]:
        """List stored trip documents from every backend, newest first."""
        files = {}
        if self.is_s3_enabled():
            files = {f['filename']: f for f in self.s3_backend.list_documents()}

        for filename in os.listdir(self.trips_dir):
            path = self._local_path(filename)
            if filename in files or not os.path.isfile(path):
                continue
            stat = os.stat(path)
            files[filename] = {
                'filename': filename,
                'size_bytes': stat.st_size,
                'last_modified': datetime.fromtimestamp(stat.st_mtime).isoformat(),
                'backend': 'local'
            }

        result = list(files.values())
        result.sort(key=lambda x: x.get('last_modified', ''), reverse=True)
        return result

    def delete_trip(self, name: str) -> bool:
        """Delete a trip from every backend; True if at least one copy was removed."""
        filename = _normalize_name(name)
        deleted = False

        if self.is_s3_enabled():
            deleted = self.s3_backend.delete_document(filename)

        path = self._local_path(filename)
        if os.path.exists(path):
            try:
                os.remove(path)
                deleted = True
                logger.info(f"Deleted local trip: {filename}")
            except OSError as e:
                logger.error(f"Failed to delete local trip {filename}: {e}")

        return deleted

    def get_storage_info(self) -> Dict[str, Any]:
        """Get storage backend information and status."""
        info = {
            "s3_enabled": self.is_s3_enabled(),
            "local_directory": self.local_data_dir,
            "preferred_backend": self.get_preferred_backend(),
            "backends_available": ["local"],
        }
        if self.is_s3_enabled():
            info["backends_available"].insert(0, "s3")
            info["s3_bucket"] = self.config.s3.bucket_name
        return info


# Global storage manager instance
_storage_manager = None


def get_storage_manager() -> StorageManager:
    """Get the global storage manager instance."""
    global _storage_manager
    if _storage_manager is None:
        _storage_manager = StorageManager()
    return _storage_manager
