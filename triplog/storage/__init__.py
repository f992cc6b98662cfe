from .trip_store import (
    TripDataStore,
    import_trip_data,
    export_trip_data,
    create_default_trip_data,
    add_day,
    update_day,
    delete_day,
)
from .storage_manager import StorageManager, get_storage_manager
from .default_loader import DefaultDocumentLoader

__all__ = [
    'TripDataStore', 'import_trip_data', 'export_trip_data', 'create_default_trip_data',
    'add_day', 'update_day', 'delete_day',
    'StorageManager', 'get_storage_manager', 'DefaultDocumentLoader',
]
