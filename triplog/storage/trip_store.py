"""
Trip document operations and the session-owned trip store.

The module-level functions are pure: each takes a ``TripData`` and returns a
new one, leaving the input untouched. ``TripDataStore`` owns the current
document for one session and is the only writer of it.
"""

import json
from dataclasses import replace
from typing import Any, Callable, Dict, Optional, Union

from ..config.config import get_config
from ..config.logging_config import get_logger, log_function_entry, log_function_exit
from ..exceptions import IndexOutOfRange, MalformedDocument
from ..geo.distance import update_day_distance
from ..models import DayRecord, TripData, TripMeta

logger = get_logger(__name__)


def import_trip_data(document: Union[str, bytes, Dict[str, Any]]) -> TripData:
    """
    Parse and validate a trip document.

    Args:
        document: JSON text/bytes or an already decoded dict

    Returns:
        TripData with every day's distance recomputed

    Raises:
        MalformedDocument: invalid JSON, or missing/invalid ``meta`` / ``days``
    """
    if isinstance(document, (str, bytes)):
        preview = document[:200]
        logger.debug(f"Parsing trip document ({len(document)} chars): {preview!r}")
        try:
            raw = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Trip document is not valid JSON: {e}")
            raise MalformedDocument(f"invalid JSON: {e}")
    else:
        raw = document

    if not isinstance(raw, dict):
        raise MalformedDocument("top level must be an object")
    if raw.get("meta") is None:
        raise MalformedDocument("missing 'meta' field")
    if "days" not in raw or raw["days"] is None:
        raise MalformedDocument("missing 'days' field")
    if not isinstance(raw["days"], list):
        raise MalformedDocument(f"'days' must be an array, got {type(raw['days']).__name__}")

    data = TripData.from_dict(raw)
    data = data.with_days(update_day_distance(day) for day in data.days)

    logger.info(f"Imported trip '{data.meta.title}' with {len(data.days)} day(s)")
    return data


def export_trip_data(data: TripData) -> str:
    """Serialize a trip document as indented JSON."""
    return json.dumps(data.to_dict(), indent=2, ensure_ascii=False)


def create_default_trip_data(title: Optional[str] = None) -> TripData:
    """Empty trip with the configured default title."""
    return TripData(meta=TripMeta(title=title or get_config().app.default_title))


def add_day(data: TripData, day: DayRecord) -> TripData:
    """Append a day, computing its distance."""
    return data.with_days(data.days + (update_day_distance(day),))


def update_day(data: TripData, day_index: int, patch: Union[Dict[str, Any], DayRecord],
               strict: bool = False) -> TripData:
    """
    Merge a partial day into the day at ``day_index``.

    Args:
        data: Current document
        day_index: Position in ``data.days``
        patch: Partial day using document keys, or a whole DayRecord
        strict: Raise instead of ignoring an out-of-range index

    Returns:
        New document; the same ``data`` object when the index is out of range

    Raises:
        IndexOutOfRange: only when ``strict`` is set
    """
    if not 0 <= day_index < len(data.days):
        if strict:
            raise IndexOutOfRange(day_index, len(data.days))
        logger.warning(f"update_day ignored: index {day_index} out of range for {len(data.days)} day(s)")
        return data

    if isinstance(patch, DayRecord):
        updated = patch
    else:
        updated = data.days[day_index].with_changes(patch)
    # distanceKm in a patch is ignored; it always follows the geometry
    updated = update_day_distance(updated)

    days = list(data.days)
    days[day_index] = updated
    return data.with_days(days)


def delete_day(data: TripData, day_index: int) -> TripData:
    """Remove the day at ``day_index``; an unknown index leaves the days as they are."""
    return data.with_days(day for index, day in enumerate(data.days) if index != day_index)


class TripDataStore:
    """
    Owns the in-memory trip document for one session.

    Every mutation swaps in a new ``TripData`` value, so callers can diff or
    undo by keeping references to earlier values. Asynchronous loads are
    sequenced: ``begin_request`` hands out a ticket, and ``apply_response``
    drops a response whose ticket is older than the latest change.
    """

    def __init__(self, data: Optional[TripData] = None):
        self._data = data or create_default_trip_data()
        self._sequence = 0
        self._loaded = data is not None
        self._default_fetch_attempted = False
        self._closed = False
        logger.debug(f"TripDataStore created with {len(self._data.days)} day(s)")

    @property
    def data(self) -> TripData:
        return self._data

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _check_open(self):
        if self._closed:
            raise RuntimeError("TripDataStore is closed")

    def _commit(self, data: TripData) -> TripData:
        if data is not self._data:
            self._sequence += 1
            self._data = data
        return data

    def import_document(self, document: Union[str, bytes, Dict[str, Any]]) -> TripData:
        """Replace the whole document; a failed import keeps the previous one."""
        self._check_open()
        log_function_entry(logger, "import_document")
        try:
            data = import_trip_data(document)
        except MalformedDocument as e:
            logger.error(f"Import failed, keeping current trip data: {e}")
            raise
        self._loaded = True
        self._commit(data)
        log_function_exit(logger, "import_document", f"days={len(data.days)}")
        return data

    def export(self) -> str:
        self._check_open()
        return export_trip_data(self._data)

    def add_day(self, day: DayRecord) -> TripData:
        self._check_open()
        return self._commit(add_day(self._data, day))

    def update_day(self, day_index: int, patch: Union[Dict[str, Any], DayRecord], strict: bool = False) -> TripData:
        self._check_open()
        return self._commit(update_day(self._data, day_index, patch, strict=strict))

    def delete_day(self, day_index: int) -> TripData:
        self._check_open()
        return self._commit(delete_day(self._data, day_index))

    def reset(self) -> TripData:
        self._check_open()
        logger.info("Resetting trip data to the empty default")
        return self._commit(create_default_trip_data())

    def begin_request(self) -> int:
        """Tag an outgoing asynchronous load; returns its ticket."""
        self._check_open()
        self._sequence += 1
        return self._sequence

    def apply_response(self, ticket: int, document: Union[str, bytes, Dict[str, Any]]) -> bool:
        """
        Apply the result of a tagged load unless something newer happened since.

        Returns:
            True if the document was applied, False if it was stale

        Raises:
            MalformedDocument: the response is current but not a valid document
        """
        self._check_open()
        if ticket != self._sequence:
            logger.info(f"Discarding stale response (ticket {ticket}, current {self._sequence})")
            return False
        self.import_document(document)
        return True

    def ensure_loaded(self, loader: Callable[[], Optional[Union[str, bytes, Dict[str, Any]]]]) -> bool:
        """
        Fetch the default document once per session, only while the store is empty.

        Args:
            loader: Callable returning the default document, or None if unavailable

        Returns:
            True if a default document was applied
        """
        self._check_open()
        if self._default_fetch_attempted or self._data.days:
            return False
        self._default_fetch_attempted = True

        ticket = self.begin_request()
        document = loader()
        if document is None:
            logger.warning("Default trip document unavailable")
            return False
        return self.apply_response(ticket, document)

    def close(self):
        """End the session; the store refuses further operations."""
        self._closed = True
        logger.debug("TripDataStore closed")
