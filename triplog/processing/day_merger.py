"""
Merge per-day JSON files into a single trip document.

The scraper scripts write one JSON file per day (``dayNNN_<date>_<title>.json``)
and, optionally, a matching ``.txt`` clue file. Merging keeps every field of
each day file; only ``clue`` is added.
"""

import json
import os
import time
from typing import Any, Dict, List, Optional

from ..config.logging_config import get_logger, log_performance
from ..exceptions import MalformedDocument
from ..models import TripData
from ..storage.trip_store import import_trip_data

logger = get_logger(__name__)

CLUE_HEADER = "旅行骑行线索提取"

DEFAULT_MERGED_META = {
    'title': '骑行旅行记录 · 每日记录合并',
    'author': '',
    'description': '由每日 JSON 文件自动合并生成的数据文件',
}


def read_clue(clue_path: str) -> Optional[str]:
    """
    Read a clue text file, dropping the extraction header line.

    Returns:
        Cleaned text, or None when the file is missing, unreadable or empty
    """
    if not os.path.exists(clue_path):
        return None

    try:
        with open(clue_path, 'r', encoding='utf-8') as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read clue {clue_path}: {e}")
        return None

    start = 0
    if lines and lines[0].strip() == CLUE_HEADER:
        start = 1
        if len(lines) > 1 and lines[1].strip() == '':
            start = 2

    cleaned = '\n'.join(lines[start:]).strip()
    return cleaned or None


def merge_day_files(days_dir: str, clue_dir: Optional[str] = None,
                    meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Merge every ``*.json`` in ``days_dir`` (sorted by filename) into ``{meta, days}``.

    Args:
        days_dir: Directory of per-day JSON files
        clue_dir: Directory of matching ``.txt`` clue files
        meta: Trip header (defaults to a generic merged-document header)

    Returns:
        The merged document as a plain dict

    Raises:
        FileNotFoundError: ``days_dir`` does not exist
    """
    start_time = time.time()

    if not os.path.isdir(days_dir):
        raise FileNotFoundError(f"Day directory not found: {days_dir}")

    if clue_dir and not os.path.isdir(clue_dir):
        logger.warning(f"Clue directory not found: {clue_dir}; merging without clues")
        clue_dir = None

    files = sorted(f for f in os.listdir(days_dir) if f.endswith('.json'))
    logger.info(f"Found {len(files)} day files in {days_dir}")

    days: List[Dict[str, Any]] = []
    for filename in files:
        path = os.path.join(days_dir, filename)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                record = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Skipping {filename}: {e}")
            continue

        if not isinstance(record, dict):
            logger.error(f"Skipping {filename}: top level is not an object")
            continue

        if clue_dir:
            clue = read_clue(os.path.join(clue_dir, filename[:-len('.json')] + '.txt'))
            if clue:
                record['clue'] = clue

        days.append(record)
        logger.debug(f"Merged {filename}")

    log_performance(logger, "merge_day_files", time.time() - start_time, f"days={len(days)}")
    return {'meta': dict(meta or DEFAULT_MERGED_META), 'days': days}


def merge_to_trip(days_dir: str, clue_dir: Optional[str] = None,
                  meta: Optional[Dict[str, Any]] = None) -> TripData:
    """Merge and validate, returning a TripData with distances filled in."""
    merged = merge_day_files(days_dir, clue_dir, meta)
    try:
        return import_trip_data(merged)
    except MalformedDocument as e:
        logger.error(f"Merged document from {days_dir} is not a valid trip: {e}")
        raise
