#!/usr/bin/env python3
"""
Test script for loading the default trip document into an empty store.
"""

import json
import os
import sys
from unittest.mock import MagicMock

import requests

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from triplog.storage.default_loader import DefaultDocumentLoader
from triplog.storage.trip_store import TripDataStore

DOCUMENT = {
    'meta': {'title': '默认行程'},
    'days': [{'day': 1, 'date': '2024-05-01', 'points': [], 'routeGeoJSON': None}],
}


def test_local_file(tmp_path):
    print("Testing local default document...")

    path = tmp_path / 'everyday-merged.json'
    path.write_text(json.dumps(DOCUMENT, ensure_ascii=False), encoding='utf-8')
    loader = DefaultDocumentLoader(source=str(path))
    store = TripDataStore()

    assert not loader.is_remote()
    assert loader.load_into(store) is True
    assert store.data.meta.title == '默认行程'
    print("✓ Loaded from file")


def test_missing_local_file(tmp_path):
    loader = DefaultDocumentLoader(source=str(tmp_path / 'absent.json'))
    store = TripDataStore()

    assert loader.fetch() is None
    assert loader.load_into(store) is False
    assert store.data.days == ()


def test_remote_document():
    response = MagicMock()
    response.text = json.dumps(DOCUMENT)
    response.content = response.text.encode('utf-8')
    session = MagicMock()
    session.get.return_value = response
    loader = DefaultDocumentLoader(source='https://example.com/trip.json', timeout=5, session=session)

    assert loader.is_remote()
    assert loader.fetch() == response.text
    session.get.assert_called_once_with('https://example.com/trip.json', timeout=5)


def test_remote_failure_leaves_store_empty():
    session = MagicMock()
    session.get.side_effect = requests.exceptions.ConnectionError("offline")
    loader = DefaultDocumentLoader(source='http://example.com/trip.json', session=session)
    store = TripDataStore()

    assert loader.load_into(store) is False
    assert store.data.days == ()


def test_default_loaded_only_once(tmp_path):
    path = tmp_path / 'trip.json'
    path.write_text(json.dumps(DOCUMENT), encoding='utf-8')
    loader = DefaultDocumentLoader(source=str(path))
    store = TripDataStore()

    assert loader.load_into(store) is True
    store.reset()
    assert loader.load_into(store) is False
    assert store.data.days == ()


if __name__ == "__main__":
    import pytest
    sys.exit(pytest.main([__file__, "-v"]))
