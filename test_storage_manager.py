#!/usr/bin/env python3
"""
Test script for TripLog storage: local files and the S3 backend.
S3 calls go to a mocked boto3 client.
"""

import io
import json
import os
import sys
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from triplog.config.config import S3Config
from triplog.exceptions import MalformedDocument
from triplog.storage.s3_storage import S3StorageBackend
from triplog.storage.storage_manager import StorageManager
from triplog.storage.trip_store import export_trip_data, import_trip_data

DOCUMENT = {
    'meta': {'title': '测试骑行', 'author': '', 'description': ''},
    'days': [
        {
            'day': 1,
            'date': '2024-05-01',
            'points': [{'name': 'A', 'lat': 39.0, 'lon': 116.0}, {'name': 'B', 'lat': 39.0, 'lon': 116.1}],
            'routeGeoJSON': None,
            'distanceKm': None,
            'video': {'bvid': 'BV1xx411c7mD'},
        },
    ],
}


def _s3_config():
    return S3Config(
        enabled=True,
        bucket_name='triplog-test',
        aws_access_key_id='key',
        aws_secret_access_key='secret',
        max_file_size_mb=1,
    )


def _s3_backend(client=None):
    return S3StorageBackend(_s3_config(), client=client or MagicMock())


def _no_such_key():
    return ClientError({'Error': {'Code': 'NoSuchKey', 'Message': 'not found'}}, 'GetObject')


def test_local_round_trip(tmp_path):
    print("Testing local storage round trip...")

    manager = StorageManager(data_directory=str(tmp_path))
    trip = import_trip_data(DOCUMENT)

    assert manager.save_trip(trip, 'spring-ride')
    assert (tmp_path / 'trips' / 'spring-ride.json').exists()

    loaded = manager.load_trip('spring-ride.json')

    assert loaded == trip
    assert loaded.days[0].extras['video'] == {'bvid': 'BV1xx411c7mD'}
    assert loaded.days[0].distance_km == 8.64
    print("✓ Local save/load")


def test_load_missing_trip(tmp_path):
    manager = StorageManager(data_directory=str(tmp_path))

    assert manager.load_trip('nothing-here') is None


def test_load_malformed_trip_raises(tmp_path):
    manager = StorageManager(data_directory=str(tmp_path))
    (tmp_path / 'trips' / 'broken.json').write_text('{"meta": {}, "days": 5}', encoding='utf-8')

    with pytest.raises(MalformedDocument):
        manager.load_trip('broken')


def test_names_cannot_escape_trip_directory(tmp_path):
    manager = StorageManager(data_directory=str(tmp_path))

    assert manager.save_trip(import_trip_data(DOCUMENT), '../outside')
    assert (tmp_path / 'trips' / 'outside.json').exists()
    assert not (tmp_path / 'outside.json').exists()

    with pytest.raises(ValueError):
        manager.save_trip(import_trip_data(DOCUMENT), '   ')


def test_list_and_delete_local(tmp_path):
    manager = StorageManager(data_directory=str(tmp_path))
    trip = import_trip_data(DOCUMENT)
    manager.save_trip(trip, 'one')
    manager.save_trip(trip, 'two')

    names = sorted(f['filename'] for f in manager.list_trips())
    assert names == ['one.json', 'two.json']
    assert all(f['backend'] == 'local' for f in manager.list_trips())

    assert manager.delete_trip('one') is True
    assert manager.delete_trip('one') is False
    assert [f['filename'] for f in manager.list_trips()] == ['two.json']


def test_storage_info_local(tmp_path):
    info = StorageManager(data_directory=str(tmp_path)).get_storage_info()

    assert info['s3_enabled'] is False
    assert info['preferred_backend'] == 'local'
    assert info['backends_available'] == ['local']


def test_save_prefers_s3(tmp_path):
    print("Testing S3 preferred save...")

    client = MagicMock()
    manager = StorageManager(data_directory=str(tmp_path), s3_backend=_s3_backend(client))
    trip = import_trip_data(DOCUMENT)

    assert manager.save_trip(trip, 'cloud')

    client.put_object.assert_called_once()
    kwargs = client.put_object.call_args.kwargs
    assert kwargs['Bucket'] == 'triplog-test'
    assert kwargs['Key'] == 'trips/cloud.json'
    assert json.loads(kwargs['Body'].decode('utf-8'))['meta']['title'] == '测试骑行'
    assert not (tmp_path / 'trips' / 'cloud.json').exists()
    print("✓ Saved to S3")


def test_save_falls_back_to_local_when_s3_fails(tmp_path):
    client = MagicMock()
    client.put_object.side_effect = ClientError({'Error': {'Code': 'AccessDenied', 'Message': 'no'}}, 'PutObject')
    manager = StorageManager(data_directory=str(tmp_path), s3_backend=_s3_backend(client))

    assert manager.save_trip(import_trip_data(DOCUMENT), 'fallback')
    assert (tmp_path / 'trips' / 'fallback.json').exists()


def test_load_from_s3(tmp_path):
    client = MagicMock()
    content = export_trip_data(import_trip_data(DOCUMENT))
    client.get_object.return_value = {'Body': io.BytesIO(content.encode('utf-8'))}
    manager = StorageManager(data_directory=str(tmp_path), s3_backend=_s3_backend(client))

    loaded = manager.load_trip('cloud')

    assert loaded.meta.title == '测试骑行'
    client.get_object.assert_called_once_with(Bucket='triplog-test', Key='trips/cloud.json')


def test_load_falls_back_to_local_when_missing_in_s3(tmp_path):
    client = MagicMock()
    client.get_object.side_effect = _no_such_key()
    manager = StorageManager(data_directory=str(tmp_path), s3_backend=_s3_backend(client))
    (tmp_path / 'trips' / 'local.json').write_text(json.dumps(DOCUMENT), encoding='utf-8')

    assert manager.load_trip('local').days[0].day == 1
    assert manager.load_trip('absent') is None


def test_list_merges_backends(tmp_path):
    client = MagicMock()
    client.list_objects_v2.return_value = {
        'Contents': [
            {'Key': 'trips/remote.json', 'Size': 120, 'LastModified': datetime(2024, 5, 1, 12, 0)},
            {'Key': 'trips/', 'Size': 0, 'LastModified': datetime(2024, 5, 1, 12, 0)},
        ]
    }
    manager = StorageManager(data_directory=str(tmp_path), s3_backend=_s3_backend(client))
    (tmp_path / 'trips' / 'local.json').write_text(json.dumps(DOCUMENT), encoding='utf-8')

    trips = {f['filename']: f['backend'] for f in manager.list_trips()}

    assert trips == {'remote.json': 's3', 'local.json': 'local'}
    assert manager.get_storage_info()['backends_available'] == ['s3', 'local']


def test_s3_rejects_oversized_documents():
    client = MagicMock()
    backend = _s3_backend(client)

    assert backend.save_document('x' * (2 * 1024 * 1024), 'big.json') is False
    client.put_object.assert_not_called()


def test_s3_delete():
    client = MagicMock()
    backend = _s3_backend(client)

    assert backend.delete_document('old.json') is True
    client.delete_object.assert_called_once_with(Bucket='triplog-test', Key='trips/old.json')


def test_s3_unconfigured_backend_is_unavailable():
    backend = S3StorageBackend(S3Config(enabled=True))

    assert backend.is_available() is False
    assert backend.save_document('{}', 'x.json') is False
    assert backend.load_document('x.json') is None
    assert backend.list_documents() == []


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
