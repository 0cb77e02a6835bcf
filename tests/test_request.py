import json

import pytest

from snapshot_manager.exceptions import InputError
from snapshot_manager.request import DESCRIPTION_PREFIX, SnapshotRequest

PAYLOAD = {
    'volumeId': 'vol-0c4077e79d2c5034d',
    'description': 'Jenkins Snapshot',
    'name': 'jenkins-snapshot',
}


def test_from_event_reads_required_fields():
    request = SnapshotRequest.from_event(dict(PAYLOAD))
    assert request.volume_id == 'vol-0c4077e79d2c5034d'
    assert request.description == DESCRIPTION_PREFIX + 'Jenkins Snapshot'
    assert request.name == 'jenkins-snapshot'
    assert request.keep_count_override is None


@pytest.mark.parametrize('raw,expected', [('5', 5), (' 7 ', 7), (3, 3), (0, 0), (2.0, 2), (None, None)])
def test_from_event_keep_count(raw, expected):
    request = SnapshotRequest.from_event(dict(PAYLOAD, numSnapshotsToKeep=raw))
    assert request.keep_count_override == expected


@pytest.mark.parametrize('raw', ['five', '', '-1', -3, True, 1.5, [4]])
def test_from_event_rejects_bad_keep_count(raw):
    with pytest.raises(InputError):
        SnapshotRequest.from_event(dict(PAYLOAD, numSnapshotsToKeep=raw))


@pytest.mark.parametrize('field', ['volumeId', 'description', 'name'])
def test_from_event_requires_field(field):
    event = dict(PAYLOAD)
    del event[field]
    with pytest.raises(InputError, match=field):
        SnapshotRequest.from_event(event)


@pytest.mark.parametrize('value', ['', '   ', 12, None])
def test_from_event_rejects_blank_field(value):
    with pytest.raises(InputError):
        SnapshotRequest.from_event(dict(PAYLOAD, name=value))


def test_from_event_accepts_json_document():
    request = SnapshotRequest.from_event(json.dumps(dict(PAYLOAD, numSnapshotsToKeep='4')).encode())
    assert request.volume_id == PAYLOAD['volumeId']
    assert request.keep_count_override == 4


def test_from_event_unwraps_eventbridge_detail():
    event = {'source': 'aws.events', 'detail-type': 'Scheduled Event', 'detail': dict(PAYLOAD)}
    assert SnapshotRequest.from_event(event).name == 'jenkins-snapshot'


@pytest.mark.parametrize('event', ['{not json', '[1, 2]', 42])
def test_from_event_rejects_non_object(event):
    with pytest.raises(InputError):
        SnapshotRequest.from_event(event)


def test_from_event_rejects_undecodable_bytes():
    with pytest.raises(InputError):
        SnapshotRequest.from_event(b'\xff\xfe{"volumeId": "v"}')
