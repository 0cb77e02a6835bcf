import json
from collections import namedtuple

from snapshot_manager.exceptions import InputError

DESCRIPTION_PREFIX = 'Created by SnapshotHandler Lambda: '
REQUIRED_FIELDS = ('volumeId', 'description', 'name')


def parse_keep_count(value, source):
    """Turn an int or numeric string into a non-negative keep-count.

    Raises ValueError naming ``source`` when the value is unusable.
    """
    if isinstance(value, bool):
        raise ValueError('%s must be an integer, got %r' % (source, value))
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError('%s must be an integer, got %r' % (source, value))
        value = int(value)
    try:
        count = int(str(value).strip())
    except ValueError:
        raise ValueError('%s must be an integer, got %r' % (source, value))
    if count < 0:
        raise ValueError('%s must not be negative, got %d' % (source, count))
    return count


class SnapshotRequest(namedtuple('SnapshotRequest',
                                 ['volume_id', 'description', 'name', 'keep_count_override'])):
    """What one invocation asks for: which volume, how to label it, how many to keep."""

    __slots__ = ()

    def __new__(cls, volume_id, description, name, keep_count_override=None):
        return super().__new__(cls, volume_id, description, name, keep_count_override)

    @classmethod
    def from_event(cls, event):
        """Build a request from the Lambda event.

        The event is either the payload itself, a JSON document holding it, or
        an EventBridge envelope whose ``detail`` holds it::

            {
                "volumeId": "vol-0c4077e79d2c5034d",
                "description": "Jenkins Snapshot",
                "name": "jenkins-snapshot",
                "numSnapshotsToKeep": "10"
            }

        ``numSnapshotsToKeep`` is optional and overrides the environment.
        """
        if isinstance(event, (bytes, bytearray, str)):
            try:
                if not isinstance(event, str):
                    event = event.decode('utf-8')
                event = json.loads(event)
            except ValueError as e:
                raise InputError('event is not valid JSON: %s' % e) from e
        if not isinstance(event, dict):
            raise InputError('event must be a JSON object, got %s' % type(event).__name__)
        if 'volumeId' not in event and isinstance(event.get('detail'), dict):
            event = event['detail']

        values = {}
        for field in REQUIRED_FIELDS:
            value = event.get(field)
            if not isinstance(value, str) or not value.strip():
                raise InputError('%s is required and must be a non-empty string' % field)
            values[field] = value.strip()

        keep_count = event.get('numSnapshotsToKeep')
        if keep_count is not None:
            try:
                keep_count = parse_keep_count(keep_count, 'numSnapshotsToKeep')
            except ValueError as e:
                raise InputError(str(e)) from e

        return cls(volume_id=values['volumeId'],
                   description=DESCRIPTION_PREFIX + values['description'],
                   name=values['name'],
                   keep_count_override=keep_count)
