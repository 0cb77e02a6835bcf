from datetime import datetime, timedelta, timezone

import boto3
import pytest
from botocore.stub import Stubber

from snapshot_manager.exceptions import DeletionError
from snapshot_manager.service import SnapshotRecord, SnapshotService

VOLUME_ID = 'vol-0c4077e79d2c5034d'
EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def record(snapshot_id, days, volume_id=VOLUME_ID):
    return SnapshotRecord(id=snapshot_id, volume_id=volume_id,
                          start_time=EPOCH + timedelta(days=days))


class FakeSnapshotService(SnapshotService):
    """In-memory service that records every call made against it."""

    def __init__(self, snapshots=(), instance_ids=(), fail_delete=(), volume_error=None,
                 create_error=None, list_error=None):
        self.snapshots = list(snapshots)
        self.instance_ids = list(instance_ids)
        self.fail_delete = set(fail_delete)
        self.volume_error = volume_error
        self.create_error = create_error
        self.list_error = list_error
        self.created = []
        self.delete_attempts = []
        self.listed = False
        self.closed = False

    def iter_attached_instance_ids(self, volume_id):
        if self.volume_error:
            raise self.volume_error
        return iter(self.instance_ids)

    def create_snapshot(self, volume_id, description, tags):
        if self.create_error:
            raise self.create_error
        snapshot_id = 'snap-new%d' % len(self.created)
        self.created.append((volume_id, description, tags))
        self.snapshots.append(SnapshotRecord(snapshot_id, volume_id, EPOCH + timedelta(days=365)))
        return snapshot_id

    def iter_snapshots(self, volume_id):
        self.listed = True
        if self.list_error:
            raise self.list_error
        return iter([s for s in self.snapshots if s.volume_id == volume_id])

    def delete_snapshot(self, snapshot_id):
        self.delete_attempts.append(snapshot_id)
        if snapshot_id in self.fail_delete:
            raise DeletionError(snapshot_id, 'snapshot is in use')
        self.snapshots = [s for s in self.snapshots if s.id != snapshot_id]

    def close(self):
        self.closed = True


@pytest.fixture
def ec2_client():
    return boto3.client('ec2', region_name='us-east-1',
                        aws_access_key_id='testing', aws_secret_access_key='testing')


@pytest.fixture
def stubber(ec2_client):
    with Stubber(ec2_client) as stub:
        yield stub
        stub.assert_no_pending_responses()
