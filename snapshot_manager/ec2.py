import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from snapshot_manager.exceptions import DeletionError, ListingError, SnapshotCreationError
from snapshot_manager.service import SnapshotRecord, SnapshotService

logger = logging.getLogger(__name__)


class Ec2SnapshotService(SnapshotService):
    """SnapshotService backed by a boto3 EC2 client.

    List calls go through boto3 paginators, which keep following ``NextToken``
    until the service stops returning one. SDK errors are raised as the
    package's own exceptions.
    """

    def __init__(self, client):
        self.client = client

    @classmethod
    def from_region(cls, region):
        logger.info('Opening EC2 client in region %s', region)
        return cls(boto3.client('ec2', region_name=region))

    def iter_attached_instance_ids(self, volume_id):
        paginator = self.client.get_paginator('describe_volumes')
        try:
            for page in paginator.paginate(VolumeIds=[volume_id]):
                for volume in page.get('Volumes', []):
                    for attachment in volume.get('Attachments', []):
                        if attachment.get('InstanceId'):
                            yield attachment['InstanceId']
        except (ClientError, BotoCoreError) as e:
            raise SnapshotCreationError('could not describe volume %s: %s' % (volume_id, e)) from e

    def create_snapshot(self, volume_id, description, tags):
        try:
            response = self.client.create_snapshot(
                VolumeId=volume_id,
                Description=description,
                TagSpecifications=[{
                    'ResourceType': 'snapshot',
                    'Tags': [{'Key': key, 'Value': value} for key, value in tags.items()]
                }])
        except (ClientError, BotoCoreError) as e:
            raise SnapshotCreationError('could not snapshot volume %s: %s' % (volume_id, e)) from e
        return response['SnapshotId']

    def iter_snapshots(self, volume_id):
        paginator = self.client.get_paginator('describe_snapshots')
        try:
            for page in paginator.paginate(Filters=[{'Name': 'volume-id', 'Values': [volume_id]}]):
                for snapshot in page.get('Snapshots', []):
                    yield SnapshotRecord(id=snapshot['SnapshotId'],
                                         volume_id=snapshot.get('VolumeId', volume_id),
                                         start_time=snapshot['StartTime'])
        except (ClientError, BotoCoreError) as e:
            raise ListingError('could not list snapshots of volume %s: %s' % (volume_id, e)) from e

    def delete_snapshot(self, snapshot_id):
        try:
            self.client.delete_snapshot(SnapshotId=snapshot_id)
        except (ClientError, BotoCoreError) as e:
            raise DeletionError(snapshot_id, str(e)) from e

    def close(self):
        self.client.close()
