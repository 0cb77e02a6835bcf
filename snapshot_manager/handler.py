import logging

from snapshot_manager import __version__, retention
from snapshot_manager.config import RetentionConfig
from snapshot_manager.ec2 import Ec2SnapshotService
from snapshot_manager.log import configure_logging
from snapshot_manager.request import SnapshotRequest

logger = configure_logging()


def open_service(region):
    return Ec2SnapshotService.from_region(region)


def lambda_handler(event, context):
    """Snapshot one EBS volume and drop the oldest snapshots beyond the keep-count.

    Environment variables:
    - REGION: region of the volume and its snapshots, defaults to the region
      the function runs in
    - NUM_SNAPSHOTS_TO_KEEP: snapshots to keep when the event has no
      numSnapshotsToKeep, defaults to 10
    """
    logger.info('snapshot manager version %s', __version__)
    try:
        request = SnapshotRequest.from_event(event)
        config = RetentionConfig.from_environ()
        region = config.resolve_region()
        logger.info('volumeId is "%s", name is "%s", description is "%s", region is %s',
                    request.volume_id, request.name, request.description, region)

        remaining_time = getattr(context, 'get_remaining_time_in_millis', None)
        with open_service(region) as service:
            outcome = retention.run(request, config, service, remaining_time=remaining_time)
    except Exception:
        logger.exception('overall exception')
        raise

    logger.info('created %s; %d existing snapshots, keep-count %d, removed %d, skipped %d',
                outcome.snapshot_id, outcome.existing_count, outcome.keep_count,
                outcome.deleted, outcome.skipped)
    if outcome.remaining_time_ms is not None:
        logger.info('done with run, remaining time in ms is %d', outcome.remaining_time_ms)
