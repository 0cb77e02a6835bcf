"""Create a snapshot of a volume, then prune the oldest ones beyond the keep-count.

The run is a fixed pipeline: create, list, sort, select, delete. Nothing is
retried and nothing is checkpointed; deletions already made when a run is cut
short stay made.
"""
import logging
from collections import namedtuple
from datetime import datetime, timezone
from operator import attrgetter

from snapshot_manager.exceptions import DeletionError

logger = logging.getLogger(__name__)


class DeletionResult(namedtuple('DeletionResult', ['snapshot_id', 'error'])):
    __slots__ = ()

    def __new__(cls, snapshot_id, error=None):
        return super().__new__(cls, snapshot_id, error)

    @property
    def ok(self):
        return self.error is None


class RunOutcome(namedtuple('RunOutcome', ['snapshot_id', 'existing_count', 'keep_count',
                                           'deletions', 'remaining_time_ms'])):
    """Summary of one run. ``deletions`` holds a DeletionResult per attempt."""

    __slots__ = ()

    def __new__(cls, snapshot_id, existing_count, keep_count, deletions=(),
                remaining_time_ms=None):
        return super().__new__(cls, snapshot_id, existing_count, keep_count,
                               tuple(deletions), remaining_time_ms)

    @property
    def attempted(self):
        return len(self.deletions)

    @property
    def deleted(self):
        return sum(1 for result in self.deletions if result.ok)

    @property
    def skipped(self):
        return self.attempted - self.deleted


def recovery_point(now):
    return now.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')


def build_tags(request, instance_ids, now):
    return {
        'Name': request.name,
        'VolumeID': request.volume_id,
        'Description': request.description,
        'InstanceIDs': ','.join(instance_ids),
        'RecoveryPoint': recovery_point(now),
    }


def sort_snapshots(snapshots):
    """Oldest first. Snapshots sharing a start time keep the order they came in."""
    return sorted(snapshots, key=attrgetter('start_time'))


def select_for_deletion(snapshots, keep_count):
    """Return the oldest snapshots beyond ``keep_count`` from an oldest-first list."""
    if keep_count >= len(snapshots):
        return []
    return snapshots[:len(snapshots) - keep_count]


def delete_snapshots(service, snapshots):
    results = []
    for snapshot in snapshots:
        try:
            service.delete_snapshot(snapshot.id)
        except DeletionError as e:
            logger.warning('error removing snapshot id %s - is it in use? it will be skipped. '
                           'error is %s', snapshot.id, e.reason)
            results.append(DeletionResult(snapshot.id, e.reason))
        else:
            logger.info('removed snapshot %s (started %s)', snapshot.id, snapshot.start_time)
            results.append(DeletionResult(snapshot.id))
    return results


def create_snapshot(request, service, now):
    instance_ids = list(service.iter_attached_instance_ids(request.volume_id))
    tags = build_tags(request, instance_ids, now)
    snapshot_id = service.create_snapshot(request.volume_id, request.description, tags)
    logger.info('created snapshot request, snapshot id is "%s"', snapshot_id)
    return snapshot_id


def list_snapshots(request, service):
    return list(service.iter_snapshots(request.volume_id))


def run(request, config, service, remaining_time=None, now=None):
    """Snapshot ``request.volume_id`` and enforce retention on its snapshots.

    ``remaining_time`` is an optional callable returning the milliseconds left
    in the invocation, as the Lambda context's ``get_remaining_time_in_millis``.
    The listing is assumed to already include the snapshot just created.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    snapshot_id = create_snapshot(request, service, now)

    snapshots = sort_snapshots(list_snapshots(request, service))
    logger.info('found %d existing snapshots for volume id %s', len(snapshots), request.volume_id)

    keep_count = config.effective_keep_count(request)
    doomed = select_for_deletion(snapshots, keep_count)
    if doomed:
        logger.info('removing %d old snapshot%s', len(doomed), 's' if len(doomed) > 1 else '')
    else:
        logger.info('we want to keep %d snapshots and have %d available. nothing to remove',
                    keep_count, len(snapshots))

    results = delete_snapshots(service, doomed)

    return RunOutcome(snapshot_id=snapshot_id,
                      existing_count=len(snapshots),
                      keep_count=keep_count,
                      deletions=results,
                      remaining_time_ms=remaining_time() if remaining_time else None)
