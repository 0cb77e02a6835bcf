from abc import ABC, abstractmethod
from collections import namedtuple

SnapshotRecord = namedtuple('SnapshotRecord', ['id', 'volume_id', 'start_time'])


class SnapshotService(ABC):
    """The calls the retention routine makes against the block-storage service.

    A service is opened once per invocation and closed on every exit path, so
    it is used as a context manager.
    """

    @abstractmethod
    def iter_attached_instance_ids(self, volume_id):
        """Yield the instance id of every attachment of ``volume_id``, page by page.

        Raises SnapshotCreationError when the volume cannot be described.
        """

    @abstractmethod
    def create_snapshot(self, volume_id, description, tags):
        """Request a snapshot tagged with ``tags`` (a dict) and return its id.

        Raises SnapshotCreationError when the service refuses.
        """

    @abstractmethod
    def iter_snapshots(self, volume_id):
        """Yield a SnapshotRecord for every snapshot of ``volume_id``, page by page.

        Raises ListingError when any page cannot be fetched.
        """

    @abstractmethod
    def delete_snapshot(self, snapshot_id):
        """Delete one snapshot, raising DeletionError when the service refuses."""

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
