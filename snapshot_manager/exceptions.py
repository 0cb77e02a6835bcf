class SnapshotManagerError(Exception):
    """Base class for every error raised by the snapshot manager."""


class InputError(SnapshotManagerError):
    """The invocation payload is missing a field or carries a bad value."""


class ConfigurationError(SnapshotManagerError):
    """The environment does not describe a usable configuration."""


class SnapshotCreationError(SnapshotManagerError):
    """The new snapshot could not be requested."""


class ListingError(SnapshotManagerError):
    """Existing snapshots for the volume could not be enumerated."""


class DeletionError(SnapshotManagerError):
    """A single snapshot could not be deleted."""

    def __init__(self, snapshot_id, reason):
        super().__init__('error removing snapshot id %s: %s' % (snapshot_id, reason))
        self.snapshot_id = snapshot_id
        self.reason = reason
