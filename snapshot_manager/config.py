import os
from collections import namedtuple

from snapshot_manager.exceptions import ConfigurationError
from snapshot_manager.request import parse_keep_count

NUM_SNAPSHOTS_TO_KEEP_DEFAULT = 10
AMBIENT_REGION_VARIABLES = ('AWS_REGION', 'AWS_DEFAULT_REGION')


class RetentionConfig(namedtuple('RetentionConfig',
                                 ['default_keep_count', 'region', 'ambient_region'])):
    """Process-scoped settings, read once at the start of an invocation.

    ``region`` is the ``REGION`` override; ``ambient_region`` is whatever
    region the Lambda runtime is executing in.
    """

    __slots__ = ()

    def __new__(cls, default_keep_count=NUM_SNAPSHOTS_TO_KEEP_DEFAULT, region=None,
                ambient_region=None):
        return super().__new__(cls, default_keep_count, region, ambient_region)

    @classmethod
    def from_environ(cls, environ=None):
        if environ is None:
            environ = os.environ

        keep_count = NUM_SNAPSHOTS_TO_KEEP_DEFAULT
        raw = environ.get('NUM_SNAPSHOTS_TO_KEEP', '').strip()
        if raw:
            try:
                keep_count = parse_keep_count(raw, 'NUM_SNAPSHOTS_TO_KEEP')
            except ValueError as e:
                raise ConfigurationError(str(e)) from e

        ambient = None
        for name in AMBIENT_REGION_VARIABLES:
            if environ.get(name, '').strip():
                ambient = environ[name].strip()
                break

        return cls(default_keep_count=keep_count,
                   region=environ.get('REGION', '').strip() or None,
                   ambient_region=ambient)

    def resolve_region(self):
        region = self.region or self.ambient_region
        if not region:
            raise ConfigurationError('no region: set REGION or run where AWS_REGION is defined')
        return region

    def effective_keep_count(self, request):
        if request.keep_count_override is not None:
            return request.keep_count_override
        return self.default_keep_count
