"""Create an EBS snapshot and prune the oldest ones beyond a keep-count."""

__version__ = '1.0.0'
