import logging
import os

LOG_FORMAT = '[%(asctime)s][%(levelname)s] %(message)s'


def resolve_level(level):
    """Map a level name such as ``debug`` to its number, INFO when unknown."""
    if isinstance(level, int):
        return level
    number = logging.getLevelName(str(level).strip().upper())
    return number if isinstance(number, int) else logging.INFO


def configure_logging(level=None):
    """Format the Lambda runtime's log handler and quiet the AWS SDK.

    The Lambda runtime installs a handler on the root logger before our code is
    imported. Outside of Lambda there is none, so one is added.
    """
    logger = logging.getLogger()
    logger.setLevel(resolve_level(level or os.environ.get('LOG_LEVEL', 'INFO')))
    if not logger.handlers:
        logger.addHandler(logging.StreamHandler())
    logger.handlers[0].setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger('boto3').setLevel(logging.ERROR)
    logging.getLogger('botocore').setLevel(logging.ERROR)
    return logger
