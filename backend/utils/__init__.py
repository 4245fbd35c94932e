from .time import utc_now, parse_timestamp
from .log import setup_logging

__all__ = ["utc_now", "parse_timestamp", "setup_logging"]
