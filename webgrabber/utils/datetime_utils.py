import logging
from datetime import datetime, timezone
from typing import Optional, Union

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_to_utc(value: Union[str, int, float, datetime, None]) -> Optional[datetime]:
    """Parse an ISO datetime string, epoch seconds or datetime and return an aware UTC datetime.

    Naive values are taken to be UTC. Returns None if parsing fails or value is None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.debug("Could not parse epoch timestamp: %s", value)
            return None
    else:
        text = str(value).strip()
        # fromisoformat() on older interpreters rejects the "Z" suffix
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Could not parse datetime string: %s", value)
            return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
