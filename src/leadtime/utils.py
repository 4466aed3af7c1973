import logging
from datetime import datetime, timezone

from .errors import InvalidCutoffError

logger = logging.getLogger(__name__)


def parse_cutoff(value: str) -> datetime:
    """
    Parse an ISO-8601 cutoff timestamp such as ``2024-03-01T00:00:00Z``.

    Timestamps without an offset are taken as UTC so they compare cleanly
    against the timezone-aware values GitHub returns.
    """
    text = value.strip()
    if not text:
        raise InvalidCutoffError(value, "empty value")
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidCutoffError(value, str(e)) from e

    if parsed.tzinfo is None:
        logger.debug(f"Cutoff {value} has no UTC offset, assuming UTC")
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def duration_seconds(start: datetime, end: datetime) -> int:
    # int() truncates toward zero for negative spans as well
    return int((end - start).total_seconds())
