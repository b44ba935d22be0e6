"""Date manipulation utilities for submission timestamps"""

import re
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

EPOCH = datetime(1970, 1, 1)

SUBMISSION_DATE_FORMAT = "%d/%m/%Y %H:%M:%S"

# DD/MM/YYYY, optionally followed by ", HH:MM" or " HH:MM:SS"
_SUBMISSION_DATE_RE = re.compile(
    r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})(?:,?\s+(\d{1,2}):(\d{2})(?::(\d{2}))?)?\s*$"
)


def format_submission_date(moment: Optional[datetime] = None, tz: str = "Europe/Paris") -> str:
    """Format a moment as local DD/MM/YYYY HH:MM:SS (default: now)"""
    if moment is None:
        moment = datetime.now(ZoneInfo(tz))
    elif moment.tzinfo is not None:
        moment = moment.astimezone(ZoneInfo(tz))
    return moment.strftime(SUBMISSION_DATE_FORMAT)


def parse_submission_date(value: Optional[str]) -> datetime:
    """
    Parse a DD/MM/YYYY[ HH:MM[:SS]] string into a naive datetime.

    Missing, malformed or impossible dates (e.g. 31/02) map to the epoch so
    they sort as the oldest records. Never raises.
    """
    if not value or not isinstance(value, str):
        return EPOCH

    match = _SUBMISSION_DATE_RE.match(value)
    if not match:
        return EPOCH

    day, month, year, hour, minute, second = match.groups()
    try:
        return datetime(
            int(year),
            int(month),
            int(day),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
        )
    except ValueError:
        return EPOCH
