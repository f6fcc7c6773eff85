"""Countdown Time Source Component.

Turns a fixed target deadline and an arbitrary "now" into the
days/hours/minutes/seconds shown on a countdown frame.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

import pytz

logger = logging.getLogger(__name__)

# Time calculations
SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60


@dataclass(frozen=True)
class RemainingTime:
    """Time left until the deadline, split into display fields."""

    days: int
    hours: int
    minutes: int
    seconds: int
    is_elapsed: bool = False

    @property
    def total_seconds(self) -> int:
        return (self.days * SECONDS_PER_DAY + self.hours * SECONDS_PER_HOUR
                + self.minutes * SECONDS_PER_MINUTE + self.seconds)

    def as_digits(self) -> Tuple[str, str, str, str]:
        """Zero-padded two-digit strings for days, hours, minutes, seconds."""
        return (f"{self.days:02d}", f"{self.hours:02d}", f"{self.minutes:02d}", f"{self.seconds:02d}")


ELAPSED = RemainingTime(days=0, hours=0, minutes=0, seconds=0, is_elapsed=True)


def parse_deadline(deadline_str: str, default_tz: str = "Africa/Johannesburg") -> datetime:
    """Parse an ISO 8601 deadline into a timezone-aware datetime.

    Args:
        deadline_str: ISO 8601 timestamp (e.g., 2026-01-31T10:30:00+02:00)
        default_tz: Timezone applied when the timestamp carries no offset

    Returns:
        datetime: Timezone-aware deadline

    Raises:
        ValueError: If deadline_str is invalid or cannot be parsed
    """
    try:
        deadline = datetime.fromisoformat(deadline_str.strip().replace('Z', '+00:00'))
        if deadline.tzinfo is None:
            deadline = pytz.timezone(default_tz).localize(deadline)
    except (ValueError, AttributeError, pytz.UnknownTimeZoneError) as parse_err:
        logger.error(f"Failed to parse deadline '{deadline_str}': {parse_err}")
        raise ValueError(f'Invalid deadline format: {parse_err}') from parse_err

    logger.debug(f"Parsed deadline: {deadline.isoformat()}")
    return deadline


class CountdownClock:
    """Computes remaining time against one immutable target deadline."""

    def __init__(self, target: datetime):
        if target.tzinfo is None:
            raise ValueError("Target deadline must be timezone-aware")
        self._target = target

    @property
    def target(self) -> datetime:
        return self._target

    def remaining(self, now: datetime) -> RemainingTime:
        """Split the time left until the target into display fields.

        Each field is the remainder of the previous division, so the four
        fields always add back up to the floored number of seconds left.
        """
        if now.tzinfo is None:
            raise ValueError("'now' must be timezone-aware")

        diff = self._target - now
        if diff.total_seconds() <= 0:
            return ELAPSED

        # timedelta arithmetic is exact to the microsecond; floor to whole seconds
        total_seconds = diff.days * SECONDS_PER_DAY + diff.seconds
        days, rest = divmod(total_seconds, SECONDS_PER_DAY)
        hours, rest = divmod(rest, SECONDS_PER_HOUR)
        minutes, seconds = divmod(rest, SECONDS_PER_MINUTE)
        return RemainingTime(days=days, hours=hours, minutes=minutes, seconds=seconds)
