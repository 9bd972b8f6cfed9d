"""
Period identifiers used by the pool snapshot pipeline.

Converts wall-clock instants into day-of-week slots, epoch numbers and
month/year labels, and parses the period labels embedded in weekly rollup
file names.
"""

import calendar
import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple, Union

# TLA epochs started 2022-10-31 00:00:00 UTC, each epoch is 7 days
EPOCH_ORIGIN = datetime(2022, 10, 31, tzinfo=timezone.utc)
EPOCH_DURATION = timedelta(days=7)

# Legacy week files are mapped to months with this divisor
WEEKS_PER_MONTH = 4.33

MONTH_NAMES = [
    'january', 'february', 'march', 'april', 'may', 'june',
    'july', 'august', 'september', 'october', 'november', 'december'
]

EPOCH_LABEL_RE = re.compile(r"(\d{4})-epoch-(\d+)")
LEGACY_WEEK_LABEL_RE = re.compile(r"(\d{4})-W(\d{2})")

Instant = Union[datetime, date]


def _as_utc(instant: Instant) -> datetime:
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            return instant.replace(tzinfo=timezone.utc)
        return instant.astimezone(timezone.utc)
    return datetime(instant.year, instant.month, instant.day, tzinfo=timezone.utc)


def day_of_week(instant: Instant) -> int:
    """Monday=1 ... Sunday=7."""
    return instant.isoweekday()


def epoch_number(instant: Instant) -> int:
    """Epoch index of the 7-day window containing ``instant``; the origin instant is epoch 1."""
    elapsed = _as_utc(instant) - EPOCH_ORIGIN
    return math.floor(elapsed / EPOCH_DURATION) + 1


def month_label(instant: Instant) -> str:
    return f"{instant.year}-{instant.month:02d}"


def previous_month_label(instant: Instant) -> str:
    if instant.month == 1:
        return f"{instant.year - 1}-12"
    return f"{instant.year}-{instant.month - 1:02d}"


def year_label(instant: Instant) -> str:
    return f"{instant.year}"


def previous_year_label(instant: Instant) -> str:
    return f"{instant.year - 1}"


def month_name(instant: Instant) -> str:
    return MONTH_NAMES[instant.month - 1]


def month_bounds(label: str) -> Tuple[date, date]:
    """First and last calendar day of a ``YYYY-MM`` label."""
    year, month = (int(part) for part in label.split("-"))
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def epoch_range_for_month(month_start: Instant, month_end: Instant) -> Tuple[int, int]:
    """
    Inclusive epoch range touching a month.

    Epochs crossing either month boundary are part of the range; callers
    include their files in full.
    """
    return epoch_number(month_start), epoch_number(month_end)


def epoch_period_label(year: int, epoch: int) -> str:
    return f"{year}-epoch-{epoch}"


@dataclass(frozen=True)
class RollupLabel:
    """Period label parsed from a weekly rollup file name."""
    year: int
    epoch: Optional[int] = None
    legacy_week: Optional[int] = None

    @property
    def is_legacy(self) -> bool:
        return self.legacy_week is not None

    @property
    def estimated_month(self) -> Optional[int]:
        # Compatibility shim for old "YYYY-WNN" files. Boundary weeks can land
        # in the neighbouring month.
        if self.legacy_week is None:
            return None
        return math.ceil(self.legacy_week / WEEKS_PER_MONTH)


def parse_rollup_label(name: str) -> Optional[RollupLabel]:
    """Parse ``YYYY-epoch-N`` labels, falling back to legacy ``YYYY-WNN`` week labels."""
    epoch_match = EPOCH_LABEL_RE.search(name)
    if epoch_match:
        return RollupLabel(year=int(epoch_match.group(1)), epoch=int(epoch_match.group(2)))

    week_match = LEGACY_WEEK_LABEL_RE.search(name)
    if week_match:
        return RollupLabel(year=int(week_match.group(1)), legacy_week=int(week_match.group(2)))

    return None


def label_belongs_to_month(label: RollupLabel, month: int, epoch_range: Tuple[int, int]) -> bool:
    if label.epoch is not None:
        epoch_start, epoch_end = epoch_range
        return epoch_start <= label.epoch <= epoch_end
    return label.estimated_month == month
