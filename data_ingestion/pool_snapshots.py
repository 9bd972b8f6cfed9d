"""
Pool snapshot drivers.

Each driver loads its inputs (API or lower-granularity files), aggregates,
writes its output file and returns a RunResult. Loading failures propagate
before anything is written.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from api_clients.pools_client import PoolsClient
from data_processing.aggregate_pools import DAILY_SCHEME, ROLLUP_SCHEME, aggregate_pools
from data_processing.periods import (
    day_of_week,
    epoch_number,
    epoch_period_label,
    epoch_range_for_month,
    label_belongs_to_month,
    month_bounds,
    month_name,
    parse_rollup_label,
    previous_month_label,
    previous_year_label,
)
from storage.models.pool_snapshot import AggregateRecord
from storage.repositories.pool_snapshot_repository import SIX_DAY_AVG_FILE, PoolSnapshotRepository

logger = logging.getLogger(__name__)

ALL_SLOTS = range(1, 8)
# Slot 7 is left out of the rolling average
ROLLING_SLOTS = range(1, 7)
SIX_DAY_PERIOD = "6-day-avg"


@dataclass(frozen=True)
class RunResult:
    pools: int
    file: str


def _log_pools(records: Sequence[AggregateRecord], with_volume: bool = False) -> None:
    for record in records:
        line = f"  {record.pool_id:<20} Avg TVL: ${record.avg_tvl_usd:>10.2f}"
        if with_volume:
            line += f"  Total Vol: ${record.total_volume_usd:.2f}"
        logger.info(line)


def run_daily(repo: PoolSnapshotRepository, client: PoolsClient, now: Optional[datetime] = None) -> RunResult:
    """Capture today's pools into the weekday slot file, then refresh the 6-day average."""
    logger.info("========== DAILY SNAPSHOT ==========")

    now = now or datetime.now().astimezone()
    utc_now = now.astimezone(timezone.utc)
    date_str = utc_now.strftime('%Y-%m-%d')
    time_str = utc_now.strftime('%H:%M:%S')
    day = day_of_week(now)

    logger.info(f"Date: {date_str} (Day {day} of week)")
    logger.info(f"Time: {time_str} UTC")
    logger.info(f"Current Epoch: {epoch_number(now)}")

    records = client.fetch_pools(date_str, time_str)

    repo.write_daily(day, records)
    repo.write_backup(month_name(now), date_str, records)

    calculate_6_day_average(repo)

    return RunResult(pools=len(records), file=f"day-{day}.csv")


def calculate_6_day_average(repo: PoolSnapshotRepository) -> Optional[RunResult]:
    """Average slot files 1-6 into the fixed rolling average file."""
    logger.info("--- Calculating 6-Day Average ---")

    slots = repo.existing_slots(ROLLING_SLOTS)
    if not slots:
        logger.info("  No daily files found yet")
        return None

    logger.info(f"  Using {len(slots)} daily files")
    records = aggregate_pools(repo.read_slots(slots), SIX_DAY_PERIOD, DAILY_SCHEME)
    repo.write_six_day_average(records)
    logger.info(f"  Pools processed: {len(records)}")
    return RunResult(pools=len(records), file=SIX_DAY_AVG_FILE)


def run_weekly(repo: PoolSnapshotRepository, now: Optional[datetime] = None) -> RunResult:
    """Roll every present day slot up into the current epoch file."""
    logger.info("========== WEEKLY (EPOCH) AGGREGATION ==========")

    now = now or datetime.now().astimezone()
    epoch = epoch_number(now)
    period = epoch_period_label(now.year, epoch)

    logger.info(f"Aggregating epoch: {epoch}")
    logger.info(f"Filename: {period}.csv")

    slots = repo.existing_slots(ALL_SLOTS)
    logger.info(f"Found {len(slots)} daily files")

    records = aggregate_pools(repo.read_slots(slots), period, DAILY_SCHEME)
    _log_pools(records, with_volume=True)

    filename, _ = repo.write_weekly(period, records)
    return RunResult(pools=len(records), file=filename)


def select_month_files(names: Sequence[str], period: str) -> List[str]:
    """
    Weekly rollup files belonging to a ``YYYY-MM`` month.

    Epoch files are matched by the month's inclusive epoch range; legacy week
    files by their estimated month.
    """
    first_day, last_day = month_bounds(period)
    epoch_range = epoch_range_for_month(first_day, last_day)
    logger.info(f"Month {first_day.month:02d} spans epochs {epoch_range[0]} to {epoch_range[1]}")

    selected = []
    for name in names:
        label = parse_rollup_label(name)
        if label is not None and label_belongs_to_month(label, first_day.month, epoch_range):
            selected.append(name)
    return selected


def run_monthly(repo: PoolSnapshotRepository, now: Optional[datetime] = None) -> RunResult:
    """Re-aggregate the previous month's weekly rollups."""
    logger.info("========== MONTHLY AGGREGATION ==========")

    now = now or datetime.now().astimezone()
    period = previous_month_label(now)
    year = int(period.split('-')[0])
    logger.info(f"Aggregating month: {period}")

    weekly_files = repo.list_weekly(year)
    logger.info(f"Found {len(weekly_files)} weekly/epoch files for {year}")

    relevant = select_month_files(weekly_files, period)
    logger.info(f"Using {len(relevant)} files for {period}")

    records = aggregate_pools(repo.read_weekly(relevant), period, ROLLUP_SCHEME)
    _log_pools(records)

    filename, _ = repo.write_monthly(period, records)
    return RunResult(pools=len(records), file=filename)


def run_yearly(repo: PoolSnapshotRepository, now: Optional[datetime] = None) -> RunResult:
    """Re-aggregate every monthly rollup of the previous year."""
    logger.info("========== YEARLY AGGREGATION ==========")

    now = now or datetime.now().astimezone()
    period = previous_year_label(now)
    logger.info(f"Aggregating year: {period}")

    monthly_files = repo.list_monthly(int(period))
    logger.info(f"Found {len(monthly_files)} monthly files for {period}")

    records = aggregate_pools(repo.read_monthly(monthly_files), period, ROLLUP_SCHEME)
    _log_pools(records)

    filename, _ = repo.write_yearly(period, records)
    return RunResult(pools=len(records), file=filename)
