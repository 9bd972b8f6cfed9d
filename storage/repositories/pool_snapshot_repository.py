
import logging
import os
from typing import Dict, Iterable, List, Sequence, Tuple

from storage.models.pool_snapshot import AGG_HEADERS, DAILY_HEADERS, AggregateRecord, PoolRecord
from storage.repositories.base_repository import FlatFileRepository, format_csv

logger = logging.getLogger(__name__)

SIX_DAY_AVG_FILE = "6-day-avg.csv"


class PoolSnapshotRepository(FlatFileRepository):
    """
    Day slot files, rolling average and period rollups of pool snapshots.

    Layout under the data root:
      day-1.csv .. day-7.csv          daily slots, overwritten weekly
      6-day-avg.csv                   rolling average of slots 1-6
      data/{month}_backup/            dated copies of daily snapshots
      data/weekly-avg/                epoch rollups
      data/monthly-avg/               monthly rollups
      {year}-yearly.csv               yearly rollups
    """

    def __init__(self, root: str = "."):
        super().__init__(root)
        self.weekly_dir = self.path("data", "weekly-avg")
        self.monthly_dir = self.path("data", "monthly-avg")

    def ensure_directories(self) -> Dict[str, int]:
        return {directory: self.ensure_directory(directory) for directory in (self.weekly_dir, self.monthly_dir)}

    # Daily slots

    def slot_path(self, day: int) -> str:
        return self.path(f"day-{day}.csv")

    def existing_slots(self, days: Iterable[int]) -> List[int]:
        return [day for day in days if self.exists(self.slot_path(day))]

    def write_daily(self, day: int, records: Sequence[PoolRecord]) -> str:
        return self.write_text(self.slot_path(day), self._daily_csv(records))

    def write_backup(self, month_name: str, date_str: str, records: Sequence[PoolRecord]) -> str:
        return self.write_text(self.path("data", f"{month_name}_backup", f"{date_str}.csv"), self._daily_csv(records))

    def read_slots(self, days: Iterable[int]) -> List[Dict[str, str]]:
        rows = []
        for day in days:
            rows.extend(self.read_rows(self.slot_path(day)))
        return rows

    # Rollups

    def list_weekly(self, year: int) -> List[str]:
        return [
            name for name in self.list_files(self.weekly_dir)
            if name.startswith(f"{year}-epoch-") or name.startswith(f"{year}-W")
        ]

    def list_monthly(self, year: int) -> List[str]:
        return self.list_files(self.monthly_dir, prefix=f"{year}-")

    def read_weekly(self, names: Iterable[str]) -> List[Dict[str, str]]:
        rows = []
        for name in names:
            rows.extend(self.read_rows(os.path.join(self.weekly_dir, name)))
        return rows

    def read_monthly(self, names: Iterable[str]) -> List[Dict[str, str]]:
        rows = []
        for name in names:
            rows.extend(self.read_rows(os.path.join(self.monthly_dir, name)))
        return rows

    def write_six_day_average(self, records: Sequence[AggregateRecord]) -> str:
        return self.write_text(self.path(SIX_DAY_AVG_FILE), self._aggregate_csv(records))

    def write_weekly(self, period: str, records: Sequence[AggregateRecord]) -> Tuple[str, str]:
        filename = f"{period}.csv"
        return filename, self.write_text(os.path.join(self.weekly_dir, filename), self._aggregate_csv(records))

    def write_monthly(self, period: str, records: Sequence[AggregateRecord]) -> Tuple[str, str]:
        filename = f"{period}.csv"
        return filename, self.write_text(os.path.join(self.monthly_dir, filename), self._aggregate_csv(records))

    def write_yearly(self, period: str, records: Sequence[AggregateRecord]) -> Tuple[str, str]:
        filename = f"{period}-yearly.csv"
        return filename, self.write_text(self.path(filename), self._aggregate_csv(records))

    @staticmethod
    def _daily_csv(records: Sequence[PoolRecord]) -> str:
        return format_csv(DAILY_HEADERS, (r.to_row() for r in records), quoted_columns=["pool_id"])

    @staticmethod
    def _aggregate_csv(records: Sequence[AggregateRecord]) -> str:
        return format_csv(AGG_HEADERS, (r.to_row() for r in records), quoted_columns=["pool_id"])
