import unittest
from datetime import date, datetime, timedelta, timezone
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data_processing.periods import (
    EPOCH_ORIGIN,
    day_of_week,
    epoch_number,
    epoch_period_label,
    epoch_range_for_month,
    label_belongs_to_month,
    month_bounds,
    month_label,
    month_name,
    parse_rollup_label,
    previous_month_label,
    previous_year_label,
    year_label,
)


class TestEpochNumber(unittest.TestCase):
    """Epoch numbering from the 2022-10-31 origin."""

    def test_origin_is_epoch_one(self):
        self.assertEqual(epoch_number(EPOCH_ORIGIN), 1)

    def test_increments_every_seven_days(self):
        for n in range(0, 60):
            start = EPOCH_ORIGIN + timedelta(days=7 * n)
            self.assertEqual(epoch_number(start), n + 1)
            self.assertEqual(epoch_number(start + timedelta(days=7) - timedelta(seconds=1)), n + 1)

    def test_non_decreasing(self):
        previous = epoch_number(EPOCH_ORIGIN)
        moment = EPOCH_ORIGIN
        for _ in range(500):
            moment += timedelta(hours=13)
            current = epoch_number(moment)
            self.assertGreaterEqual(current, previous)
            self.assertLessEqual(current - previous, 1)
            previous = current

    def test_naive_datetime_treated_as_utc(self):
        self.assertEqual(epoch_number(datetime(2022, 11, 7)), 2)

    def test_date_and_offset_aware_instants(self):
        self.assertEqual(epoch_number(date(2024, 1, 3)), 62)
        # 2022-11-07 01:00 at UTC+2 is still 2022-11-06 in UTC
        plus_two = timezone(timedelta(hours=2))
        self.assertEqual(epoch_number(datetime(2022, 11, 7, 1, 0, tzinfo=plus_two)), 1)


class TestDayOfWeek(unittest.TestCase):

    def test_monday_and_sunday(self):
        self.assertEqual(day_of_week(date(2024, 1, 1)), 1)
        self.assertEqual(day_of_week(date(2024, 1, 7)), 7)

    def test_seven_consecutive_days_cover_all_slots(self):
        for offset in range(7):
            start = date(2024, 5, 1) + timedelta(days=offset)
            slots = {day_of_week(start + timedelta(days=i)) for i in range(7)}
            self.assertEqual(slots, set(range(1, 8)))


class TestLabels(unittest.TestCase):

    def test_month_and_year_labels(self):
        moment = datetime(2024, 3, 9, 12, 0, tzinfo=timezone.utc)
        self.assertEqual(month_label(moment), "2024-03")
        self.assertEqual(previous_month_label(moment), "2024-02")
        self.assertEqual(year_label(moment), "2024")
        self.assertEqual(previous_year_label(moment), "2023")
        self.assertEqual(month_name(moment), "march")

    def test_previous_month_wraps_year(self):
        self.assertEqual(previous_month_label(date(2025, 1, 15)), "2024-12")

    def test_month_bounds_handles_leap_year(self):
        self.assertEqual(month_bounds("2024-02"), (date(2024, 2, 1), date(2024, 2, 29)))
        self.assertEqual(month_bounds("2023-02"), (date(2023, 2, 1), date(2023, 2, 28)))

    def test_epoch_range_for_month(self):
        first, last = month_bounds("2023-01")
        self.assertEqual(epoch_range_for_month(first, last), (9, 14))

    def test_epoch_period_label(self):
        self.assertEqual(epoch_period_label(2024, 62), "2024-epoch-62")


class TestRollupLabels(unittest.TestCase):

    def test_parse_epoch_label(self):
        label = parse_rollup_label("2023-epoch-12.csv")
        self.assertEqual(label.year, 2023)
        self.assertEqual(label.epoch, 12)
        self.assertFalse(label.is_legacy)
        self.assertIsNone(label.estimated_month)

    def test_parse_legacy_week_label(self):
        label = parse_rollup_label("2023-W05.csv")
        self.assertTrue(label.is_legacy)
        self.assertEqual(label.legacy_week, 5)
        self.assertEqual(label.estimated_month, 2)

    def test_unrecognised_name(self):
        self.assertIsNone(parse_rollup_label("notes.txt"))

    def test_legacy_estimate_is_approximate(self):
        # Known approximation: week 13 ends in late March but is estimated as April
        self.assertEqual(parse_rollup_label("2023-W13.csv").estimated_month, 4)
        self.assertEqual(parse_rollup_label("2023-W04.csv").estimated_month, 1)

    def test_label_belongs_to_month(self):
        epoch_range = (9, 14)
        self.assertTrue(label_belongs_to_month(parse_rollup_label("2023-epoch-9.csv"), 1, epoch_range))
        self.assertTrue(label_belongs_to_month(parse_rollup_label("2023-epoch-14.csv"), 1, epoch_range))
        self.assertFalse(label_belongs_to_month(parse_rollup_label("2023-epoch-8.csv"), 1, epoch_range))
        self.assertFalse(label_belongs_to_month(parse_rollup_label("2023-epoch-15.csv"), 1, epoch_range))
        self.assertTrue(label_belongs_to_month(parse_rollup_label("2023-W03.csv"), 1, epoch_range))
        self.assertFalse(label_belongs_to_month(parse_rollup_label("2023-W06.csv"), 1, epoch_range))


if __name__ == '__main__':
    unittest.main()
