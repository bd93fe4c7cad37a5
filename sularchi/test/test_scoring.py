"""Tests for point awards and streak transitions."""

from datetime import datetime, timedelta

import pytest

from sularchi.categories import WasteCategory
from sularchi.models import to_iso
from sularchi.scoring import POINTS_TABLE, calculate_points, compute_streak


class TestCalculatePoints:

    def test_all_bonuses(self):
        # 25 base + 5 confidence + 3 * 5 streak
        assert calculate_points("hazardous", 0.9, 3) == 45

    def test_no_bonuses(self):
        assert calculate_points("organic", 0.5, 0) == 6

    def test_confidence_threshold_is_inclusive(self):
        assert calculate_points(WasteCategory.PAPER, 0.85, 0) == 13
        assert calculate_points(WasteCategory.PAPER, 0.849, 0) == 8

    def test_streak_bonus_caps_at_seven_days(self):
        assert calculate_points("plastic", 0.5, 7) == 10 + 35
        assert calculate_points("plastic", 0.5, 30) == 10 + 35

    def test_base_table(self):
        assert {c.value: p for c, p in POINTS_TABLE.items()} == {
            "plastic": 10, "paper": 8, "glass": 12, "metal": 12, "organic": 6,
            "e-waste": 20, "textile": 10, "hazardous": 25, "unknown": 3,
        }

    def test_unknown_category_value(self):
        with pytest.raises(ValueError):
            calculate_points("rubble", 0.9, 1)


class TestComputeStreak:

    @pytest.fixture
    def now(self):
        return datetime(2026, 3, 10, 12, 0, 0).astimezone()

    def test_first_report(self, now):
        assert compute_streak(None, 0, now=now) == 1

    def test_same_day(self, now):
        assert compute_streak(to_iso(now - timedelta(hours=3)), 4, now=now) == 4

    def test_yesterday(self, now):
        assert compute_streak(to_iso(now - timedelta(days=1)), 4, now=now) == 5

    def test_gap_resets(self, now):
        assert compute_streak(to_iso(now - timedelta(days=3)), 4, now=now) == 1

    def test_future_date_resets(self, now):
        assert compute_streak(to_iso(now + timedelta(days=2)), 4, now=now) == 1

    def test_calendar_day_not_24_hours(self):
        late = datetime(2026, 3, 9, 23, 30).astimezone()
        early = datetime(2026, 3, 10, 0, 15).astimezone()
        assert compute_streak(to_iso(late), 2, now=early) == 3

    def test_accepts_datetime(self, now):
        assert compute_streak(now - timedelta(days=1), 1, now=now) == 2
