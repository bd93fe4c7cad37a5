"""Points and streak rules for filed complaints."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Optional, Union

from sularchi.categories import WasteCategory, parse_category
from sularchi.models import parse_iso, utc_now

POINTS_TABLE: Dict[WasteCategory, int] = {
    WasteCategory.PLASTIC: 10,
    WasteCategory.PAPER: 8,
    WasteCategory.GLASS: 12,
    WasteCategory.METAL: 12,
    WasteCategory.ORGANIC: 6,
    WasteCategory.E_WASTE: 20,
    WasteCategory.TEXTILE: 10,
    WasteCategory.HAZARDOUS: 25,
    WasteCategory.UNKNOWN: 3,
}

HIGH_CONFIDENCE_THRESHOLD = 0.85
HIGH_CONFIDENCE_BONUS = 5
STREAK_BONUS = 5
MAX_STREAK_BONUS_DAYS = 7


def calculate_points(category: Union[WasteCategory, str], confidence: float, streak: int) -> int:
    """Base points for the category plus confidence and streak bonuses."""
    points = POINTS_TABLE[parse_category(category)]
    if confidence >= HIGH_CONFIDENCE_THRESHOLD:
        points += HIGH_CONFIDENCE_BONUS
    if streak > 0:
        points += min(streak, MAX_STREAK_BONUS_DAYS) * STREAK_BONUS
    return points


def _local_date(moment: datetime):
    # Naive datetimes are taken as local time already.
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def compute_streak(
    last_report_date: Optional[Union[str, datetime]],
    current_streak: int,
    now: Optional[datetime] = None,
) -> int:
    """Streak after reporting at ``now``, compared by local calendar day."""
    if not last_report_date:
        return 1

    last = parse_iso(last_report_date) if isinstance(last_report_date, str) else last_report_date
    today = _local_date(now or utc_now())
    last_day = _local_date(last)

    if last_day == today:
        return current_streak
    if last_day == today - timedelta(days=1):
        return current_streak + 1
    return 1
