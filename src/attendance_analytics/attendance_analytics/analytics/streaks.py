from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable

from ..core.constants import GOOD_DAY_MIN_RATIO
from ..core.enums import StreakType
from ..records.model import AttendanceEvent
from ..records.repository import AttendanceRecordSource
from .filters import AnalyticsFilter
from .model import StatusTally, StreakDay, StreakReport, StreakStats


def is_good_day(tally: StatusTally) -> bool:
    return tally.total > 0 and tally.present / tally.total >= GOOD_DAY_MIN_RATIO


def analyze_streaks(events: Iterable[AttendanceEvent]) -> StreakReport:
    """Walk observed UTC days once, tracking good/poor runs."""
    by_date: dict[date, StatusTally] = defaultdict(StatusTally)
    for event in events:
        by_date[event.instant.date()].add(event.status)

    days: list[StreakDay] = []
    best = {StreakType.GOOD: 0, StreakType.POOR: 0}
    run_type = StreakType.NONE
    run_length = 0

    for day in sorted(by_date):
        tally = by_date[day]
        good = is_good_day(tally)
        kind = StreakType.GOOD if good else StreakType.POOR
        is_break = run_type != StreakType.NONE and kind != run_type

        if kind == run_type:
            run_length += 1
        else:
            if run_type != StreakType.NONE:
                best[run_type] = max(best[run_type], run_length)
            run_type, run_length = kind, 1

        days.append(
            StreakDay(
                date=day.isoformat(),
                attendance_rate=tally.attendance_rate,
                is_good_day=good,
                signed_run_length=run_length if good else -run_length,
                streak_type=kind,
                is_break_point=is_break,
            )
        )

    # the in-progress run counts toward the maxima too
    if run_type != StreakType.NONE:
        best[run_type] = max(best[run_type], run_length)

    good_days = sum(1 for d in days if d.is_good_day)
    stats = StreakStats(
        max_good_streak=best[StreakType.GOOD],
        max_poor_streak=best[StreakType.POOR],
        current_streak=run_length,
        current_streak_type=run_type,
        total_good_days=good_days,
        total_poor_days=len(days) - good_days,
    )
    return StreakReport(days=days, stats=stats)


class StreakAnalyzer:
    def __init__(self, source: AttendanceRecordSource):
        self._source = source

    def compute(self, flt: AnalyticsFilter) -> StreakReport:
        return analyze_streaks(self._source.find_events(flt))
