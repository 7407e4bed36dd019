from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from ..common.datetime_utils import weekday_index
from ..core.constants import (
    DAY_NAMES,
    PATTERN_DEFAULT_DAYS,
    PEAK_DAY_TOLERANCE,
    PEAK_HOUR_TOLERANCE,
    RATE_DECIMALS,
)
from ..records.model import AttendanceEvent
from ..records.repository import AttendanceRecordSource
from .filters import AnalyticsFilter
from .model import DayPattern, HourPattern, PatternReport, StatusTally
from .ranges import TimeInterval


def moving_average(rates: Sequence[float], index: int) -> float:
    """Mean of ``rates[index]`` and its existing neighbours (no wraparound)."""
    window = rates[max(index - 1, 0) : index + 2]
    return round(sum(window) / len(window), RATE_DECIMALS)


def _hour_pattern(hour: int, tally: StatusTally, *, is_peak: bool = False) -> HourPattern:
    return HourPattern(
        hour=hour,
        attendance_rate=tally.attendance_rate,
        late_rate=tally.late_rate,
        absent_rate=tally.absent_rate,
        total_count=tally.total,
        is_peak=is_peak,
    )


def _peak_hours(hourly: dict[int, StatusTally]) -> list[int]:
    observed = {h: t.attendance_rate for h, t in hourly.items() if t.total > 0}
    top = max(observed.values(), default=0.0)
    if top <= 0:
        return []
    return sorted(h for h, rate in observed.items() if rate >= top * (1 - PEAK_HOUR_TOLERANCE))


def analyze_patterns(events: Iterable[AttendanceEvent], period: TimeInterval) -> PatternReport:
    by_day: dict[int, StatusTally] = defaultdict(StatusTally)
    by_hour: dict[int, StatusTally] = defaultdict(StatusTally)
    by_day_hour: dict[int, dict[int, StatusTally]] = defaultdict(lambda: defaultdict(StatusTally))

    for event in events:
        instant = event.instant
        day, hour = weekday_index(instant), instant.hour
        by_day[day].add(event.status)
        by_hour[hour].add(event.status)
        by_day_hour[day][hour].add(event.status)

    tallies = [by_day.get(d, StatusTally()) for d in range(7)]
    rates = [t.attendance_rate for t in tallies]
    observed = [rate for rate, t in zip(rates, tallies) if t.total > 0]
    nonzero = [rate for rate in observed if rate > 0]
    top = max(observed, default=0.0)
    lowest = min(nonzero, default=0.0)

    daily = []
    for d, tally in enumerate(tallies):
        rate = rates[d]
        hours = by_day_hour.get(d, {})
        daily.append(
            DayPattern(
                day_index=d,
                day_name=DAY_NAMES[d],
                attendance_rate=rate,
                late_rate=tally.late_rate,
                absent_rate=tally.absent_rate,
                moving_average=moving_average(rates, d),
                total_count=tally.total,
                is_peak=tally.total > 0 and top > 0 and rate >= top * (1 - PEAK_DAY_TOLERANCE),
                is_valley=tally.total > 0 and rate > 0 and rate <= lowest * (1 + PEAK_DAY_TOLERANCE),
                peak_hours=_peak_hours(hours),
                hourly_breakdown=[_hour_pattern(h, hours[h]) for h in sorted(hours)],
            )
        )

    peak_hours = set(_peak_hours(by_hour))
    hourly = [_hour_pattern(h, by_hour[h], is_peak=h in peak_hours) for h in sorted(by_hour)]

    with_data = [p for p in daily if p.total_count > 0]
    best = max(with_data, key=lambda p: p.attendance_rate, default=None)
    worst = min((p for p in with_data if p.attendance_rate > 0), key=lambda p: p.attendance_rate, default=None)
    busiest_hour = max(hourly, key=lambda h: (h.attendance_rate, h.total_count), default=None)

    return PatternReport(
        daily=daily,
        hourly=hourly,
        best_day=best.day_name if best else None,
        worst_day=worst.day_name if worst else None,
        average_rate=round(sum(p.attendance_rate for p in with_data) / len(with_data), RATE_DECIMALS) if with_data else 0.0,
        total_events=sum(t.total for t in tallies),
        peak_hour=busiest_hour.hour if busiest_hour else None,
        period=period.to_dict(),
    )


class PatternAnalyzer:
    def __init__(self, source: AttendanceRecordSource, *, default_days: int = PATTERN_DEFAULT_DAYS):
        self._source = source
        self._default_days = int(default_days)

    def scan_window(self, interval: TimeInterval, *, now: datetime) -> TimeInterval:
        if interval.start is not None:
            return interval
        end = interval.end or now
        return TimeInterval(start=end - timedelta(days=self._default_days), end=end)

    def compute(self, flt: AnalyticsFilter, *, now: datetime) -> PatternReport:
        period = self.scan_window(flt.interval, now=now)
        return analyze_patterns(self._source.find_events(flt.with_interval(period)), period)
