from __future__ import annotations

from collections import Counter
from datetime import date
from typing import AbstractSet, Iterable, Mapping, Optional

from ..common.datetime_utils import iter_days, month_bounds
from ..core.enums import AttendanceStatus, DayStatus
from ..leave.model import LeaveInterval
from .model import AttendanceRecord, CalendarDay


def classify(
    day: date,
    holidays: AbstractSet[date],
    leave_intervals: Iterable[LeaveInterval],
    record: Optional[AttendanceRecord],
) -> DayStatus:
    """Resolve the status of ``day``.

    Priority is absolute: Holiday, then On Leave, then Present (a clock-in
    exists), then Absent (explicitly marked), otherwise No Record.
    """
    if day in holidays:
        return DayStatus.HOLIDAY
    if any(interval.contains(day) for interval in leave_intervals):
        return DayStatus.ON_LEAVE
    if record is not None:
        if record.clock_in is not None:
            return DayStatus.PRESENT
        if record.status == AttendanceStatus.ABSENT:
            return DayStatus.ABSENT
    return DayStatus.NO_RECORD


def month_calendar(
    year: int,
    month: int,
    *,
    holidays: AbstractSet[date],
    leave_intervals: Iterable[LeaveInterval],
    records: Mapping[date, AttendanceRecord],
) -> tuple[list[CalendarDay], dict[str, int]]:
    """Classify every day of a month and count days per status."""
    start, end = month_bounds(year, month)
    intervals = list(leave_intervals)

    days = [
        CalendarDay(day=day, status=classify(day, holidays, intervals, records.get(day)))
        for day in iter_days(start, end)
    ]
    counts = Counter(d.status for d in days)
    summary = {status.value: counts.get(status, 0) for status in DayStatus}
    return days, summary
