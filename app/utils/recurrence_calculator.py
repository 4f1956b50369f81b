"""Recurrence calculator for recurring tasks"""
import calendar
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, Optional

from app.models.recurrence import RecurrenceConfig, RecurrenceType, RecurrenceUnit
from app.models.task_instance import InstanceStatus

# Types that produce a next occurrence; anything else yields None
SCHEDULABLE_TYPES = {
    RecurrenceType.DAILY.value,
    RecurrenceType.WEEKLY.value,
    RecurrenceType.MONTHLY.value,
    RecurrenceType.INTERVAL.value,
}


def _weekday(dt: datetime) -> int:
    # 0=Sunday ... 6=Saturday
    return (dt.weekday() + 1) % 7


def _last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _on_day(dt: datetime, year: int, month: int, day: int) -> datetime:
    """Move ``dt`` to the given day, clamped to the last day of that month"""
    return dt.replace(year=year, month=month, day=min(day, _last_day_of_month(year, month)))


def _shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    total = (month - 1) + months
    return year + total // 12, total % 12 + 1


def add_months(dt: datetime, months: int) -> datetime:
    """
    Add calendar months, clamping to the end of the target month.

    Jan 31 + 1 month -> Feb 28 (Feb 29 in leap years), never Mar 3.
    """
    year, month = _shift_month(dt.year, dt.month, months)
    return _on_day(dt, year, month, dt.day)


def next_weekday_occurrence(from_date: datetime, weekdays: Iterable[int]) -> datetime:
    """
    Next date whose weekday is in ``weekdays`` (0=Sunday ... 6=Saturday),
    strictly after ``from_date``.
    """
    sorted_days = sorted(set(weekdays))
    current_day = _weekday(from_date)

    for day in sorted_days:
        if day > current_day:
            return from_date + timedelta(days=day - current_day)

    # Wrap to the first listed day of next week
    return from_date + timedelta(days=7 - current_day + sorted_days[0])


def next_month_day_occurrence(from_date: datetime, month_days: Iterable[int]) -> datetime:
    """
    Next date whose day-of-month is in ``month_days``, strictly after
    ``from_date``. Days past the end of a month clamp to its last day.
    """
    sorted_days = sorted(set(month_days))
    current_day = from_date.day
    last_day = _last_day_of_month(from_date.year, from_date.month)

    for day in sorted_days:
        # Day 31 in a 30-day month clamps to the 30th, which only counts if still ahead
        if day > current_day and min(day, last_day) > current_day:
            return _on_day(from_date, from_date.year, from_date.month, day)

    year, month = _shift_month(from_date.year, from_date.month, 1)
    return _on_day(from_date, year, month, sorted_days[0])


def _recurrence_config(task: Any) -> RecurrenceConfig:
    if isinstance(task, dict):
        return RecurrenceConfig.model_validate(task)
    return RecurrenceConfig.model_validate(task, from_attributes=True)


def _recurrence_type(task: Any) -> Optional[str]:
    if isinstance(task, dict):
        return task.get("recurrence_type")
    return getattr(task, "recurrence_type", None)


def calculate_next_due_date(task: Any, from_date: datetime) -> Optional[datetime]:
    """
    Calculate the next due date of a recurring task.

    Args:
        task: Task model (or row dict) carrying the recurrence fields
        from_date: Reference date (completion time or current due date)

    Returns:
        The next due date, or None when the recurrence type is not schedulable
        (none, null or unknown). Time of day and tzinfo of ``from_date`` are kept.

    Raises:
        ValueError: The recurrence configuration is malformed
    """
    recurrence_type = _recurrence_type(task)
    if recurrence_type not in SCHEDULABLE_TYPES:
        return None

    cfg = _recurrence_config(task)

    if recurrence_type == RecurrenceType.DAILY.value:
        return from_date + timedelta(days=1)

    if recurrence_type == RecurrenceType.WEEKLY.value:
        if cfg.specific_days_of_week:
            return next_weekday_occurrence(from_date, cfg.specific_days_of_week)
        return from_date + timedelta(days=7)

    if recurrence_type == RecurrenceType.MONTHLY.value:
        if cfg.specific_days_of_month:
            return next_month_day_occurrence(from_date, cfg.specific_days_of_month)
        return add_months(from_date, 1)

    # Interval
    interval = cfg.recurrence_interval
    if cfg.recurrence_unit == RecurrenceUnit.DAYS:
        return from_date + timedelta(days=interval)
    if cfg.recurrence_unit == RecurrenceUnit.WEEKS:
        return from_date + timedelta(days=interval * 7)
    return add_months(from_date, interval)


def generate_next_instance(task: Any, base_date: datetime) -> Optional[Dict[str, Any]]:
    """
    Build the next pending instance row for a task.

    Returns:
        ``{"task_id", "due_date", "status": "pending"}`` or None if the task's
        recurrence type produces no next occurrence.

    Raises:
        ValueError: The recurrence configuration is malformed
    """
    next_due_date = calculate_next_due_date(task, base_date)
    if next_due_date is None:
        return None

    task_id = task.get("id") if isinstance(task, dict) else task.id
    return {
        "task_id": task_id,
        "due_date": next_due_date,
        "status": InstanceStatus.PENDING.value,
    }
