"""Tests for next-due-date calculation (calendar arithmetic and validation)."""

import pytest
from datetime import datetime, timezone

from app.models.recurrence import RecurrenceConfig, is_valid_recurrence
from app.utils.recurrence_calculator import (
    add_months,
    calculate_next_due_date,
    generate_next_instance,
    next_month_day_occurrence,
    next_weekday_occurrence,
)


def _dt(year, month, day, hour=9, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def _task(**fields):
    base = {"id": "task-1", "is_recurring": True, "repeat_from_completion": True}
    return {**base, **fields}


class TestWeeklyRecurrence:
    """Weekly recurrence with and without specific weekdays (0=Sunday)."""

    def test_mon_wed_fri_from_tuesday_is_wednesday(self):
        tuesday = _dt(2025, 3, 4)
        task = _task(recurrence_type="weekly", specific_days_of_week=[1, 3, 5])

        assert calculate_next_due_date(task, tuesday) == _dt(2025, 3, 5)

    def test_wraps_to_first_listed_day_of_next_week(self):
        friday = _dt(2025, 3, 7)
        task = _task(recurrence_type="weekly", specific_days_of_week=[1, 3, 5])

        assert calculate_next_due_date(task, friday) == _dt(2025, 3, 10)

    def test_same_weekday_moves_a_full_week(self):
        wednesday = _dt(2025, 3, 5)

        assert next_weekday_occurrence(wednesday, [3]) == _dt(2025, 3, 12)

    def test_sunday_is_day_zero(self):
        saturday = _dt(2025, 3, 8)

        assert next_weekday_occurrence(saturday, [0]) == _dt(2025, 3, 9)

    def test_without_days_adds_seven_days(self):
        task = _task(recurrence_type="weekly", specific_days_of_week=None)

        assert calculate_next_due_date(task, _dt(2025, 3, 4)) == _dt(2025, 3, 11)

    def test_keeps_time_of_day(self):
        task = _task(recurrence_type="weekly", specific_days_of_week=[3])

        assert calculate_next_due_date(task, _dt(2025, 3, 4, 17, 45)) == _dt(2025, 3, 5, 17, 45)


class TestMonthlyRecurrence:
    """Monthly recurrence clamps days past the end of the month."""

    def test_day_31_in_non_leap_february_is_feb_28(self):
        task = _task(recurrence_type="monthly", specific_days_of_month=[31])

        assert calculate_next_due_date(task, _dt(2025, 2, 10)) == _dt(2025, 2, 28)

    def test_day_31_in_leap_february_is_feb_29(self):
        task = _task(recurrence_type="monthly", specific_days_of_month=[31])

        assert calculate_next_due_date(task, _dt(2024, 2, 10)) == _dt(2024, 2, 29)

    def test_clamped_day_already_reached_rolls_to_next_month(self):
        assert next_month_day_occurrence(_dt(2025, 2, 28), [31]) == _dt(2025, 3, 31)

    def test_thirty_day_month(self):
        assert next_month_day_occurrence(_dt(2025, 4, 10), [31]) == _dt(2025, 4, 30)
        assert next_month_day_occurrence(_dt(2025, 4, 30), [31]) == _dt(2025, 5, 31)

    def test_picks_next_listed_day_in_same_month(self):
        assert next_month_day_occurrence(_dt(2025, 3, 10), [1, 15]) == _dt(2025, 3, 15)

    def test_wraps_to_first_listed_day_of_next_month(self):
        assert next_month_day_occurrence(_dt(2025, 12, 20), [1, 15]) == _dt(2026, 1, 1)

    def test_without_days_adds_one_month(self):
        task = _task(recurrence_type="monthly")

        assert calculate_next_due_date(task, _dt(2025, 1, 31)) == _dt(2025, 2, 28)


class TestIntervalRecurrence:
    """Interval recurrence in days, weeks and months."""

    def test_one_month_from_jan_31_non_leap(self):
        task = _task(recurrence_type="interval", recurrence_interval=1, recurrence_unit="months")

        assert calculate_next_due_date(task, _dt(2025, 1, 31)) == _dt(2025, 2, 28)

    def test_one_month_from_jan_31_leap(self):
        task = _task(recurrence_type="interval", recurrence_interval=1, recurrence_unit="months")

        assert calculate_next_due_date(task, _dt(2024, 1, 31)) == _dt(2024, 2, 29)

    def test_days(self):
        task = _task(recurrence_type="interval", recurrence_interval=3, recurrence_unit="days")

        assert calculate_next_due_date(task, _dt(2025, 3, 30)) == _dt(2025, 4, 2)

    def test_weeks(self):
        task = _task(recurrence_type="interval", recurrence_interval=2, recurrence_unit="weeks")

        assert calculate_next_due_date(task, _dt(2025, 3, 4)) == _dt(2025, 3, 18)

    def test_months_across_year_end(self):
        assert add_months(_dt(2025, 11, 30), 3) == _dt(2026, 2, 28)

    def test_zero_interval_is_rejected(self):
        task = _task(recurrence_type="interval", recurrence_interval=0, recurrence_unit="days")

        with pytest.raises(ValueError):
            calculate_next_due_date(task, _dt(2025, 3, 4))

    def test_missing_unit_is_rejected(self):
        task = _task(recurrence_type="interval", recurrence_interval=2)

        with pytest.raises(ValueError):
            calculate_next_due_date(task, _dt(2025, 3, 4))


class TestNonSchedulableTypes:
    """Types without a next occurrence return None instead of failing."""

    @pytest.mark.parametrize("recurrence_type", ["none", None, "fortnightly", ""])
    def test_returns_none(self, recurrence_type):
        task = _task(recurrence_type=recurrence_type)

        assert calculate_next_due_date(task, _dt(2025, 3, 4)) is None
        assert generate_next_instance(task, _dt(2025, 3, 4)) is None

    def test_daily_adds_one_day(self):
        task = _task(recurrence_type="daily")

        assert calculate_next_due_date(task, _dt(2025, 2, 28, 23, 30)) == _dt(2025, 3, 1, 23, 30)

    def test_invalid_weekday_is_rejected(self):
        task = _task(recurrence_type="weekly", specific_days_of_week=[7])

        with pytest.raises(ValueError):
            calculate_next_due_date(task, _dt(2025, 3, 4))


class TestGenerateNextInstance:
    """Next instance rows built from a task."""

    def test_builds_pending_instance(self):
        task = _task(id="task-42", recurrence_type="daily")

        result = generate_next_instance(task, _dt(2025, 3, 4))

        assert result == {"task_id": "task-42", "due_date": _dt(2025, 3, 5), "status": "pending"}

    def test_accepts_task_models(self):
        from app.models.task import Task

        task = Task(id="task-7", title="Mop", is_recurring=True, recurrence_type="weekly",
                    specific_days_of_week=[1, 3, 5], repeat_from_completion=True)

        result = generate_next_instance(task, _dt(2025, 3, 4))

        assert result["task_id"] == "task-7"
        assert result["due_date"] == _dt(2025, 3, 5)


class TestRecurrenceValidation:
    """Configuration validation helpers."""

    def test_valid_configurations(self):
        assert is_valid_recurrence({"recurrence_type": "daily"})
        assert is_valid_recurrence({"recurrence_type": "weekly", "specific_days_of_week": [0, 6]})
        assert is_valid_recurrence({"recurrence_type": "interval", "recurrence_interval": 2, "recurrence_unit": "weeks"})

    def test_invalid_configurations(self):
        assert not is_valid_recurrence({"recurrence_type": "hourly"})
        assert not is_valid_recurrence({"recurrence_type": "monthly", "specific_days_of_month": [0]})
        assert not is_valid_recurrence({"recurrence_type": "interval", "recurrence_interval": 1, "recurrence_unit": "years"})
        assert not is_valid_recurrence({"recurrence_type": "interval", "recurrence_unit": "days"})

    def test_null_day_lists_become_empty(self):
        config = RecurrenceConfig(recurrence_type="weekly", specific_days_of_week=None, specific_days_of_month=None)

        assert config.specific_days_of_week == []
        assert config.specific_days_of_month == []
