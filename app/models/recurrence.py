"""Shared recurrence definitions and validation"""
from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, ValidationError, field_validator, model_validator


class RecurrenceType(str, Enum):
    """Recurrence types a task can carry"""
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    INTERVAL = "interval"


class RecurrenceUnit(str, Enum):
    """Units for the interval recurrence type"""
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


# Set of valid type strings for quick lookups
VALID_RECURRENCE_TYPES: Set[str] = {t.value for t in RecurrenceType}


class RecurrenceConfig(BaseModel):
    """
    Validated recurrence configuration of a task.

    ``recurrence_type`` is kept as free text: an unrecognized type is not an
    error, it simply never produces a next occurrence. Everything the
    calculator does arithmetic with is checked.

    Weekdays use 0=Sunday ... 6=Saturday.
    """
    recurrence_type: Optional[str] = None
    recurrence_interval: Optional[int] = None
    recurrence_unit: Optional[RecurrenceUnit] = None
    specific_days_of_week: List[int] = []
    specific_days_of_month: List[int] = []

    @field_validator("specific_days_of_week", "specific_days_of_month", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("specific_days_of_week")
    @classmethod
    def _check_weekdays(cls, days: List[int]) -> List[int]:
        for day in days:
            if day < 0 or day > 6:
                raise ValueError(f"Invalid day of week: {day}. Expected 0 (Sunday) to 6 (Saturday)")
        return days

    @field_validator("specific_days_of_month")
    @classmethod
    def _check_month_days(cls, days: List[int]) -> List[int]:
        for day in days:
            if day < 1 or day > 31:
                raise ValueError(f"Invalid day of month: {day}. Expected 1 to 31")
        return days

    @model_validator(mode="after")
    def _check_interval(self) -> "RecurrenceConfig":
        if self.recurrence_type == RecurrenceType.INTERVAL.value:
            if self.recurrence_interval is None or self.recurrence_interval < 1:
                raise ValueError("recurrence_interval must be at least 1 for interval recurrence")
            if self.recurrence_unit is None:
                raise ValueError("recurrence_unit is required for interval recurrence")
        return self


def is_valid_recurrence(config: dict) -> bool:
    """Return True if the recurrence configuration is usable (never raises)"""
    if config.get("recurrence_type") not in VALID_RECURRENCE_TYPES:
        return False
    try:
        RecurrenceConfig.model_validate(config)
    except ValidationError:
        return False
    return True
