"""Task domain model"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class Task(BaseModel):
    """Recurring or one-off task definition as stored in ``tasks``"""
    id: str
    task_list_id: Optional[str] = None
    title: str
    is_recurring: bool = False
    recurrence_type: Optional[str] = None
    recurrence_interval: Optional[int] = None
    recurrence_unit: Optional[str] = None
    specific_days_of_week: Optional[List[int]] = None
    specific_days_of_month: Optional[List[int]] = None
    repeat_from_completion: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_completion_driven(self) -> bool:
        """Next occurrence is created when the current one is completed"""
        return self.is_recurring and self.repeat_from_completion
