"""Task instance domain model"""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class InstanceStatus(str, Enum):
    """Task instance status enum"""
    PENDING = "pending"
    COMPLETED = "completed"
    REPLACED = "replaced"


class TaskInstanceCreate(BaseModel):
    """Task instance creation model"""
    task_id: str
    due_date: datetime
    status: InstanceStatus = InstanceStatus.PENDING


class TaskInstance(BaseModel):
    """Complete task instance model from database"""
    id: str
    task_id: str
    due_date: datetime
    status: str = InstanceStatus.PENDING.value
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_pending(self) -> bool:
        return (self.status or "").lower() == InstanceStatus.PENDING.value

    @property
    def is_completed(self) -> bool:
        return (self.status or "").lower() == InstanceStatus.COMPLETED.value
