"""Task completion domain model"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class TaskCompletionCreate(BaseModel):
    """Task completion creation model (completed_at is assigned by the database)"""
    task_id: str
    task_instance_id: str
    completed_by: Optional[str] = None
    notes: Optional[str] = None


class TaskCompletion(TaskCompletionCreate):
    """Complete task completion model from database"""
    id: str
    completed_at: datetime

    class Config:
        from_attributes = True
