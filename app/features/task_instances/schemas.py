"""Request and response schemas for task instance API"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CompleteInstanceRequest(BaseModel):
    """Request model for completing a task instance"""
    instance_id: str = Field(..., min_length=1)
    notes: Optional[str] = None


class NextInstanceInfo(BaseModel):
    """Successor instance created by the completion"""
    task_id: str
    due_date: datetime
    status: str


class CompleteInstanceResponse(BaseModel):
    """Response model for task instance completion"""
    success: bool
    task_instance_id: str
    next_instance: Optional[NextInstanceInfo] = None
