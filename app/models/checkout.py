"""Task list checkout (edit lock) domain model"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class Checkout(BaseModel):
    """Exclusive edit lock on a task list, one row per list"""
    task_list_id: str
    user_id: str
    checked_out_at: Optional[datetime] = None

    class Config:
        from_attributes = True
