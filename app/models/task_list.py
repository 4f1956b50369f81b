"""Task list domain model"""
from typing import Optional
from pydantic import BaseModel


class TaskList(BaseModel):
    """Task list (checklist) owned by a location and optionally bound to a role"""
    id: str
    name: Optional[str] = None
    location_id: Optional[str] = None
    role_id: Optional[str] = None  # role name the list is bound to

    class Config:
        from_attributes = True
