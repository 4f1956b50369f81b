"""Request and response schemas for checklist API"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class CompletionChange(BaseModel):
    """One toggled task; task_id is checked per item so a bad row fails alone"""
    task_id: Optional[str] = None
    completed: bool = True


class ApplyCompletionsRequest(BaseModel):
    """Request model for applying a batch of completion changes"""
    changes: List[CompletionChange] = []
    checkin: bool = False
    user_id: Optional[str] = None


class ApplyCompletionsResponse(BaseModel):
    """Per-item errors carry task_id, error code and message"""
    success: bool
    errors: List[Dict[str, Any]] = []


class ChecklistResponse(BaseModel):
    """Tasks of a list with their instances and completions"""
    task_list_id: str
    name: Optional[str] = None
    tasks: List[Dict[str, Any]]
