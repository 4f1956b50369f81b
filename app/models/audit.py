"""Audit trail domain model"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel


class AuditRecordCreate(BaseModel):
    """Audit record creation model"""
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    actor_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class AuditRecord(AuditRecordCreate):
    """Complete audit record model from database"""
    id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
