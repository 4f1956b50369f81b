"""Audit trail repository"""
from supabase import Client  # type: ignore

from app.models.audit import AuditRecord, AuditRecordCreate

from .base import BaseRepository


class AuditRepository(BaseRepository[AuditRecord, AuditRecordCreate]):
    """Repository for audit trail rows (insert only)"""

    def __init__(self, client: Client):
        super().__init__(client, "audit_trails", AuditRecord)
