"""Fire-and-forget audit trail writer"""
import logging
from typing import Any, Dict, Optional

from app.infra.supabase.repositories import AuditRepository
from app.models.audit import AuditRecordCreate

logger = logging.getLogger(__name__)


class AuditService:
    """Record audit rows; a failed write never fails the calling operation"""

    def __init__(self, audit_repo: AuditRepository):
        self.audit_repo = audit_repo

    async def record(
        self,
        action: str,
        resource_type: str,
        resource_id: Optional[str],
        actor_id: Optional[str],
        details: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Write one audit row.

        Returns:
            True if the row was written, False if the write failed (logged)
        """
        record = AuditRecordCreate(
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            actor_id=actor_id,
            details=details,
        )
        try:
            await self.audit_repo.create(record)
            return True
        except Exception as e:
            logger.warning(f"Failed to write {action} audit for {resource_type} {resource_id}: {e}")
            return False
