"""Services module"""

from app.services.access_service import AccessService
from app.services.audit_service import AuditService

__all__ = [
    "AccessService",
    "AuditService",
]
