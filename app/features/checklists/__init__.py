"""Checklist batch completion feature module"""

from app.features.checklists.service import ChecklistService
from app.features.checklists.api import router

__all__ = [
    "router",
    "ChecklistService",
]
