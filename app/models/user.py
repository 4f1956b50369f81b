"""User access domain model"""
from typing import FrozenSet, Optional
from pydantic import BaseModel

from app import config


class UserAccess(BaseModel):
    """Resolved role and location memberships of a user"""
    user_id: str
    role_name: Optional[str] = None
    location_ids: FrozenSet[str] = frozenset()

    @property
    def is_superadmin(self) -> bool:
        return self.role_name == config.SUPERADMIN_ROLE

    def is_member_of(self, location_id: Optional[str]) -> bool:
        return location_id is not None and str(location_id) in self.location_ids
