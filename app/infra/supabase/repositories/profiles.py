"""Profile, role and location membership repository"""
import logging
from typing import Optional, Set

from postgrest.exceptions import APIError
from supabase import Client  # type: ignore

logger = logging.getLogger(__name__)

# Postgres invalid_text_representation: a role name in the uuid id column
INVALID_TEXT_REPRESENTATION = "22P02"


class ProfileRepository:
    """Read-only access to ``profiles``, ``user_roles`` and ``user_locations``"""

    def __init__(self, client: Client):
        self._client = client

    async def resolve_role(self, user_id: str) -> Optional[str]:
        """
        Resolve the role name of a user.

        ``profiles.role`` normally references ``user_roles.id``; when no such
        role row exists the column holds the role name itself.

        Returns:
            The role name, or None when the user has no profile or role
        """
        response = (
            self._client.table("profiles")
            .select("id, role")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None

        role = response.data[0].get("role")
        if role is None:
            return None

        try:
            role_response = (
                self._client.table("user_roles")
                .select("name")
                .eq("id", role)
                .limit(1)
                .execute()
            )
        except APIError as e:
            if e.code != INVALID_TEXT_REPRESENTATION:
                raise
            logger.debug(f"Role id lookup failed for {role!r}: {e.message}")
        else:
            if role_response.data:
                return role_response.data[0].get("name")

        return str(role)

    async def find_location_ids(self, user_id: str) -> Set[str]:
        """Locations the user is assigned to"""
        response = (
            self._client.table("user_locations")
            .select("location_id")
            .eq("user_id", user_id)
            .execute()
        )
        return {str(row["location_id"]) for row in response.data or [] if row.get("location_id") is not None}
