"""Access checks for task lists, built on resolved roles and memberships"""
import logging
from typing import Optional

from app.exceptions import ForbiddenError, NotFoundError
from app.infra.supabase.repositories import RepositoryFactory
from app.models.task_list import TaskList
from app.models.user import UserAccess

logger = logging.getLogger(__name__)


class AccessService:
    """Resolve who a user is allowed to act as, and on which lists"""

    def __init__(self, repos: RepositoryFactory):
        self.repos = repos

    async def resolve(self, user_id: str) -> UserAccess:
        """Resolve role name and location memberships of a user"""
        role_name = await self.repos.profiles.resolve_role(user_id)
        location_ids = await self.repos.profiles.find_location_ids(user_id)
        return UserAccess(user_id=user_id, role_name=role_name, location_ids=frozenset(location_ids))

    async def get_task_list_or_404(self, task_list_id: str) -> TaskList:
        task_list = await self.repos.task_lists.find_by_id(task_list_id)
        if not task_list:
            raise NotFoundError("Task list not found", task_list_id=task_list_id)
        return task_list

    def resolve_acting_user(self, actor: UserAccess, user_id: Optional[str]) -> str:
        """
        User id an operation is performed for.

        Only a superadmin may act on behalf of someone else.

        Raises:
            ForbiddenError: ``user_id`` differs from the actor and the actor is not a superadmin
        """
        if not user_id or str(user_id) == str(actor.user_id):
            return actor.user_id
        if not actor.is_superadmin:
            logger.warning(f"User {actor.user_id} tried to act as {user_id}")
            raise ForbiddenError("Token user mismatch")
        return str(user_id)

    def require_list_member(self, actor: UserAccess, task_list: TaskList) -> None:
        """
        Require membership in the list's location (superadmins are exempt).

        Raises:
            ForbiddenError: Actor is not assigned to the list's location
        """
        if actor.is_superadmin or actor.is_member_of(task_list.location_id):
            return
        logger.warning(f"User {actor.user_id} is not a member of location {task_list.location_id}")
        raise ForbiddenError("Not a member of this task list's location")

    def can_complete(self, actor: UserAccess, task_list: Optional[TaskList]) -> bool:
        """Superadmin, the list's bound role, or membership in the list's location"""
        if actor.is_superadmin:
            return True
        if task_list is None:
            return False
        if task_list.role_id and actor.role_name and task_list.role_id == actor.role_name:
            return True
        return actor.is_member_of(task_list.location_id)

    def require_superadmin(self, actor: UserAccess) -> None:
        """
        Raises:
            ForbiddenError: Actor is not a superadmin
        """
        if not actor.is_superadmin:
            logger.warning(f"User {actor.user_id} attempted a superadmin-only action")
            raise ForbiddenError("Superadmin role required")
