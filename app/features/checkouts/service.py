"""
Task list checkout coordination

A checkout gives one user exclusive rights to change completion state on a
task list. The lock is a single ``task_list_checkouts`` row per list; the
database's unique key decides between concurrent checkouts.
"""
import logging
import math
from typing import Any, Dict, Optional

from app import config
from app.exceptions import ConflictError, ForbiddenError
from app.infra.supabase.repositories import CheckoutContentionError, RepositoryFactory
from app.services.access_service import AccessService
from app.services.audit_service import AuditService

logger = logging.getLogger(__name__)


class CheckoutService:
    """Grant, release and inspect task list checkouts"""

    def __init__(self, repos: RepositoryFactory, access: AccessService, audit: AuditService):
        self.repos = repos
        self.access = access
        self.audit = audit

    async def checkout(self, task_list_id: str, actor_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Check out a task list for ``user_id`` (defaults to the actor).

        Checking out a list you already hold succeeds again and refreshes
        ``checked_out_at``.

        Returns:
            ``{"success": True, "checked_out_by": user}`` or
            ``{"success": False, "locked_by": holder}`` when another user holds it

        Raises:
            NotFoundError: List does not exist
            ForbiddenError: Not a member of the list's location, or acting for someone else
        """
        actor = await self.access.resolve(actor_id)
        acting_user = self.access.resolve_acting_user(actor, user_id)
        task_list = await self.access.get_task_list_or_404(task_list_id)
        self.access.require_list_member(actor, task_list)

        try:
            holder = await self.repos.checkouts.acquire(
                task_list_id, acting_user, attempts=config.CHECKOUT_ACQUIRE_ATTEMPTS
            )
        except CheckoutContentionError as e:
            raise ConflictError(str(e), task_list_id=task_list_id) from e

        if holder.user_id != acting_user:
            logger.info(f"List {task_list_id} checkout by {acting_user} refused; held by {holder.user_id}")
            return {"success": False, "locked_by": holder.user_id}

        logger.info(f"List {task_list_id} checked out by {acting_user}")
        return {"success": True, "checked_out_by": holder.user_id}

    async def checkin(self, task_list_id: str, actor_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Release the checkout of a task list.

        No checkout is a no-op success. Only the holder may release; a
        superadmin may release anyone's checkout.

        Raises:
            NotFoundError: List does not exist
            ForbiddenError: Caller does not hold the checkout (lock is kept)
        """
        actor = await self.access.resolve(actor_id)
        acting_user = self.access.resolve_acting_user(actor, user_id)
        task_list = await self.access.get_task_list_or_404(task_list_id)
        self.access.require_list_member(actor, task_list)

        current = await self.repos.checkouts.find_by_list(task_list_id)
        if not current:
            return {"success": True}

        if current.user_id != acting_user and not actor.is_superadmin:
            logger.warning(f"User {acting_user} tried to check in list {task_list_id} held by {current.user_id}")
            raise ForbiddenError("Not owner of checkout", locked_by=current.user_id)

        # Scoped to the holder we saw, so a lock taken over in between survives
        await self.repos.checkouts.release(task_list_id, current.user_id)
        logger.info(f"List {task_list_id} checked in by {acting_user}")
        return {"success": True}

    async def release_after_batch(self, task_list_id: str, user_id: str) -> bool:
        """
        Check-in of the submitter's own lock after a completion batch. Failures are logged only.

        Returns:
            True if a checkout row was removed
        """
        try:
            released = await self.repos.checkouts.release(task_list_id, user_id)
        except Exception as e:
            logger.warning(f"Failed to check in list {task_list_id} after applying completions: {e}")
            return False
        if released:
            logger.info(f"List {task_list_id} checked in after applying completions")
        return released

    async def force_release(self, task_list_id: str, actor_id: str) -> Dict[str, Any]:
        """
        Superadmin override: delete the checkout whoever holds it.

        Raises:
            ForbiddenError: Actor is not a superadmin
        """
        actor = await self.access.resolve(actor_id)
        self.access.require_superadmin(actor)

        current = await self.repos.checkouts.find_by_list(task_list_id)
        await self.repos.checkouts.release(task_list_id)
        released_user_id = current.user_id if current else None

        logger.info(f"List {task_list_id} force-released by {actor_id} (was held by {released_user_id})")
        await self.audit.record(
            action="force-release",
            resource_type="task_list",
            resource_id=task_list_id,
            actor_id=actor_id,
            details={"released_user_id": released_user_id},
        )
        return {"success": True, "released_user_id": released_user_id}

    async def get_status(self, task_list_id: str, actor_id: str) -> Dict[str, Any]:
        """Current holder of a list's checkout (or None)"""
        actor = await self.access.resolve(actor_id)
        task_list = await self.access.get_task_list_or_404(task_list_id)
        self.access.require_list_member(actor, task_list)

        current = await self.repos.checkouts.find_by_list(task_list_id)
        return {
            "task_list_id": task_list_id,
            "checkout": current.model_dump(mode="json") if current else None,
        }

    async def list_active(self, actor_id: str, page: int = 1, per_page: int = 10) -> Dict[str, Any]:
        """
        Page through active checkouts with list names (superadmin only).

        Raises:
            ForbiddenError: Actor is not a superadmin
        """
        actor = await self.access.resolve(actor_id)
        self.access.require_superadmin(actor)

        page = max(1, page)
        per_page = max(1, per_page)
        checkouts, total = await self.repos.checkouts.find_page((page - 1) * per_page, per_page)
        names = await self.repos.task_lists.find_names([c.task_list_id for c in checkouts])

        rows = [
            {
                "task_list_id": c.task_list_id,
                "task_list_name": names.get(str(c.task_list_id)),
                "user_id": c.user_id,
                "checked_out_at": c.checked_out_at,
            }
            for c in checkouts
        ]
        return {
            "checkouts": rows,
            "meta": {
                "total": total,
                "page": page,
                "per_page": per_page,
                "total_pages": max(1, math.ceil(total / per_page)),
            },
        }
