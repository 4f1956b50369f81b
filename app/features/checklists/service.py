"""
Checklist batch completion

A user checks out a task list, toggles tasks locally and submits all changes
at once. Each change is applied on its own; a failing change is reported in
``errors`` and never stops the others.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.exceptions import ChecklistError, ForbiddenError, NotFoundError, ValidationFailedError
from app.infra.supabase.repositories import RepositoryFactory
from app.models.task import Task
from app.models.task_instance import InstanceStatus, TaskInstance, TaskInstanceCreate
from app.services.access_service import AccessService
from app.services.audit_service import AuditService
from app.features.checkouts.service import CheckoutService
from app.features.task_instances.service import InstanceLifecycleService

logger = logging.getLogger(__name__)


class ChecklistService:
    """Apply completion changes to a checked-out task list and read it back"""

    def __init__(
        self,
        repos: RepositoryFactory,
        access: AccessService,
        lifecycle: InstanceLifecycleService,
        checkouts: CheckoutService,
        audit: AuditService,
    ):
        self.repos = repos
        self.access = access
        self.lifecycle = lifecycle
        self.checkouts = checkouts
        self.audit = audit

    async def apply_completions(
        self,
        task_list_id: str,
        actor_id: str,
        changes: List[Dict[str, Any]],
        checkin_after: bool = False,
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Apply a batch of ``{task_id, completed}`` changes to a task list.

        The acting user must hold the list's checkout unless they are a
        superadmin.

        Returns:
            ``{"success": not errors, "errors": [...]}``

        Raises:
            NotFoundError: List does not exist
            ForbiddenError: Not a member, acting for someone else, or not the checkout holder
        """
        actor = await self.access.resolve(actor_id)
        acting_user = self.access.resolve_acting_user(actor, user_id)
        task_list = await self.access.get_task_list_or_404(task_list_id)
        self.access.require_list_member(actor, task_list)

        # Superadmins may submit without a checkout, but never over someone else's
        current = await self.repos.checkouts.find_by_list(task_list_id)
        held_by_other = current is not None and current.user_id != acting_user
        if held_by_other or (current is None and not actor.is_superadmin):
            locked_by = current.user_id if current else None
            logger.warning(
                f"User {acting_user} submitted completions for list {task_list_id} "
                f"without holding its checkout (held by {locked_by})"
            )
            raise ForbiddenError("Task list is not checked out by you", locked_by=locked_by)

        tasks = {str(t.id): t for t in await self.repos.tasks.find_by_list(task_list_id)}
        errors: List[Dict[str, Any]] = []

        for change in changes:
            task_id = change.get("task_id")
            try:
                if not task_id:
                    raise ValidationFailedError("task_id is required", field="task_id")
                task = tasks.get(str(task_id))
                if not task:
                    raise NotFoundError("Task not found in this task list")

                if change.get("completed"):
                    await self._complete_task(task, acting_user)
                else:
                    await self._uncomplete_task(task)
            except ChecklistError as e:
                logger.warning(f"Change for task {task_id} on list {task_list_id} failed: {e.message}")
                errors.append({"task_id": task_id, **e.to_dict()})
            except Exception as e:
                logger.warning(f"Change for task {task_id} on list {task_list_id} failed: {e}")
                errors.append({"task_id": task_id, "error": "Internal", "message": str(e)})

        if checkin_after:
            await self.checkouts.release_after_batch(task_list_id, acting_user)

        await self.audit.record(
            action="apply-completions",
            resource_type="task_list",
            resource_id=task_list_id,
            actor_id=actor_id,
            details={"changes": changes},
        )

        if errors:
            logger.info(f"Applied {len(changes) - len(errors)}/{len(changes)} changes to list {task_list_id}")
        else:
            logger.info(f"Applied {len(changes)} changes to list {task_list_id}")
        return {"success": not errors, "errors": errors}

    async def _complete_task(self, task: Task, completed_by: str) -> None:
        instances = await self.repos.task_instances.find_by_task(task.id)
        target = self._pick_target(instances)

        if target is None:
            target = await self.repos.task_instances.create(
                TaskInstanceCreate(task_id=task.id, due_date=datetime.now(timezone.utc))
            )
            logger.info(f"Created instance {target.id} for task {task.id} to record its completion")

        await self.lifecycle.complete_resolved(task, target, completed_by)

    @staticmethod
    def _pick_target(instances: List[TaskInstance]) -> Optional[TaskInstance]:
        """Earliest pending instance, else the earliest non-completed one, else the earliest one"""
        if not instances:
            return None
        for instance in instances:
            if instance.is_pending:
                return instance
        for instance in instances:
            if not instance.is_completed:
                return instance
        return instances[0]

    async def _uncomplete_task(self, task: Task) -> None:
        completion = await self.repos.task_completions.find_latest_for_task(task.id)
        if not completion:
            return

        await self.repos.task_completions.delete(completion.id)
        await self.repos.task_instances.set_status(completion.task_instance_id, InstanceStatus.PENDING)
        logger.info(f"Reverted completion {completion.id} of task {task.id}")

    async def get_checklist(self, task_list_id: str, actor_id: str) -> Dict[str, Any]:
        """
        Tasks of a list, each with its instances and their completions.

        Raises:
            NotFoundError: List does not exist
            ForbiddenError: Not a member of the list's location
        """
        actor = await self.access.resolve(actor_id)
        task_list = await self.access.get_task_list_or_404(task_list_id)
        self.access.require_list_member(actor, task_list)

        tasks = await self.repos.tasks.find_by_list(task_list_id)
        instances = await self.repos.task_instances.find_by_tasks([t.id for t in tasks])
        completions = await self.repos.task_completions.find_by_instances([i.id for i in instances])

        completions_by_instance: Dict[str, List[Dict[str, Any]]] = {}
        for completion in completions:
            completions_by_instance.setdefault(str(completion.task_instance_id), []).append(
                completion.model_dump(mode="json")
            )

        instances_by_task: Dict[str, List[Dict[str, Any]]] = {}
        for instance in instances:
            data = instance.model_dump(mode="json")
            data["completions"] = completions_by_instance.get(str(instance.id), [])
            instances_by_task.setdefault(str(instance.task_id), []).append(data)

        return {
            "task_list_id": task_list_id,
            "name": task_list.name,
            "tasks": [
                {**task.model_dump(mode="json"), "instances": instances_by_task.get(str(task.id), [])}
                for task in tasks
            ],
        }
