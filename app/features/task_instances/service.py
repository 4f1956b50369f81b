"""
Task instance lifecycle

Owns the pending -> completed transition of a single task instance and the
creation of its successor for tasks that repeat from completion. Both happen
in one database transaction (``complete_task_and_insert_next``).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from postgrest.exceptions import APIError

from app import config
from app.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.infra.supabase.repositories import RepositoryFactory
from app.infra.supabase.repositories.base import FUNCTION_NOT_FOUND
from app.models.recurrence import is_valid_recurrence
from app.models.task import Task
from app.models.task_completion import TaskCompletionCreate
from app.models.task_instance import InstanceStatus, TaskInstance, TaskInstanceCreate
from app.services.access_service import AccessService
from app.utils.recurrence_calculator import generate_next_instance

logger = logging.getLogger(__name__)

# SQLSTATEs raised by complete_task_and_insert_next
INSTANCE_NOT_PENDING = "55000"
INSTANCE_NOT_FOUND = "P0002"


class InstanceLifecycleService:
    """Complete task instances and spawn the next occurrence"""

    def __init__(
        self,
        repos: RepositoryFactory,
        access: AccessService,
        allow_non_atomic: Optional[bool] = None,
    ):
        self.repos = repos
        self.access = access
        if allow_non_atomic is None:
            allow_non_atomic = config.ALLOW_NON_ATOMIC_COMPLETION
        self.allow_non_atomic = allow_non_atomic

    async def complete_instance(
        self,
        instance_id: str,
        actor_id: str,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Complete a task instance on behalf of ``actor_id``.

        Allowed for superadmins, users whose role matches the list's role
        binding, and members of the list's location.

        Raises:
            NotFoundError: Instance, task or task list does not exist
            ForbiddenError: Actor may not complete tasks of this list
            ConflictError: Instance is not pending
        """
        instance = await self.repos.task_instances.find_by_id(instance_id)
        if not instance:
            raise NotFoundError("Task instance not found", task_instance_id=instance_id)

        task = await self.repos.tasks.find_by_id(instance.task_id)
        if not task:
            raise NotFoundError("Task not found", task_id=instance.task_id)

        actor = await self.access.resolve(actor_id)
        if not actor.is_superadmin:
            task_list = None
            if task.task_list_id:
                task_list = await self.repos.task_lists.find_by_id(task.task_list_id)
                if not task_list:
                    raise NotFoundError("Task list not found", task_list_id=task.task_list_id)
            if not self.access.can_complete(actor, task_list):
                logger.warning(f"User {actor_id} may not complete instance {instance_id}")
                raise ForbiddenError("Not allowed to complete tasks of this list")

        return await self.complete_resolved(task, instance, actor_id, notes)

    async def complete_resolved(
        self,
        task: Task,
        instance: TaskInstance,
        completed_by: str,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Complete an already loaded and authorized instance.

        Raises:
            ConflictError: Instance is not pending (also when a concurrent
                request completed it first)
        """
        if not instance.is_pending:
            raise ConflictError(
                "Task instance is not pending",
                task_instance_id=instance.id,
                current_status=instance.status,
            )

        next_instance = self.plan_next_instance(task)
        completion = TaskCompletionCreate(
            task_id=task.id,
            task_instance_id=instance.id,
            completed_by=completed_by,
            notes=notes,
        )

        try:
            await self.repos.task_instances.complete_and_insert_next(completion, next_instance)
        except APIError as e:
            if e.code == INSTANCE_NOT_PENDING:
                raise ConflictError(
                    "Task instance is not pending",
                    task_instance_id=instance.id,
                    current_status=InstanceStatus.COMPLETED.value,
                ) from e
            if e.code == INSTANCE_NOT_FOUND:
                raise NotFoundError("Task instance not found", task_instance_id=instance.id) from e
            if e.code == FUNCTION_NOT_FOUND and self.allow_non_atomic:
                logger.warning(
                    "complete_task_and_insert_next is not installed; completing "
                    f"instance {instance.id} without a transaction"
                )
                await self._complete_sequentially(completion, next_instance)
            else:
                raise

        if next_instance:
            logger.info(
                f"Completed instance {instance.id} of task {task.id}; "
                f"next instance due {next_instance.due_date.isoformat()}"
            )
        else:
            logger.info(f"Completed instance {instance.id} of task {task.id}")

        return {
            "success": True,
            "task_instance_id": instance.id,
            "next_instance": next_instance.model_dump(mode="json") if next_instance else None,
        }

    def plan_next_instance(self, task: Task, now: Optional[datetime] = None) -> Optional[TaskInstanceCreate]:
        """
        Successor instance for a task that repeats from completion.

        Recurrence failures are logged and mean "no next instance"; they never
        block the completion itself.
        """
        if not task.is_completion_driven:
            return None

        if not is_valid_recurrence(task.model_dump()):
            logger.warning(
                f"Task {task.id} has an unusable recurrence configuration "
                f"(type {task.recurrence_type!r}); no next instance"
            )
            return None

        try:
            next_data = generate_next_instance(task, now or datetime.now(timezone.utc))
        except Exception as e:
            logger.warning(f"Could not compute next instance for task {task.id}: {e}")
            return None

        if next_data is None:
            return None
        return TaskInstanceCreate(**next_data)

    async def _complete_sequentially(
        self,
        completion: TaskCompletionCreate,
        next_instance: Optional[TaskInstanceCreate],
    ) -> None:
        """
        Degraded mode for stores without the completion function.

        Only the completion insert is required to succeed; a failed status
        update or successor insert is logged and lost.
        """
        await self.repos.task_completions.create(completion)

        try:
            await self.repos.task_instances.set_status(completion.task_instance_id, InstanceStatus.COMPLETED)
        except Exception as e:
            logger.error(f"Failed to mark instance {completion.task_instance_id} completed: {e}")

        if next_instance:
            try:
                await self.repos.task_instances.create(next_instance)
            except Exception as e:
                logger.error(f"Failed to insert next instance for task {next_instance.task_id}: {e}")
