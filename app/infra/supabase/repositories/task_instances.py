"""Task instance repository"""
from typing import Any, Dict, List, Optional

from supabase import Client  # type: ignore

from app.models.task_completion import TaskCompletionCreate
from app.models.task_instance import InstanceStatus, TaskInstance, TaskInstanceCreate

from .base import BaseRepository

COMPLETE_AND_INSERT_NEXT_RPC = "complete_task_and_insert_next"


class TaskInstanceRepository(BaseRepository[TaskInstance, TaskInstanceCreate]):
    """Repository for task instance operations"""

    def __init__(self, client: Client):
        super().__init__(client, "task_instances", TaskInstance)

    async def find_by_task(self, task_id: str) -> List[TaskInstance]:
        """Find all instances of a task, earliest due date first"""
        return await self.find_by_filters({"task_id": task_id}, order_by="due_date")

    async def find_by_tasks(self, task_ids: List[str]) -> List[TaskInstance]:
        """Find instances for several tasks, earliest due date first"""
        if not task_ids:
            return []

        response = (
            self._table()
            .select("*")
            .in_("task_id", task_ids)
            .order("due_date", desc=False)
            .execute()
        )
        return self._to_models(response.data or [])

    async def set_status(self, instance_id: str, status: InstanceStatus) -> Optional[TaskInstance]:
        """Set the status of an instance"""
        return await self.update_fields(instance_id, {"status": status.value})

    async def complete_and_insert_next(
        self,
        completion: TaskCompletionCreate,
        next_instance: Optional[TaskInstanceCreate],
    ) -> Dict[str, Any]:
        """
        Complete an instance and insert its successor in one transaction.

        Runs the ``complete_task_and_insert_next`` database function, which
        locks the instance row, rejects non-pending instances (SQLSTATE 55000),
        inserts the completion, marks the instance completed and inserts
        ``next_instance`` when given.

        Returns:
            The function result (``completion_id`` and ``next_instance_id``)

        Raises:
            postgrest.exceptions.APIError: The function failed or does not exist
        """
        payload = {
            "completion": completion.model_dump(mode="json"),
            "next_instance": next_instance.model_dump(mode="json") if next_instance else None,
        }
        response = self._client.rpc(COMPLETE_AND_INSERT_NEXT_RPC, payload).execute()
        return response.data or {}
