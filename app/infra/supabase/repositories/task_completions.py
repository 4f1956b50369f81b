"""Task completion repository"""
from typing import List, Optional

from supabase import Client  # type: ignore

from app.models.task_completion import TaskCompletion, TaskCompletionCreate

from .base import BaseRepository


class TaskCompletionRepository(BaseRepository[TaskCompletion, TaskCompletionCreate]):
    """Repository for task completion records"""

    def __init__(self, client: Client):
        super().__init__(client, "task_completions", TaskCompletion)

    async def find_latest_for_task(self, task_id: str) -> Optional[TaskCompletion]:
        """Most recent completion of a task by completed_at"""
        completions = await self.find_by_filters(
            {"task_id": task_id}, order_by="completed_at", descending=True, limit=1
        )
        return completions[0] if completions else None

    async def find_by_instances(self, instance_ids: List[str]) -> List[TaskCompletion]:
        """Completions for the given instances, newest first"""
        if not instance_ids:
            return []

        response = (
            self._table()
            .select("*")
            .in_("task_instance_id", instance_ids)
            .order("completed_at", desc=True)
            .execute()
        )
        return self._to_models(response.data or [])
