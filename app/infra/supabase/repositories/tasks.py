"""Task repository"""
from typing import List

from supabase import Client  # type: ignore

from app.models.task import Task

from .base import BaseRepository


class TaskRepository(BaseRepository[Task, Task]):
    """Repository for task operations"""

    def __init__(self, client: Client):
        super().__init__(client, "tasks", Task)

    async def find_by_list(self, task_list_id: str) -> List[Task]:
        """Find all tasks of a task list, ordered by id"""
        return await self.find_by_filters({"task_list_id": task_list_id}, order_by="id")
