"""Task list repository"""
from typing import Dict, List, Optional

from supabase import Client  # type: ignore

from app.models.task_list import TaskList

from .base import BaseRepository


class TaskListRepository(BaseRepository[TaskList, TaskList]):
    """Repository for task list lookups (lists are managed elsewhere)"""

    def __init__(self, client: Client):
        super().__init__(client, "task_lists", TaskList)

    async def find_names(self, task_list_ids: List[str]) -> Dict[str, Optional[str]]:
        """Map list id -> list name for the given ids"""
        if not task_list_ids:
            return {}

        response = (
            self._table()
            .select("id, name")
            .in_("id", task_list_ids)
            .execute()
        )
        return {str(row["id"]): row.get("name") for row in response.data or []}
