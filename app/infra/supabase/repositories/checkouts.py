"""Task list checkout repository"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from postgrest.exceptions import APIError
from supabase import Client  # type: ignore

from app.models.checkout import Checkout

from .base import BaseRepository, UNIQUE_VIOLATION

logger = logging.getLogger(__name__)


class CheckoutContentionError(Exception):
    """The lock changed hands on every acquire attempt"""


class CheckoutRepository(BaseRepository[Checkout, Checkout]):
    """
    Repository for task list checkouts.

    ``task_list_checkouts.task_list_id`` is unique, so the table holds at most
    one lock per list and the database arbitrates concurrent checkouts.
    """

    def __init__(self, client: Client):
        super().__init__(client, "task_list_checkouts", Checkout)

    async def find_by_list(self, task_list_id: str) -> Optional[Checkout]:
        """Current checkout of a list, if any"""
        checkouts = await self.find_by_filters({"task_list_id": task_list_id}, limit=1)
        return checkouts[0] if checkouts else None

    async def acquire(self, task_list_id: str, user_id: str, attempts: int = 3) -> Checkout:
        """
        Take the lock for ``user_id`` or report who holds it.

        Each step is a single conditional write: the insert only succeeds when
        no row exists, and the refresh only touches a row the same user holds.
        The holder is read only after both writes were refused.

        Returns:
            The checkout row now in place. Its ``user_id`` differs from
            ``user_id`` when another user holds the lock.

        Raises:
            CheckoutContentionError: The lock kept changing hands
        """
        for attempt in range(1, attempts + 1):
            try:
                response = self._table().insert(
                    {"task_list_id": task_list_id, "user_id": user_id}
                ).execute()
                if response.data:
                    return self._to_model(response.data[0])
            except APIError as e:
                if e.code != UNIQUE_VIOLATION:
                    raise

            # Row exists: refresh it only if it is ours
            response = (
                self._table()
                .update({"checked_out_at": datetime.now(timezone.utc).isoformat()})
                .eq("task_list_id", task_list_id)
                .eq("user_id", user_id)
                .execute()
            )
            if response.data:
                return self._to_model(response.data[0])

            current = await self.find_by_list(task_list_id)
            if current:
                return current

            logger.debug(f"Checkout of list {task_list_id} released during acquire (attempt {attempt})")

        raise CheckoutContentionError(f"Could not acquire checkout for list {task_list_id}")

    async def release(self, task_list_id: str, user_id: Optional[str] = None) -> bool:
        """
        Delete the checkout of a list.

        With ``user_id`` the delete only matches that holder's lock.
        """
        query = self._table().delete().eq("task_list_id", task_list_id)
        if user_id is not None:
            query = query.eq("user_id", user_id)
        response = query.execute()
        return len(response.data or []) > 0

    async def find_page(self, offset: int, limit: int) -> Tuple[List[Checkout], int]:
        """Page of active checkouts with the exact total count"""
        response = (
            self._table()
            .select("*", count="exact")
            .order("checked_out_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        checkouts = self._to_models(response.data or [])
        total = response.count if response.count is not None else len(checkouts)
        return checkouts, total
