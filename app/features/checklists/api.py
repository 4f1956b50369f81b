"""Checklist API endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from app.exceptions import ChecklistError, to_http_exception
from app.infra.supabase.client import get_supabase_client
from app.infra.supabase.repositories import RepositoryFactory
from app.middleware.auth import get_current_user_id
from app.services.access_service import AccessService
from app.services.audit_service import AuditService
from app.features.checkouts.service import CheckoutService
from app.features.task_instances.service import InstanceLifecycleService
from app.features.checklists.service import ChecklistService
from app.features.checklists.schemas import (
    ApplyCompletionsRequest,
    ApplyCompletionsResponse,
    ChecklistResponse,
)

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/task-lists", tags=["checklists"])


def _build_service(client: Client) -> ChecklistService:
    repos = RepositoryFactory(client)
    access = AccessService(repos)
    audit = AuditService(repos.audit)
    return ChecklistService(
        repos,
        access,
        InstanceLifecycleService(repos, access),
        CheckoutService(repos, access, audit),
        audit,
    )


@router.post("/{task_list_id}/apply-completions", response_model=ApplyCompletionsResponse)
async def apply_completions(
    task_list_id: str,
    request: ApplyCompletionsRequest,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase_client),
):
    """
    Apply a batch of completion changes to a checked-out task list.

    Changes are applied independently; failures are listed in ``errors``.
    With ``checkin`` the checkout is released afterwards.

    Raises:
        404: Task list not found
        403: Not a member, or the list is not checked out by the caller
    """
    try:
        service = _build_service(client)
        return await service.apply_completions(
            task_list_id,
            user_id,
            [change.model_dump() for change in request.changes],
            checkin_after=request.checkin,
            user_id=request.user_id,
        )

    except ChecklistError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error applying completions to list {task_list_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to apply completions: {str(e)}"
        )


@router.get("/{task_list_id}/instances", response_model=ChecklistResponse)
async def get_checklist(
    task_list_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase_client),
):
    """Tasks of a list with their instances (by due date) and completions"""
    try:
        service = _build_service(client)
        return await service.get_checklist(task_list_id, user_id)

    except ChecklistError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error loading checklist {task_list_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to load checklist: {str(e)}"
        )
