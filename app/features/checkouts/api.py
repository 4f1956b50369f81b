"""Checkout API endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from supabase import Client

from app.exceptions import ChecklistError, to_http_exception
from app.infra.supabase.client import get_supabase_client
from app.infra.supabase.repositories import RepositoryFactory
from app.middleware.auth import get_current_user_id
from app.services.access_service import AccessService
from app.services.audit_service import AuditService
from app.features.checkouts.service import CheckoutService
from app.features.checkouts.schemas import (
    ActiveCheckoutsResponse,
    CheckinResponse,
    CheckoutRequest,
    CheckoutResponse,
    CheckoutStatusResponse,
    ForceReleaseRequest,
    ForceReleaseResponse,
)

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/task-lists", tags=["checkouts"])
admin_router = APIRouter(prefix="/api/admin/checkouts", tags=["admin"])


def _build_service(client: Client) -> CheckoutService:
    repos = RepositoryFactory(client)
    return CheckoutService(repos, AccessService(repos), AuditService(repos.audit))


@router.post("/{task_list_id}/checkout", response_model=CheckoutResponse)
async def checkout_task_list(
    task_list_id: str,
    request: Optional[CheckoutRequest] = None,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase_client),
):
    """
    Check out a task list for editing.

    Raises:
        404: Task list not found
        403: Not a member of the list's location, or token user mismatch
        409: Checked out by another user (body carries ``locked_by``)
    """
    try:
        service = _build_service(client)
        result = await service.checkout(task_list_id, user_id, request.user_id if request else None)
        if not result["success"]:
            return JSONResponse(status_code=409, content=result)
        return result

    except ChecklistError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error checking out list {task_list_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to check out task list: {str(e)}"
        )


@router.post("/{task_list_id}/checkin", response_model=CheckinResponse)
async def checkin_task_list(
    task_list_id: str,
    request: Optional[CheckoutRequest] = None,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase_client),
):
    """
    Release the checkout of a task list.

    Raises:
        404: Task list not found
        403: Caller does not hold the checkout
    """
    try:
        service = _build_service(client)
        return await service.checkin(task_list_id, user_id, request.user_id if request else None)

    except ChecklistError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error checking in list {task_list_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to check in task list: {str(e)}"
        )


@router.get("/{task_list_id}/checkout", response_model=CheckoutStatusResponse)
async def get_checkout_status(
    task_list_id: str,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase_client),
):
    """Current checkout of a task list (``checkout`` is null when free)"""
    try:
        service = _build_service(client)
        return await service.get_status(task_list_id, user_id)

    except ChecklistError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error getting checkout of list {task_list_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to get checkout status: {str(e)}"
        )


@admin_router.get("", response_model=ActiveCheckoutsResponse)
async def list_active_checkouts(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase_client),
):
    """
    Active checkouts with list names, newest first (superadmin only).

    Raises:
        403: Not a superadmin
    """
    try:
        service = _build_service(client)
        return await service.list_active(user_id, page=page, per_page=per_page)

    except ChecklistError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error listing active checkouts: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to list checkouts: {str(e)}"
        )


@admin_router.post("", response_model=ForceReleaseResponse)
async def force_release_checkout(
    request: ForceReleaseRequest,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase_client),
):
    """
    Force-release a task list's checkout regardless of holder (superadmin only).

    Raises:
        403: Not a superadmin
    """
    try:
        service = _build_service(client)
        return await service.force_release(request.task_list_id, user_id)

    except ChecklistError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error force-releasing list {request.task_list_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to force-release checkout: {str(e)}"
        )
