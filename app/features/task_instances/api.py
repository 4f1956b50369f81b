"""Task instance API endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from app.exceptions import ChecklistError, to_http_exception
from app.infra.supabase.client import get_supabase_client
from app.infra.supabase.repositories import RepositoryFactory
from app.middleware.auth import get_current_user_id
from app.services.access_service import AccessService
from app.features.task_instances.service import InstanceLifecycleService
from app.features.task_instances.schemas import CompleteInstanceRequest, CompleteInstanceResponse

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/task-instances", tags=["task-instances"])


@router.post("/complete", response_model=CompleteInstanceResponse)
async def complete_task_instance(
    request: CompleteInstanceRequest,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase_client),
):
    """
    Complete a task instance.

    Records the completion and marks the instance completed. For tasks that
    repeat from completion, the next pending instance is created in the same
    transaction.

    Raises:
        404: Instance, task or task list not found
        403: User may not complete tasks of this list
        409: Instance is already completed or replaced
        500: Server error during processing
    """
    try:
        repos = RepositoryFactory(client)
        service = InstanceLifecycleService(repos, AccessService(repos))
        return await service.complete_instance(request.instance_id, user_id, request.notes)

    except ChecklistError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error completing instance {request.instance_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to complete task instance: {str(e)}"
        )
