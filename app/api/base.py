from fastapi import APIRouter
from app.api import health
from app.features.task_instances import router as task_instances_router
from app.features.checkouts import router as checkouts_router, admin_router as admin_checkouts_router
from app.features.checklists import router as checklists_router

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health.router)
api_router.include_router(task_instances_router)
api_router.include_router(checkouts_router)
api_router.include_router(checklists_router)
api_router.include_router(admin_checkouts_router)
