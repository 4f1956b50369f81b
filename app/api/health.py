"""Health check endpoint"""

from fastapi import APIRouter

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
async def health_check():
    """Basic liveness check"""
    return {
        "status": "healthy",
        "service": "checklist-portal-backend",
    }
