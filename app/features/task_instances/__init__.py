"""Task instance lifecycle feature module"""

from app.features.task_instances.service import InstanceLifecycleService
from app.features.task_instances.schemas import (
    CompleteInstanceRequest,
    CompleteInstanceResponse,
    NextInstanceInfo,
)
from app.features.task_instances.api import router

__all__ = [
    "router",
    "InstanceLifecycleService",
    "CompleteInstanceRequest",
    "CompleteInstanceResponse",
    "NextInstanceInfo",
]
