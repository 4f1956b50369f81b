"""Domain models for the application"""
from .task import Task
from .task_instance import TaskInstance, TaskInstanceCreate, InstanceStatus
from .task_completion import TaskCompletion, TaskCompletionCreate
from .task_list import TaskList
from .checkout import Checkout
from .audit import AuditRecord, AuditRecordCreate
from .user import UserAccess
from .recurrence import RecurrenceConfig, RecurrenceType, RecurrenceUnit, is_valid_recurrence

__all__ = [
    'Task',
    'TaskInstance', 'TaskInstanceCreate', 'InstanceStatus',
    'TaskCompletion', 'TaskCompletionCreate',
    'TaskList',
    'Checkout',
    'AuditRecord', 'AuditRecordCreate',
    'UserAccess',
    'RecurrenceConfig', 'RecurrenceType', 'RecurrenceUnit', 'is_valid_recurrence',
]
