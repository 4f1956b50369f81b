"""Repository factory and exports"""
from supabase import Client
from .tasks import TaskRepository
from .task_lists import TaskListRepository
from .task_instances import TaskInstanceRepository
from .task_completions import TaskCompletionRepository
from .checkouts import CheckoutRepository, CheckoutContentionError
from .audit import AuditRepository
from .profiles import ProfileRepository


class RepositoryFactory:
    """Factory for creating repository instances"""

    def __init__(self, client: Client):
        self._client = client
        self._tasks: TaskRepository = None
        self._task_lists: TaskListRepository = None
        self._task_instances: TaskInstanceRepository = None
        self._task_completions: TaskCompletionRepository = None
        self._checkouts: CheckoutRepository = None
        self._audit: AuditRepository = None
        self._profiles: ProfileRepository = None

    @property
    def tasks(self) -> TaskRepository:
        """Get task repository"""
        if self._tasks is None:
            self._tasks = TaskRepository(self._client)
        return self._tasks

    @property
    def task_lists(self) -> TaskListRepository:
        """Get task list repository"""
        if self._task_lists is None:
            self._task_lists = TaskListRepository(self._client)
        return self._task_lists

    @property
    def task_instances(self) -> TaskInstanceRepository:
        """Get task instance repository"""
        if self._task_instances is None:
            self._task_instances = TaskInstanceRepository(self._client)
        return self._task_instances

    @property
    def task_completions(self) -> TaskCompletionRepository:
        """Get task completion repository"""
        if self._task_completions is None:
            self._task_completions = TaskCompletionRepository(self._client)
        return self._task_completions

    @property
    def checkouts(self) -> CheckoutRepository:
        """Get checkout repository"""
        if self._checkouts is None:
            self._checkouts = CheckoutRepository(self._client)
        return self._checkouts

    @property
    def audit(self) -> AuditRepository:
        """Get audit repository"""
        if self._audit is None:
            self._audit = AuditRepository(self._client)
        return self._audit

    @property
    def profiles(self) -> ProfileRepository:
        """Get profile repository"""
        if self._profiles is None:
            self._profiles = ProfileRepository(self._client)
        return self._profiles


__all__ = [
    'RepositoryFactory',
    'TaskRepository',
    'TaskListRepository',
    'TaskInstanceRepository',
    'TaskCompletionRepository',
    'CheckoutRepository',
    'CheckoutContentionError',
    'AuditRepository',
    'ProfileRepository',
]
