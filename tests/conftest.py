"""Pytest fixtures for the checklist backend tests."""

import pytest
from fastapi.testclient import TestClient

from fake_supabase import FakeSupabaseClient

from app.infra.supabase.repositories import RepositoryFactory
from app.services.access_service import AccessService
from app.services.audit_service import AuditService
from app.features.checkouts.service import CheckoutService
from app.features.checklists.service import ChecklistService
from app.features.task_instances.service import InstanceLifecycleService


SUPERADMIN_ROLE_ID = "role-superadmin"
STAFF_ROLE_ID = "role-staff"

ADMIN_ID = "user-admin"
MEMBER_ID = "user-member"
OTHER_MEMBER_ID = "user-other-member"
OUTSIDER_ID = "user-outsider"
MANAGER_ID = "user-manager"

LOCATION_ID = "location-downtown"
OTHER_LOCATION_ID = "location-airport"

LIST_ID = "list-opening"
MANAGER_LIST_ID = "list-airport-closing"

DAILY_TASK_ID = "task-daily-mop"
WEEKLY_TASK_ID = "task-weekly-fridge"
ONE_OFF_TASK_ID = "task-one-off-sign"
SCHEDULED_TASK_ID = "task-scheduled-delivery"
EMPTY_TASK_ID = "task-no-instances"
MANAGER_TASK_ID = "task-manager-cash"


@pytest.fixture
def fake_client():
    """Supabase fake seeded with users, two lists, tasks and pending instances.

    Member and other member work at the downtown location; the outsider has a
    staff role but no location; the manager holds the literal role name
    ``manager`` which the airport list is bound to.
    """
    client = FakeSupabaseClient()

    client.seed(
        "user_roles",
        {"id": SUPERADMIN_ROLE_ID, "name": "superadmin"},
        {"id": STAFF_ROLE_ID, "name": "staff"},
    )
    client.seed(
        "profiles",
        {"id": ADMIN_ID, "role": SUPERADMIN_ROLE_ID},
        {"id": MEMBER_ID, "role": STAFF_ROLE_ID},
        {"id": OTHER_MEMBER_ID, "role": STAFF_ROLE_ID},
        {"id": OUTSIDER_ID, "role": STAFF_ROLE_ID},
        {"id": MANAGER_ID, "role": "manager"},
    )
    client.seed(
        "user_locations",
        {"user_id": MEMBER_ID, "location_id": LOCATION_ID},
        {"user_id": OTHER_MEMBER_ID, "location_id": LOCATION_ID},
    )
    client.seed(
        "task_lists",
        {"id": LIST_ID, "name": "Opening checklist", "location_id": LOCATION_ID, "role_id": None},
        {"id": MANAGER_LIST_ID, "name": "Airport closing", "location_id": OTHER_LOCATION_ID, "role_id": "manager"},
    )
    client.seed(
        "tasks",
        {
            "id": DAILY_TASK_ID, "task_list_id": LIST_ID, "title": "Mop floors",
            "is_recurring": True, "recurrence_type": "daily", "repeat_from_completion": True,
        },
        {
            "id": WEEKLY_TASK_ID, "task_list_id": LIST_ID, "title": "Clean fridge",
            "is_recurring": True, "recurrence_type": "weekly",
            "specific_days_of_week": [1, 3, 5], "repeat_from_completion": True,
        },
        {
            "id": ONE_OFF_TASK_ID, "task_list_id": LIST_ID, "title": "Replace sign",
            "is_recurring": False, "recurrence_type": "none", "repeat_from_completion": False,
        },
        {
            "id": SCHEDULED_TASK_ID, "task_list_id": LIST_ID, "title": "Check delivery",
            "is_recurring": True, "recurrence_type": "daily", "repeat_from_completion": False,
        },
        {
            "id": EMPTY_TASK_ID, "task_list_id": LIST_ID, "title": "Restock napkins",
            "is_recurring": False, "recurrence_type": "none", "repeat_from_completion": False,
        },
        {
            "id": MANAGER_TASK_ID, "task_list_id": MANAGER_LIST_ID, "title": "Count cash",
            "is_recurring": False, "recurrence_type": "none", "repeat_from_completion": False,
        },
    )
    client.seed(
        "task_instances",
        {"id": "inst-daily-1", "task_id": DAILY_TASK_ID, "due_date": "2025-03-03T09:00:00+00:00", "status": "pending"},
        {"id": "inst-weekly-1", "task_id": WEEKLY_TASK_ID, "due_date": "2025-03-03T09:00:00+00:00", "status": "pending"},
        {"id": "inst-one-off-1", "task_id": ONE_OFF_TASK_ID, "due_date": "2025-03-03T09:00:00+00:00", "status": "pending"},
        {"id": "inst-scheduled-1", "task_id": SCHEDULED_TASK_ID, "due_date": "2025-03-03T09:00:00+00:00", "status": "pending"},
        {"id": "inst-manager-1", "task_id": MANAGER_TASK_ID, "due_date": "2025-03-03T21:00:00+00:00", "status": "pending"},
    )
    return client


@pytest.fixture
def repos(fake_client):
    return RepositoryFactory(fake_client)


@pytest.fixture
def access_service(repos):
    return AccessService(repos)


@pytest.fixture
def audit_service(repos):
    return AuditService(repos.audit)


@pytest.fixture
def lifecycle_service(repos, access_service):
    return InstanceLifecycleService(repos, access_service, allow_non_atomic=False)


@pytest.fixture
def checkout_service(repos, access_service, audit_service):
    return CheckoutService(repos, access_service, audit_service)


@pytest.fixture
def checklist_service(repos, access_service, lifecycle_service, checkout_service, audit_service):
    return ChecklistService(repos, access_service, lifecycle_service, checkout_service, audit_service)


@pytest.fixture
def current_user():
    """Mutable holder for the authenticated user of API requests"""
    return {"id": MEMBER_ID}


@pytest.fixture
def test_client(fake_client, current_user):
    """FastAPI test client with the store and authentication overridden."""
    from app.main import app
    from app.infra.supabase.client import get_supabase_client
    from app.middleware.auth import get_current_user_id

    app.dependency_overrides[get_supabase_client] = lambda: fake_client
    app.dependency_overrides[get_current_user_id] = lambda: current_user["id"]

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
