"""Task list checkout feature module"""

from app.features.checkouts.service import CheckoutService
from app.features.checkouts.api import router, admin_router

__all__ = [
    "router",
    "admin_router",
    "CheckoutService",
]
