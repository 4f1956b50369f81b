"""Request and response schemas for checkout API"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.checkout import Checkout


class CheckoutRequest(BaseModel):
    """Request model for checkout/checkin; user_id defaults to the caller"""
    user_id: Optional[str] = None


class CheckoutResponse(BaseModel):
    """Response model for checkout"""
    success: bool
    checked_out_by: Optional[str] = None
    locked_by: Optional[str] = None


class CheckinResponse(BaseModel):
    """Response model for checkin"""
    success: bool


class CheckoutStatusResponse(BaseModel):
    """Current checkout of a list"""
    task_list_id: str
    checkout: Optional[Checkout] = None


class ForceReleaseRequest(BaseModel):
    """Request model for admin force-release"""
    task_list_id: str = Field(..., min_length=1)


class ForceReleaseResponse(BaseModel):
    """Response model for admin force-release"""
    success: bool
    released_user_id: Optional[str] = None


class ActiveCheckout(BaseModel):
    """Active checkout row for the admin overview"""
    task_list_id: str
    task_list_name: Optional[str] = None
    user_id: str
    checked_out_at: Optional[datetime] = None


class PageMeta(BaseModel):
    total: int
    page: int
    per_page: int
    total_pages: int


class ActiveCheckoutsResponse(BaseModel):
    """Paginated active checkouts"""
    checkouts: List[ActiveCheckout]
    meta: PageMeta
