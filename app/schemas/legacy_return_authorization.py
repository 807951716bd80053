"""
Pydantic schemas for Legacy Return Authorizations.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from uuid import UUID

from pydantic import Field

from app.schemas.base import BaseResponseSchema, BaseCreateSchema, BaseUpdateSchema, OptionalUUID


# ==================== Requests ====================

class LegacyReturnAuthorizationCreate(BaseCreateSchema):
    """Schema for creating a return authorization."""
    reason: Optional[str] = Field(None, max_length=2000)
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock_location_id: OptionalUUID = None


class LegacyReturnAuthorizationCreateRequest(BaseCreateSchema):
    """Request body, nested under the resource name."""
    legacy_return_authorization: LegacyReturnAuthorizationCreate = Field(
        default_factory=LegacyReturnAuthorizationCreate
    )


class LegacyReturnAuthorizationUpdate(BaseUpdateSchema):
    """Schema for updating a return authorization. Only set fields change."""
    reason: Optional[str] = Field(None, max_length=2000)
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class LegacyReturnAuthorizationUpdateRequest(BaseUpdateSchema):
    """Request body, nested under the resource name."""
    legacy_return_authorization: LegacyReturnAuthorizationUpdate = Field(
        default_factory=LegacyReturnAuthorizationUpdate
    )


class AddInventoryUnitsRequest(BaseCreateSchema):
    """Attach units of a variant from returnable inventory."""
    variant_id: UUID
    quantity: int = Field(1, ge=1)


# ==================== Responses ====================

class InventoryUnitResponse(BaseResponseSchema):
    id: UUID
    variant_id: UUID
    shipment_id: Optional[UUID] = None
    state: str


class LegacyReturnAuthorizationResponse(BaseResponseSchema):
    """Schema for return authorization response."""
    id: UUID
    number: str
    reason: Optional[str] = None
    amount: Decimal
    state: str
    order_id: UUID
    stock_location_id: Optional[UUID] = None
    inventory_units: List[InventoryUnitResponse] = []
    created_at: datetime
    updated_at: datetime


class LegacyReturnAuthorizationListResponse(BaseResponseSchema):
    """Paginated listing. `count` is the number of items on this page."""
    legacy_return_authorizations: List[LegacyReturnAuthorizationResponse]
    count: int
    total_count: int
    current_page: int
    pages: int
    per_page: int
