"""
Legacy Return Authorization API Endpoints

Return authorizations nested under an order. The order may be
addressed by UUID or by order number.
"""

import re
from typing import Dict, Optional

from fastapi import APIRouter, Query, Request, Response, status

from app.api.deps import ReturnAuthorizations
from app.schemas.legacy_return_authorization import (
    AddInventoryUnitsRequest,
    LegacyReturnAuthorizationCreateRequest,
    LegacyReturnAuthorizationListResponse,
    LegacyReturnAuthorizationResponse,
    LegacyReturnAuthorizationUpdateRequest,
)

router = APIRouter(
    prefix="/orders/{order_id}/return_authorizations",
    tags=["Return Authorizations"],
)

QUERY_PARAM = re.compile(r"^q\[(?P<key>[A-Za-z0-9_]+)\]$")


def extract_search_params(request: Request) -> Dict[str, str]:
    """Collect q[...] parameters; the last value wins for repeated keys."""
    params = {}
    for name, value in request.query_params.multi_items():
        match = QUERY_PARAM.match(name)
        if match:
            params[match.group("key")] = value
    return params


@router.get("", response_model=LegacyReturnAuthorizationListResponse)
async def list_return_authorizations(
    order_id: str,
    request: Request,
    service: ReturnAuthorizations,
    page: Optional[str] = Query(None, description="1-indexed page number"),
    per_page: Optional[str] = Query(None, description="Items per page"),
):
    """
    List return authorizations of an order.

    Filters use ransack-style keys, e.g. `q[reason_cont]=damage`,
    and `q[s]=amount desc` sorts.
    """
    result = await service.list(
        order_id,
        extract_search_params(request),
        page=page,
        per_page=per_page,
    )
    return LegacyReturnAuthorizationListResponse(
        legacy_return_authorizations=[
            LegacyReturnAuthorizationResponse.model_validate(ra) for ra in result.items
        ],
        count=result.count,
        total_count=result.total_count,
        current_page=result.current_page,
        pages=result.pages,
        per_page=result.per_page,
    )


@router.post(
    "",
    response_model=LegacyReturnAuthorizationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_return_authorization(
    order_id: str,
    service: ReturnAuthorizations,
    body: Optional[LegacyReturnAuthorizationCreateRequest] = None,
):
    """Create a return authorization (admin only)."""
    body = body or LegacyReturnAuthorizationCreateRequest()
    return await service.create(order_id, body.legacy_return_authorization)


@router.get("/{return_authorization_id}", response_model=LegacyReturnAuthorizationResponse)
async def get_return_authorization(
    order_id: str,
    return_authorization_id: str,
    service: ReturnAuthorizations,
):
    """Get a return authorization."""
    return await service.get(order_id, return_authorization_id)


@router.put("/{return_authorization_id}", response_model=LegacyReturnAuthorizationResponse)
async def update_return_authorization(
    order_id: str,
    return_authorization_id: str,
    service: ReturnAuthorizations,
    body: Optional[LegacyReturnAuthorizationUpdateRequest] = None,
):
    """Update reason and/or amount."""
    body = body or LegacyReturnAuthorizationUpdateRequest()
    return await service.update(order_id, return_authorization_id, body.legacy_return_authorization)


@router.put("/{return_authorization_id}/add", response_model=LegacyReturnAuthorizationResponse)
async def add_inventory_units(
    order_id: str,
    return_authorization_id: str,
    data: AddInventoryUnitsRequest,
    service: ReturnAuthorizations,
):
    """Attach returnable inventory units of a variant."""
    return await service.add(order_id, return_authorization_id, data)


@router.delete("/{return_authorization_id}/receive", response_model=LegacyReturnAuthorizationResponse)
async def receive_return_authorization(
    order_id: str,
    return_authorization_id: str,
    service: ReturnAuthorizations,
):
    """Mark as received. Requires at least one inventory unit."""
    return await service.receive(order_id, return_authorization_id)


@router.delete("/{return_authorization_id}/cancel", response_model=LegacyReturnAuthorizationResponse)
async def cancel_return_authorization(
    order_id: str,
    return_authorization_id: str,
    service: ReturnAuthorizations,
):
    """Cancel an authorized return authorization."""
    return await service.cancel(order_id, return_authorization_id)


@router.delete("/{return_authorization_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_return_authorization(
    order_id: str,
    return_authorization_id: str,
    service: ReturnAuthorizations,
):
    """Delete a return authorization."""
    await service.destroy(order_id, return_authorization_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
