from fastapi import APIRouter

from app.api.v1.endpoints import (
    # Returns
    legacy_return_authorizations,
)


api_router = APIRouter(prefix="/api/v1")

# Return Authorizations (nested under orders)
api_router.include_router(legacy_return_authorizations.router)
