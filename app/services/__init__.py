# Services module
from app.services.return_authorization_service import ReturnAuthorizationService
from app.services.return_authorization_store import ReturnAuthorizationStore
from app.services.return_authorization_query import QueryTranslator

__all__ = [
    "ReturnAuthorizationService",
    "ReturnAuthorizationStore",
    "QueryTranslator",
]
