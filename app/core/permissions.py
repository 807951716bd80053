from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional
import logging

from app.core.exceptions import NotFound, Unauthorized
from app.models.order import Order
from app.models.user import User


logger = logging.getLogger(__name__)


class ReturnAuthorizationAction(str, Enum):
    """Actions on an order's return authorizations."""
    INDEX = "index"
    SHOW = "show"
    CREATE = "create"
    UPDATE = "update"
    ADD = "add"
    RECEIVE = "receive"
    CANCEL = "cancel"
    DESTROY = "destroy"


# Actions that mutate an existing authorization
WRITE_ACTIONS: FrozenSet[ReturnAuthorizationAction] = frozenset({
    ReturnAuthorizationAction.UPDATE,
    ReturnAuthorizationAction.ADD,
    ReturnAuthorizationAction.RECEIVE,
    ReturnAuthorizationAction.CANCEL,
    ReturnAuthorizationAction.DESTROY,
})


@dataclass(frozen=True)
class AccessContext:
    """Caller capabilities, computed once per request."""
    is_admin: bool
    owns_order: bool

    @classmethod
    def for_order(cls, user: Optional[User], order: Order) -> "AccessContext":
        if user is None:
            return cls(is_admin=False, owns_order=False)
        return cls(is_admin=user.is_admin, owns_order=order.is_owned_by(user.id))


class ReturnAuthorizationGate:
    """
    Decides whether a caller may act on an order's return authorizations.

    Admins may do anything. Everyone else is refused, but an order owner
    attempting a write gets NotFound so the refusal does not reveal
    whether the authorization exists.
    """

    def can_access(self, context: AccessContext, action: ReturnAuthorizationAction) -> bool:
        """Pure predicate: True when the action is allowed."""
        return context.is_admin

    def denial_for(self, context: AccessContext, action: ReturnAuthorizationAction):
        """Exception class a denied caller should see."""
        if context.owns_order and action in WRITE_ACTIONS:
            return NotFound
        return Unauthorized

    def authorize(self, context: AccessContext, action: ReturnAuthorizationAction) -> None:
        """
        Raise the appropriate error if the action is not allowed.

        Raises:
            Unauthorized: non-admin reads, creates, and non-owner writes
            NotFound: owner writes
        """
        if self.can_access(context, action):
            return
        error = self.denial_for(context, action)
        logger.warning(
            f"Denied {action.value} on return authorizations "
            f"(admin={context.is_admin}, owner={context.owns_order}): {error.kind.value}"
        )
        raise error()
