"""
Legacy Return Authorization Service.

Every action resolves the order, checks the caller against the
authorization gate, and only then touches the store or the state machine.
Errors are raised as app.core.exceptions types.
"""
import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidInput, UnprocessableState
from app.core.permissions import AccessContext, ReturnAuthorizationAction, ReturnAuthorizationGate
from app.models.legacy_return_authorization import LegacyReturnAuthorization
from app.models.order import Order
from app.models.user import User
from app.schemas.legacy_return_authorization import (
    LegacyReturnAuthorizationCreate,
    LegacyReturnAuthorizationUpdate,
    AddInventoryUnitsRequest,
)
from app.services.return_authorization_query import QueryTranslator, ReturnAuthorizationQuery
from app.services import return_authorization_state_machine as state_machine
from app.services.return_authorization_state_machine import ReturnAuthorizationEvent
from app.services.return_authorization_store import ReturnAuthorizationStore


logger = logging.getLogger(__name__)


@dataclass
class ReturnAuthorizationPage:
    """One page of an order's return authorizations."""
    items: List[LegacyReturnAuthorization]
    total_count: int
    query: ReturnAuthorizationQuery

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def current_page(self) -> int:
        return self.query.page

    @property
    def per_page(self) -> int:
        return self.query.per_page

    @property
    def pages(self) -> int:
        return self.query.pages_for(self.total_count)


class ReturnAuthorizationService:
    """Service for legacy return authorization operations."""

    def __init__(
        self,
        db: AsyncSession,
        user: Optional[User],
        gate: Optional[ReturnAuthorizationGate] = None,
        translator: Optional[QueryTranslator] = None,
    ):
        self.db = db
        self.user = user
        self.gate = gate or ReturnAuthorizationGate()
        self.translator = translator or QueryTranslator()
        self.store = ReturnAuthorizationStore(db, self.translator)

    async def _authorize(self, order_key: str, action: ReturnAuthorizationAction) -> Order:
        order = await self.store.get_order(order_key)
        context = AccessContext.for_order(self.user, order)
        self.gate.authorize(context, action)
        return order

    # =========================================================================
    # READS
    # =========================================================================

    async def list(
        self,
        order_key: str,
        q: Mapping[str, str],
        page: Optional[str] = None,
        per_page: Optional[str] = None,
    ) -> ReturnAuthorizationPage:
        """List return authorizations for an order."""
        order = await self._authorize(order_key, ReturnAuthorizationAction.INDEX)
        query = self.translator.translate(q, page=page, per_page=per_page)
        items, total = await self.store.list(order.id, query)
        return ReturnAuthorizationPage(items=items, total_count=total, query=query)

    async def get(self, order_key: str, return_authorization_id: str) -> LegacyReturnAuthorization:
        """Get a single return authorization."""
        order = await self._authorize(order_key, ReturnAuthorizationAction.SHOW)
        return await self.store.find(order.id, return_authorization_id)

    # =========================================================================
    # WRITES
    # =========================================================================

    async def create(
        self,
        order_key: str,
        data: LegacyReturnAuthorizationCreate,
    ) -> LegacyReturnAuthorization:
        """Create a return authorization against an existing order."""
        order = await self._authorize(order_key, ReturnAuthorizationAction.CREATE)
        return_authorization = await self.store.create(order, data.model_dump())
        logger.info(
            f"Return authorization {return_authorization.number} created for order {order.order_number}"
        )
        return return_authorization

    async def update(
        self,
        order_key: str,
        return_authorization_id: str,
        data: LegacyReturnAuthorizationUpdate,
    ) -> LegacyReturnAuthorization:
        """Update reason and/or amount."""
        order = await self._authorize(order_key, ReturnAuthorizationAction.UPDATE)
        return_authorization = await self.store.find(order.id, return_authorization_id, for_update=True)

        changes = data.model_dump(exclude_unset=True)
        if "amount" in changes and changes["amount"] is None:
            raise InvalidInput("amount cannot be blank")
        if not changes:
            return return_authorization

        state_machine.ensure_editable(return_authorization)
        return await self.store.update(return_authorization, changes)

    async def add(
        self,
        order_key: str,
        return_authorization_id: str,
        data: AddInventoryUnitsRequest,
    ) -> LegacyReturnAuthorization:
        """
        Associate `quantity` more units of a variant from returnable inventory.

        All-or-nothing: if not enough free units exist nothing is attached.
        """
        order = await self._authorize(order_key, ReturnAuthorizationAction.ADD)
        return_authorization = await self.store.find(order.id, return_authorization_id, for_update=True)
        state_machine.ensure_accepts_units(return_authorization)

        candidates = await self.store.returnable_inventory(
            return_authorization, variant_id=data.variant_id, for_update=True
        )
        free_units = [
            unit for unit in candidates
            if unit.legacy_return_authorization_id != return_authorization.id
        ]
        if len(free_units) < data.quantity:
            raise UnprocessableState(
                f"Only {len(free_units)} returnable unit(s) of variant {data.variant_id} available; "
                f"{data.quantity} requested.",
                details={"variant_id": str(data.variant_id), "available": len(free_units)},
            )

        return_authorization = await self.store.associate_units(
            return_authorization, free_units[:data.quantity]
        )
        logger.info(
            f"Return authorization {return_authorization.number}: "
            f"added {data.quantity} unit(s) of variant {data.variant_id}"
        )
        return return_authorization

    async def receive(self, order_key: str, return_authorization_id: str) -> LegacyReturnAuthorization:
        """Mark a return authorization as received."""
        return await self._fire(
            order_key, return_authorization_id,
            ReturnAuthorizationAction.RECEIVE, ReturnAuthorizationEvent.RECEIVE,
        )

    async def cancel(self, order_key: str, return_authorization_id: str) -> LegacyReturnAuthorization:
        """Cancel a return authorization."""
        return await self._fire(
            order_key, return_authorization_id,
            ReturnAuthorizationAction.CANCEL, ReturnAuthorizationEvent.CANCEL,
        )

    async def _fire(
        self,
        order_key: str,
        return_authorization_id: str,
        action: ReturnAuthorizationAction,
        event: ReturnAuthorizationEvent,
    ) -> LegacyReturnAuthorization:
        order = await self._authorize(order_key, action)
        return_authorization = await self.store.find(order.id, return_authorization_id, for_update=True)
        state_machine.fire(return_authorization, event)
        await self.db.flush()
        return await self.store.find(order.id, return_authorization.id)

    async def destroy(self, order_key: str, return_authorization_id: str) -> None:
        """Delete a return authorization."""
        order = await self._authorize(order_key, ReturnAuthorizationAction.DESTROY)
        return_authorization = await self.store.find(order.id, return_authorization_id, for_update=True)
        await self.store.delete(return_authorization)
