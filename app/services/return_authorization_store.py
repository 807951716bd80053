"""
Persistence for legacy return authorizations.

All queries are scoped to an order. Mutating callers fetch with
``for_update=True`` so concurrent writers on the same record serialize.
"""
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import InvalidInput, NotFound
from app.models.document_sequence import DocumentSequence
from app.models.inventory import InventoryUnit, InventoryUnitState
from app.models.legacy_return_authorization import LegacyReturnAuthorization
from app.models.order import Order
from app.models.shipment import Shipment, ShipmentStatus
from app.models.stock_location import StockLocation
from app.services.return_authorization_query import QueryTranslator, ReturnAuthorizationQuery
from app.services.return_authorization_state_machine import INITIAL_STATE


logger = logging.getLogger(__name__)


def parse_uuid(value: Union[str, uuid.UUID, None]) -> Optional[uuid.UUID]:
    """Parse a UUID, returning None for anything malformed."""
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class ReturnAuthorizationStore:
    """Order-scoped repository for return authorizations."""

    def __init__(self, db: AsyncSession, translator: Optional[QueryTranslator] = None):
        self.db = db
        self.translator = translator or QueryTranslator()

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def get_order(self, order_key: str) -> Order:
        """Get order by UUID or order number."""
        order_id = parse_uuid(order_key)
        if order_id is not None:
            condition = Order.id == order_id
        else:
            condition = Order.order_number == order_key

        result = await self.db.execute(select(Order).where(condition))
        order = result.scalar_one_or_none()
        if not order:
            raise NotFound("Order not found")
        return order

    # =========================================================================
    # RETURN AUTHORIZATIONS
    # =========================================================================

    async def _get_or_create_sequence(self, prefix: str) -> DocumentSequence:
        """Get the sequence for a prefix with a row lock, creating it if needed."""
        result = await self.db.execute(
            select(DocumentSequence)
            .where(DocumentSequence.prefix == prefix)
            .with_for_update()
        )
        sequence = result.scalar_one_or_none()
        if sequence:
            return sequence

        # Continue after numbers issued before the sequence row existed
        last_number = await self.db.scalar(
            select(func.max(LegacyReturnAuthorization.number)).where(
                LegacyReturnAuthorization.number.like(f"{prefix}-%")
            )
        )
        suffix = last_number.rsplit("-", 1)[-1] if last_number else ""
        sequence = DocumentSequence(
            prefix=prefix,
            current_number=int(suffix) if suffix.isdigit() else 0,
            padding_length=4,
        )
        self.db.add(sequence)
        await self.db.flush()
        return sequence

    async def _generate_number(self) -> str:
        """Generate unique return authorization number, e.g. RA-20261019-0001."""
        today = datetime.now(timezone.utc).strftime("%Y%m%d")
        sequence = await self._get_or_create_sequence(f"RA-{today}")
        return sequence.get_next_number()

    async def create(self, order: Order, attrs: Dict[str, Any]) -> LegacyReturnAuthorization:
        """Create a return authorization in its initial state."""
        stock_location_id = attrs.get("stock_location_id")
        if stock_location_id is not None and await self.db.get(StockLocation, stock_location_id) is None:
            raise InvalidInput("Stock location not found", details={"stock_location_id": str(stock_location_id)})

        return_authorization = LegacyReturnAuthorization(
            number=await self._generate_number(),
            order_id=order.id,
            reason=attrs.get("reason"),
            amount=attrs.get("amount") if attrs.get("amount") is not None else Decimal("0.00"),
            stock_location_id=stock_location_id,
            state=INITIAL_STATE.value,
        )
        self.db.add(return_authorization)
        await self.db.flush()
        return await self.find(order.id, return_authorization.id)

    async def find(
        self,
        order_id: uuid.UUID,
        return_authorization_id: Union[str, uuid.UUID],
        for_update: bool = False,
    ) -> LegacyReturnAuthorization:
        """Get a return authorization of the given order, or raise NotFound."""
        ra_id = parse_uuid(return_authorization_id)
        if ra_id is None:
            raise NotFound("Return authorization not found")

        query = (
            select(LegacyReturnAuthorization)
            .options(selectinload(LegacyReturnAuthorization.inventory_units))
            .where(
                LegacyReturnAuthorization.id == ra_id,
                LegacyReturnAuthorization.order_id == order_id,
            )
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()

        result = await self.db.execute(query)
        return_authorization = result.scalar_one_or_none()
        if not return_authorization:
            raise NotFound("Return authorization not found")
        return return_authorization

    async def list(
        self,
        order_id: uuid.UUID,
        query: ReturnAuthorizationQuery,
    ) -> Tuple[List[LegacyReturnAuthorization], int]:
        """List an order's return authorizations with filters and paging."""
        stmt = select(LegacyReturnAuthorization).where(
            LegacyReturnAuthorization.order_id == order_id
        )
        stmt = self.translator.apply_filters(stmt, query)

        # Count
        count_query = select(func.count()).select_from(stmt.subquery())
        total = await self.db.scalar(count_query) or 0

        # Fetch
        stmt = stmt.options(selectinload(LegacyReturnAuthorization.inventory_units))
        stmt = self.translator.apply_ordering(stmt, query)
        stmt = self.translator.apply_page(stmt, query)
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def update(
        self,
        return_authorization: LegacyReturnAuthorization,
        attrs: Dict[str, Any],
    ) -> LegacyReturnAuthorization:
        """Apply attribute changes."""
        for field, value in attrs.items():
            setattr(return_authorization, field, value)

        return_authorization.updated_at = datetime.now(timezone.utc)
        await self.db.flush()
        return await self.find(return_authorization.order_id, return_authorization.id)

    async def delete(self, return_authorization: LegacyReturnAuthorization) -> None:
        """Delete a return authorization, releasing its inventory units."""
        await self.db.execute(
            update(InventoryUnit)
            .where(InventoryUnit.legacy_return_authorization_id == return_authorization.id)
            .values(legacy_return_authorization_id=None)
        )
        await self.db.delete(return_authorization)
        await self.db.flush()
        logger.info(f"Return authorization {return_authorization.number} deleted")

    # =========================================================================
    # INVENTORY
    # =========================================================================

    async def returnable_inventory(
        self,
        return_authorization: LegacyReturnAuthorization,
        variant_id: Optional[uuid.UUID] = None,
        for_update: bool = False,
    ) -> List[InventoryUnit]:
        """
        Shipped units of the order that this authorization may take back.

        Limited to the authorization's stock location when it has one, and
        excluding units already claimed by another authorization.
        """
        query = (
            select(InventoryUnit)
            .join(Shipment, InventoryUnit.shipment_id == Shipment.id)
            .where(
                InventoryUnit.order_id == return_authorization.order_id,
                InventoryUnit.state == InventoryUnitState.SHIPPED.value,
                Shipment.status == ShipmentStatus.SHIPPED.value,
                (InventoryUnit.legacy_return_authorization_id.is_(None))
                | (InventoryUnit.legacy_return_authorization_id == return_authorization.id),
            )
            .order_by(InventoryUnit.created_at.asc(), InventoryUnit.id.asc())
        )
        if return_authorization.stock_location_id is not None:
            query = query.where(Shipment.stock_location_id == return_authorization.stock_location_id)
        if variant_id is not None:
            query = query.where(InventoryUnit.variant_id == variant_id)
        if for_update:
            query = query.with_for_update(of=InventoryUnit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def associate_units(
        self,
        return_authorization: LegacyReturnAuthorization,
        units: List[InventoryUnit],
    ) -> LegacyReturnAuthorization:
        """Attach inventory units to the authorization."""
        for unit in units:
            unit.legacy_return_authorization_id = return_authorization.id
        return_authorization.updated_at = datetime.now(timezone.utc)
        await self.db.flush()
        return await self.find(return_authorization.order_id, return_authorization.id)
