"""
Legacy Return Authorization Model

Return authorizations (RMA) raised by staff against a shipped order.
State lives in a plain string column; every change goes through
app.services.return_authorization_state_machine.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, List
from decimal import Decimal

from sqlalchemy import String, DateTime, Text, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base

if TYPE_CHECKING:
    from app.models.order import Order
    from app.models.stock_location import StockLocation
    from app.models.inventory import InventoryUnit


class LegacyReturnAuthorization(Base):
    """
    Return authorization scoped to an order.
    Destroyed together with its order.
    """
    __tablename__ = "legacy_return_authorizations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    number: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
        comment="Return authorization number e.g., RA-20240101-0001"
    )

    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Amount to be credited back"
    )

    state: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="authorized",
        index=True,
        comment="authorized, received, canceled"
    )

    # Where returned units go; limits returnable inventory when set
    stock_location_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("stock_locations.id", ondelete="SET NULL"),
        nullable=True
    )

    received_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )
    canceled_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Relationships
    order: Mapped["Order"] = relationship("Order", back_populates="legacy_return_authorizations")
    stock_location: Mapped[Optional["StockLocation"]] = relationship("StockLocation")
    inventory_units: Mapped[List["InventoryUnit"]] = relationship(
        "InventoryUnit",
        back_populates="legacy_return_authorization",
        order_by="InventoryUnit.created_at",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<LegacyReturnAuthorization(number='{self.number}', state='{self.state}')>"
