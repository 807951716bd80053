import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional, List

from sqlalchemy import String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.shipment import Shipment
    from app.models.inventory import InventoryUnit
    from app.models.legacy_return_authorization import LegacyReturnAuthorization


class OrderStatus(str, Enum):
    """Order status enum."""
    NEW = "NEW"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    PARTIALLY_SHIPPED = "PARTIALLY_SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"


class Order(Base):
    """
    Order model.
    Orders are pre-existing here; return authorizations hang off them.
    """
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    # Order Identification
    order_number: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        nullable=False,
        index=True
    )

    # Owner (guest orders have no user)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Status
    status: Mapped[str] = mapped_column(
        String(50),
        default=OrderStatus.NEW.value,
        nullable=False,
        index=True,
        comment="NEW, CONFIRMED, SHIPPED, PARTIALLY_SHIPPED, DELIVERED, CANCELLED, RETURNED"
    )

    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=Decimal("0.00"),
        nullable=False
    )

    # Timestamps
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
    user: Mapped[Optional["User"]] = relationship("User", back_populates="orders")
    shipments: Mapped[List["Shipment"]] = relationship(
        "Shipment",
        back_populates="order",
        cascade="all, delete-orphan"
    )
    inventory_units: Mapped[List["InventoryUnit"]] = relationship(
        "InventoryUnit",
        back_populates="order",
        cascade="all, delete-orphan"
    )
    legacy_return_authorizations: Mapped[List["LegacyReturnAuthorization"]] = relationship(
        "LegacyReturnAuthorization",
        back_populates="order",
        cascade="all, delete-orphan"
    )

    def is_owned_by(self, user_id: Optional[uuid.UUID]) -> bool:
        """Check whether the given user owns this order."""
        return user_id is not None and self.user_id is not None and self.user_id == user_id

    def __repr__(self) -> str:
        return f"<Order(order_number='{self.order_number}', status='{self.status}')>"
