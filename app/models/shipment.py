"""Shipment model: the packages an order went out in."""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional, List

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.order import Order
    from app.models.stock_location import StockLocation
    from app.models.inventory import InventoryUnit


class ShipmentStatus(str, Enum):
    """Shipment status enumeration."""
    PENDING = "PENDING"      # Awaiting fulfillment
    READY = "READY"          # Packed, ready to leave
    SHIPPED = "SHIPPED"      # Left the stock location
    CANCELLED = "CANCELLED"  # Shipment cancelled


class Shipment(Base):
    """
    Shipment model for tracking individual packages.
    Each shipment leaves from exactly one stock location.
    """
    __tablename__ = "shipments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    # Identification
    shipment_number: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        nullable=False,
        index=True,
        comment="Unique shipment number e.g., SH-20240101-0001"
    )

    # Order reference
    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Origin
    stock_location_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("stock_locations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    status: Mapped[str] = mapped_column(
        String(50),
        default=ShipmentStatus.PENDING.value,
        nullable=False,
        index=True,
        comment="PENDING, READY, SHIPPED, CANCELLED"
    )
    shipped_at: Mapped[Optional[datetime]] = mapped_column(
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
    order: Mapped["Order"] = relationship("Order", back_populates="shipments")
    stock_location: Mapped["StockLocation"] = relationship("StockLocation", back_populates="shipments")
    inventory_units: Mapped[List["InventoryUnit"]] = relationship(
        "InventoryUnit",
        back_populates="shipment"
    )

    def __repr__(self) -> str:
        return f"<Shipment(shipment_number='{self.shipment_number}', status='{self.status}')>"
