"""Inventory unit model: one physical unit of a variant on an order."""
from enum import Enum
from datetime import datetime, timezone
from sqlalchemy import Column, String, ForeignKey, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid

from app.database import Base


class InventoryUnitState(str, Enum):
    """Inventory unit state enum."""
    ON_HAND = "on_hand"  # Allocated, not yet shipped
    SHIPPED = "shipped"  # Left with a shipment
    RETURNED = "returned"  # Received back against a return authorization


class InventoryUnit(Base):
    """Single unit of a shipped variant, trackable for return association."""

    __tablename__ = "inventory_units"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    shipment_id = Column(UUID(as_uuid=True), ForeignKey("shipments.id", ondelete="SET NULL"), index=True)
    variant_id = Column(UUID(as_uuid=True), ForeignKey("product_variants.id"), nullable=False, index=True)

    state = Column(
        String(20), default=InventoryUnitState.ON_HAND.value, nullable=False, index=True,
        comment="on_hand, shipped, returned"
    )

    # Return association (cleared when the authorization is destroyed)
    legacy_return_authorization_id = Column(
        UUID(as_uuid=True),
        ForeignKey("legacy_return_authorizations.id", ondelete="SET NULL"),
        index=True,
    )

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    order = relationship("Order", back_populates="inventory_units")
    shipment = relationship("Shipment", back_populates="inventory_units")
    variant = relationship("ProductVariant")
    legacy_return_authorization = relationship(
        "LegacyReturnAuthorization", back_populates="inventory_units"
    )

    def __repr__(self):
        return f"<InventoryUnit {self.id}: {self.state}>"
