from app.models.user import User, UserRole
from app.models.role import Role, RoleLevel
from app.models.order import Order, OrderStatus
from app.models.stock_location import StockLocation
from app.models.shipment import Shipment, ShipmentStatus
from app.models.product import ProductVariant
from app.models.inventory import InventoryUnit, InventoryUnitState
from app.models.legacy_return_authorization import LegacyReturnAuthorization
from app.models.document_sequence import DocumentSequence

__all__ = [
    "User",
    "UserRole",
    "Role",
    "RoleLevel",
    "Order",
    "OrderStatus",
    "StockLocation",
    "Shipment",
    "ShipmentStatus",
    "ProductVariant",
    "InventoryUnit",
    "InventoryUnitState",
    "LegacyReturnAuthorization",
    "DocumentSequence",
]
