"""
Shared fixtures: an in-memory database, an HTTP client bound to the app,
and a shipped order with inventory units to raise returns against.
"""
from datetime import datetime, timezone
from decimal import Decimal

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.database import Base, enable_case_sensitive_like, get_db
from app.main import app
from app.models import (
    InventoryUnit,
    InventoryUnitState,
    LegacyReturnAuthorization,
    Order,
    OrderStatus,
    ProductVariant,
    Role,
    RoleLevel,
    Shipment,
    ShipmentStatus,
    StockLocation,
    User,
    UserRole,
)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", enable_case_sensitive_like)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


async def _create_user(session_factory, email: str, role_level: RoleLevel = None) -> User:
    async with session_factory() as session:
        user = User(email=email, first_name=email.split("@")[0])
        session.add(user)
        if role_level is not None:
            role = Role(
                name=role_level.name.title(),
                code=role_level.name.lower(),
                level=role_level.name,
            )
            session.add(role)
            await session.flush()
            session.add(UserRole(user_id=user.id, role_id=role.id))
        await session.commit()
        return user


@pytest.fixture
async def admin(session_factory) -> User:
    return await _create_user(session_factory, "admin@example.com", RoleLevel.SUPER_ADMIN)


@pytest.fixture
async def owner(session_factory) -> User:
    return await _create_user(session_factory, "owner@example.com", RoleLevel.EXECUTIVE)


@pytest.fixture
async def stranger(session_factory) -> User:
    return await _create_user(session_factory, "stranger@example.com")


@pytest.fixture
async def stock_location(session_factory) -> StockLocation:
    async with session_factory() as session:
        location = StockLocation(code="WH-MAIN", name="Main Warehouse", is_default=True)
        session.add(location)
        await session.commit()
        return location


@pytest.fixture
async def variant(session_factory) -> ProductVariant:
    async with session_factory() as session:
        variant = ProductVariant(name="Water Filter", sku="WF-001", price=Decimal("49.99"))
        session.add(variant)
        await session.commit()
        return variant


@pytest.fixture
async def order(session_factory, owner, stock_location, variant) -> Order:
    """A shipped order of the owner holding two units of the variant."""
    async with session_factory() as session:
        order = Order(
            order_number="R100000001",
            user_id=owner.id,
            status=OrderStatus.SHIPPED.value,
            total_amount=Decimal("99.98"),
        )
        session.add(order)
        await session.flush()

        shipment = Shipment(
            shipment_number="SH-20261019-0001",
            order_id=order.id,
            stock_location_id=stock_location.id,
            status=ShipmentStatus.SHIPPED.value,
            shipped_at=datetime.now(timezone.utc),
        )
        session.add(shipment)
        await session.flush()

        for _ in range(2):
            session.add(InventoryUnit(
                order_id=order.id,
                shipment_id=shipment.id,
                variant_id=variant.id,
                state=InventoryUnitState.SHIPPED.value,
            ))
        await session.commit()
        return order


@pytest.fixture
def make_return_authorization(session_factory, order):
    """Insert a return authorization directly, bypassing the API."""
    counter = {"n": 0}

    async def _make(reason: str = "Damaged in transit", amount: str = "10.00", state: str = "authorized"):
        counter["n"] += 1
        async with session_factory() as session:
            ra = LegacyReturnAuthorization(
                number=f"RA-19700101-{counter['n']:04d}",
                order_id=order.id,
                reason=reason,
                amount=Decimal(amount),
                state=state,
            )
            session.add(ra)
            await session.commit()
            return ra

    return _make


@pytest.fixture
def ra_url(order):
    def _url(ra_id=None, action: str = None) -> str:
        url = f"/api/v1/orders/{order.id}/return_authorizations"
        if ra_id is not None:
            url += f"/{ra_id}"
        if action:
            url += f"/{action}"
        return url

    return _url
