import uuid

import pytest

from app.core.exceptions import NotFound, Unauthorized
from app.core.permissions import (
    AccessContext,
    ReturnAuthorizationAction,
    ReturnAuthorizationGate,
    WRITE_ACTIONS,
)
from app.models import Order, Role, User, UserRole


ALL_ACTIONS = list(ReturnAuthorizationAction)
READ_ACTIONS = [a for a in ALL_ACTIONS if a not in WRITE_ACTIONS]

gate = ReturnAuthorizationGate()


@pytest.mark.parametrize("action", ALL_ACTIONS)
def test_admin_may_do_everything(action):
    for owns_order in (True, False):
        context = AccessContext(is_admin=True, owns_order=owns_order)
        assert gate.can_access(context, action)
        gate.authorize(context, action)


@pytest.mark.parametrize("action", ALL_ACTIONS)
def test_stranger_is_unauthorized(action):
    context = AccessContext(is_admin=False, owns_order=False)
    assert not gate.can_access(context, action)
    with pytest.raises(Unauthorized):
        gate.authorize(context, action)


@pytest.mark.parametrize("action", READ_ACTIONS)
def test_owner_reads_are_unauthorized(action):
    with pytest.raises(Unauthorized):
        gate.authorize(AccessContext(is_admin=False, owns_order=True), action)


@pytest.mark.parametrize("action", sorted(WRITE_ACTIONS, key=lambda a: a.value))
def test_owner_writes_are_not_found(action):
    with pytest.raises(NotFound):
        gate.authorize(AccessContext(is_admin=False, owns_order=True), action)


def test_create_is_a_read_for_denial_purposes():
    context = AccessContext(is_admin=False, owns_order=True)
    assert gate.denial_for(context, ReturnAuthorizationAction.CREATE) is Unauthorized


def _user_with_role(level: str, code: str = "staff") -> User:
    user = User(id=uuid.uuid4(), email=f"{code}@example.com", first_name=code)
    user.user_roles = [UserRole(role=Role(name=code, code=code, level=level, is_active=True))]
    return user


def test_context_for_admin_owner():
    admin = _user_with_role("SUPER_ADMIN", "super_admin")
    order = Order(id=uuid.uuid4(), order_number="R1", user_id=admin.id)

    context = AccessContext.for_order(admin, order)

    assert context == AccessContext(is_admin=True, owns_order=True)


def test_context_for_admin_role_code():
    user = _user_with_role("MANAGER", "admin")
    order = Order(id=uuid.uuid4(), order_number="R1", user_id=None)

    assert AccessContext.for_order(user, order) == AccessContext(is_admin=True, owns_order=False)


def test_inactive_admin_role_does_not_grant_access():
    user = _user_with_role("SUPER_ADMIN", "super_admin")
    user.user_roles[0].role.is_active = False
    order = Order(id=uuid.uuid4(), order_number="R1", user_id=uuid.uuid4())

    assert AccessContext.for_order(user, order) == AccessContext(is_admin=False, owns_order=False)


def test_guest_order_is_owned_by_nobody():
    user = _user_with_role("EXECUTIVE")
    order = Order(id=uuid.uuid4(), order_number="R1", user_id=None)

    assert not AccessContext.for_order(user, order).owns_order


def test_anonymous_context():
    order = Order(id=uuid.uuid4(), order_number="R1", user_id=uuid.uuid4())
    assert AccessContext.for_order(None, order) == AccessContext(is_admin=False, owns_order=False)
