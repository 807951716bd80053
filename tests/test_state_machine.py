from types import SimpleNamespace

import pytest

from app.core.exceptions import InvalidInput, InvalidTransition, UnprocessableState
from app.services import return_authorization_state_machine as sm
from app.services.return_authorization_state_machine import (
    ReturnAuthorizationEvent,
    ReturnAuthorizationState,
)


def _ra(state="authorized", units=0):
    return SimpleNamespace(
        number="RA-19700101-0001",
        state=state,
        received_at=None,
        canceled_at=None,
        inventory_units=[SimpleNamespace(state="shipped") for _ in range(units)],
    )


def test_allowed_events():
    assert set(sm.get_allowed_events("authorized")) == {
        ReturnAuthorizationEvent.RECEIVE,
        ReturnAuthorizationEvent.CANCEL,
    }
    assert sm.get_allowed_events("received") == []
    assert sm.get_allowed_events("canceled") == []


def test_terminal_states():
    assert not sm.is_terminal("authorized")
    assert sm.is_terminal("received")
    assert sm.is_terminal("canceled")


def test_receive_marks_units_returned():
    ra = _ra(units=2)

    sm.fire(ra, ReturnAuthorizationEvent.RECEIVE)

    assert ra.state == ReturnAuthorizationState.RECEIVED.value
    assert ra.received_at is not None
    assert [unit.state for unit in ra.inventory_units] == ["returned", "returned"]


def test_receive_without_units_leaves_state():
    ra = _ra(units=0)

    with pytest.raises(UnprocessableState):
        sm.fire(ra, ReturnAuthorizationEvent.RECEIVE)

    assert ra.state == "authorized"
    assert ra.received_at is None


def test_cancel_authorized():
    ra = _ra()

    sm.fire(ra, ReturnAuthorizationEvent.CANCEL)

    assert ra.state == "canceled"
    assert ra.canceled_at is not None


@pytest.mark.parametrize("state", ["received", "canceled"])
@pytest.mark.parametrize("event", list(ReturnAuthorizationEvent))
def test_no_events_from_terminal_states(state, event):
    ra = _ra(state=state, units=1)

    with pytest.raises(InvalidTransition):
        sm.fire(ra, event)

    assert ra.state == state


def test_invalid_transition_is_unprocessable():
    assert issubclass(InvalidTransition, UnprocessableState)


def test_editable_only_while_authorized():
    sm.ensure_editable(_ra())
    for state in ("received", "canceled"):
        with pytest.raises(InvalidInput):
            sm.ensure_editable(_ra(state=state))


def test_units_accepted_only_while_authorized():
    sm.ensure_accepts_units(_ra())
    with pytest.raises(InvalidTransition):
        sm.ensure_accepts_units(_ra(state="received"))


def test_unprocessable_state_maps_to_422():
    assert UnprocessableState().status_code == 422
    assert InvalidTransition().status_code == 422
