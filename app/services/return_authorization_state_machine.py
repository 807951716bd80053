"""
Return Authorization State Machine

This module is the single place where a legacy return authorization
changes state. Transitions are checked against the table below before
anything is mutated.

    authorized --receive--> received   (needs at least one inventory unit)
    authorized --cancel---> canceled
    received, canceled: terminal
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Tuple

from app.core.exceptions import InvalidInput, InvalidTransition, UnprocessableState
from app.models.inventory import InventoryUnitState


logger = logging.getLogger(__name__)


# =============================================================================
# STATES AND EVENTS
# =============================================================================

class ReturnAuthorizationState(str, Enum):
    AUTHORIZED = "authorized"
    RECEIVED = "received"
    CANCELED = "canceled"


class ReturnAuthorizationEvent(str, Enum):
    RECEIVE = "receive"
    CANCEL = "cancel"


INITIAL_STATE = ReturnAuthorizationState.AUTHORIZED

TERMINAL_STATES = frozenset({
    ReturnAuthorizationState.RECEIVED,
    ReturnAuthorizationState.CANCELED,
})


# =============================================================================
# TRANSITION RULES
# =============================================================================

# (current_state, event) -> next_state
TRANSITIONS: Dict[Tuple[ReturnAuthorizationState, ReturnAuthorizationEvent], ReturnAuthorizationState] = {
    (ReturnAuthorizationState.AUTHORIZED, ReturnAuthorizationEvent.RECEIVE): ReturnAuthorizationState.RECEIVED,
    (ReturnAuthorizationState.AUTHORIZED, ReturnAuthorizationEvent.CANCEL): ReturnAuthorizationState.CANCELED,
}


def get_allowed_events(state: str) -> List[ReturnAuthorizationEvent]:
    """Events that may fire from the given state."""
    return [event for (from_state, event) in TRANSITIONS if from_state.value == state]


def can_transition(state: str, event: ReturnAuthorizationEvent) -> bool:
    return event in get_allowed_events(state)


def is_terminal(state: str) -> bool:
    return state in {s.value for s in TERMINAL_STATES}


def can_edit(state: str) -> bool:
    """Reason and amount are editable only before a terminal state."""
    return not is_terminal(state)


# =============================================================================
# TRANSITION EXECUTOR
# =============================================================================

def validate_transition(return_authorization, event: ReturnAuthorizationEvent) -> ReturnAuthorizationState:
    """
    Check an event against the table and its guard.

    Returns the target state. Nothing is mutated here.

    Raises:
        InvalidTransition: event never legal from the current state
        UnprocessableState: guard failed (receive with no inventory units)
    """
    current = return_authorization.state
    if not can_transition(current, event):
        raise InvalidTransition(
            f"Cannot {event.value} a return authorization that is '{current}'.",
            details={"state": current, "event": event.value},
        )

    if event == ReturnAuthorizationEvent.RECEIVE and not return_authorization.inventory_units:
        raise UnprocessableState(
            "Cannot receive a return authorization with no inventory units.",
            details={"state": current, "event": event.value},
        )

    return TRANSITIONS[(ReturnAuthorizationState(current), event)]


def fire(return_authorization, event: ReturnAuthorizationEvent) -> None:
    """
    Apply an event to a return authorization.

    Validates first, then updates state, timestamps and, on receive,
    marks the associated inventory units as returned.
    """
    target = validate_transition(return_authorization, event)
    previous = return_authorization.state
    now = datetime.now(timezone.utc)

    return_authorization.state = target.value

    if target == ReturnAuthorizationState.RECEIVED:
        return_authorization.received_at = now
        for unit in return_authorization.inventory_units:
            unit.state = InventoryUnitState.RETURNED.value

    elif target == ReturnAuthorizationState.CANCELED:
        return_authorization.canceled_at = now

    logger.info(
        f"Return authorization {return_authorization.number}: {previous} -> {target.value}"
    )


def ensure_editable(return_authorization) -> None:
    """Raise InvalidInput when reason/amount may no longer change."""
    if not can_edit(return_authorization.state):
        raise InvalidInput(
            f"Return authorization is '{return_authorization.state}' and can no longer be modified.",
            details={"state": return_authorization.state},
        )


def ensure_accepts_units(return_authorization) -> None:
    """Inventory units may only be added while authorized."""
    if is_terminal(return_authorization.state):
        raise InvalidTransition(
            f"Cannot add inventory units to a return authorization that is '{return_authorization.state}'.",
            details={"state": return_authorization.state},
        )
