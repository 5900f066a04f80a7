# shirur_express/services/booking_machine.py
"""
Booking lifecycle.

pending -> accepted | declined
accepted -> started -> awaiting_otp -> awaiting_bill -> awaiting_payment -> completed
any non-terminal -> cancelled

This module is pure: it only decides whether an (actor, event) pair is
allowed from a status and what the next status is. Persisting the move is
done by ``booking_service`` with a compare-and-set on the stored status.
"""
from enum import Enum
from typing import Dict, FrozenSet, Tuple

from ..errors import AuthorizationError, InvalidTransitionError
from ..models.booking import BookingStatus


class Actor(str, Enum):
    CUSTOMER = "customer"
    PROVIDER = "provider"
    ADMIN = "admin"
    PAYMENT = "payment"


class BookingEvent(str, Enum):
    ACCEPT = "accept"
    DECLINE = "decline"
    START = "start"
    REQUEST_OTP = "request_otp"
    VERIFY_OTP = "verify_otp"
    SUBMIT_INVOICE = "submit_invoice"
    CONFIRM_PAYMENT = "confirm_payment"
    CANCEL = "cancel"


TERMINAL_STATUSES: FrozenSet[BookingStatus] = frozenset({
    BookingStatus.DECLINED,
    BookingStatus.CANCELLED,
    BookingStatus.COMPLETED,
})

# (from, event) -> (to, actors allowed to fire it)
TRANSITIONS: Dict[Tuple[BookingStatus, BookingEvent], Tuple[BookingStatus, FrozenSet[Actor]]] = {
    (BookingStatus.PENDING, BookingEvent.ACCEPT): (BookingStatus.ACCEPTED, frozenset({Actor.PROVIDER})),
    (BookingStatus.PENDING, BookingEvent.DECLINE): (BookingStatus.DECLINED, frozenset({Actor.PROVIDER})),
    (BookingStatus.ACCEPTED, BookingEvent.START): (BookingStatus.STARTED, frozenset({Actor.PROVIDER})),
    (BookingStatus.STARTED, BookingEvent.REQUEST_OTP): (BookingStatus.AWAITING_OTP, frozenset({Actor.PROVIDER})),
    (BookingStatus.AWAITING_OTP, BookingEvent.VERIFY_OTP): (BookingStatus.AWAITING_BILL, frozenset({Actor.PROVIDER})),
    (BookingStatus.AWAITING_BILL, BookingEvent.SUBMIT_INVOICE): (BookingStatus.AWAITING_PAYMENT, frozenset({Actor.PROVIDER})),
    (BookingStatus.AWAITING_PAYMENT, BookingEvent.CONFIRM_PAYMENT): (BookingStatus.COMPLETED, frozenset({Actor.PAYMENT})),
}

CANCEL_ACTORS = frozenset({Actor.CUSTOMER, Actor.ADMIN})

for _status in BookingStatus:
    if _status not in TERMINAL_STATUSES:
        TRANSITIONS[(_status, BookingEvent.CANCEL)] = (BookingStatus.CANCELLED, CANCEL_ACTORS)

# Status requested through PATCH /bookings/{id}/status -> event
STATUS_EVENTS = {
    BookingStatus.ACCEPTED: BookingEvent.ACCEPT,
    BookingStatus.DECLINED: BookingEvent.DECLINE,
    BookingStatus.STARTED: BookingEvent.START,
}


def is_terminal(status: BookingStatus) -> bool:
    return BookingStatus(status) in TERMINAL_STATUSES


def allowed_events(status: BookingStatus) -> Dict[BookingEvent, BookingStatus]:
    status = BookingStatus(status)
    return {event: target for (source, event), (target, _) in TRANSITIONS.items() if source == status}


def next_status(current: BookingStatus, event: BookingEvent, actor: Actor) -> BookingStatus:
    """
    Target status for ``event`` fired by ``actor`` from ``current``.

    Raises InvalidTransitionError when the event is not defined from the
    current status, AuthorizationError when it is but not for this actor.
    """
    current = BookingStatus(current)
    entry = TRANSITIONS.get((current, BookingEvent(event)))
    if entry is None:
        raise InvalidTransitionError(
            f"'{BookingEvent(event).value}' is not allowed in current state '{current.value}'"
        )
    target, actors = entry
    if Actor(actor) not in actors:
        raise AuthorizationError(
            f"A {Actor(actor).value} cannot {BookingEvent(event).value} this booking"
        )
    return target
