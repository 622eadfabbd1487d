"""Join-request lifecycle as an explicit transition table.

Every status change of a JoinRequest goes through ``transition``; there is
no other way to move a request between states. A denied request never
returns to pending: the request is replaced by a fresh row instead.
"""

from enum import Enum

from tutoring.domain.errors import InvalidStateError


class RequestStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DENIED = "denied"

    @property
    def is_active(self) -> bool:
        return self in (RequestStatus.PENDING, RequestStatus.ACCEPTED)


class RequestEvent(Enum):
    """Things that can happen to a request."""

    ACCEPT = "accept"
    DENY = "deny"
    # The matching enrollment was removed by the student or the tutor.
    REVOKE = "revoke"
    # The session itself was cancelled while the request was waiting.
    CANCEL = "cancel"


_TRANSITIONS: dict[tuple[RequestStatus, RequestEvent], RequestStatus] = {
    (RequestStatus.PENDING, RequestEvent.ACCEPT): RequestStatus.ACCEPTED,
    (RequestStatus.PENDING, RequestEvent.DENY): RequestStatus.DENIED,
    (RequestStatus.PENDING, RequestEvent.CANCEL): RequestStatus.DENIED,
    (RequestStatus.ACCEPTED, RequestEvent.REVOKE): RequestStatus.DENIED,
}


def transition(current: RequestStatus, event: RequestEvent) -> RequestStatus:
    """Return the status reached by applying ``event`` to ``current``.

    Raises:
        InvalidStateError: If ``event`` is not allowed from ``current``.
    """
    try:
        return _TRANSITIONS[(current, event)]
    except KeyError:
        if current is RequestStatus.PENDING:
            raise InvalidStateError("This request is still pending") from None
        raise InvalidStateError(
            f"This request has already been {current.value}"
        ) from None
