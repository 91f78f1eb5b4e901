"""
core.domain.exceptions - Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside service layers.
They are deliberately **not** DRF exceptions so that the domain layer stays
framework-agnostic.  The global DRF exception handler in
``core.domain.exception_handler`` maps them to HTTP responses.

Mapping cheatsheet
------------------
┌─────────────────────┬──────────────────────────────┬──────┐
│ Domain Exception    │ DRF / HTTP equivalent        │ Code │
├─────────────────────┼──────────────────────────────┼──────┤
│ DomainError         │ ValidationError / 400        │ 400  │
│ PermissionDenied    │ PermissionDenied / 403       │ 403  │
│ NotFound            │ NotFound / 404               │ 404  │
│ TrackingDenied      │ NotFound / 404 (uniform)     │ 404  │
│ Conflict            │ APIException / 409           │ 409  │
│ InvalidTransition   │ APIException / 409           │ 409  │
│ StaleWrite          │ APIException / 409           │ 409  │
└─────────────────────┴──────────────────────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import InvalidTransition

    if (current, target) not in ALLOWED_TRANSITIONS:
        raise InvalidTransition(current=current, target=target)
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class PermissionDenied(DomainError):
    """
    The authenticated user does not have the required role for this
    operation.

    Maps to HTTP 403.
    """

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested resource does not exist (or is not visible to the
    requesting user given their role scope).

    Maps to HTTP 404.
    """

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class TrackingDenied(NotFound):
    """
    Uniform denial for the public tracking endpoints.

    Raised for an unknown complaint ID, a wrong passcode, and a missing
    passcode alike.  The message is fixed so that callers cannot tell the
    cases apart.  Maps to HTTP 404.
    """

    MESSAGE = "Complaint not found or access denied."

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Typical usage: duplicate creation attempt, optimistic-lock failure.
    Maps to HTTP 409.
    """

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class StaleWrite(Conflict):
    """
    The client's ``expected_version`` no longer matches the stored record.

    The client should re-read the record and retry.  Maps to HTTP 409.
    """

    def __init__(self, *, expected: int, current: int) -> None:
        super().__init__(
            f"Record was modified concurrently (expected version {expected}, "
            f"current version {current}). Reload and retry."
        )
        self.expected = expected
        self.current = current


class InvalidTransition(Conflict):
    """
    A status transition that is not allowed from the current status.

    Only raised when strict transition checking is enabled.  Inherits from
    ``Conflict`` because an invalid transition IS a conflict with the
    resource's current state.  Maps to HTTP 409.

    Example::

        raise InvalidTransition(
            current="Submitted",
            target="Resolved",
            reason="Complaint must be reviewed first.",
        )
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            if reason:
                parts.append(f"({reason})")
            message = " ".join(parts) + "."
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason
