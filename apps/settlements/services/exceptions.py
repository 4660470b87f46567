"""
Domain exceptions for settlements app.

Exception Hierarchy:
    SettlementsServiceError (base)
    ├── SettlementNotFoundError
    ├── InvalidStateTransitionError   (state)
    └── NoParticipantsError           (validation)

Permission and round-state failures reuse InsufficientPermissionsError
from apps.rooms and NoOpenRoundError / RoundClosedError from apps.rounds.
"""


class SettlementsServiceError(Exception):
    """Base exception for all settlements service errors."""
    pass


class SettlementNotFoundError(SettlementsServiceError):
    """Raised when a settlement does not exist."""
    pass


class InvalidStateTransitionError(SettlementsServiceError):
    """
    Raised when a settlement status change skips or reverses a step.

    Example:
        raise InvalidStateTransitionError("Cannot go from pending to confirmed")
    """
    pass


class NoParticipantsError(SettlementsServiceError):
    """Raised when balances are requested for a room without members."""
    pass
