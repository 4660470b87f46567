"""
Domain exceptions for rounds app.

Exception Hierarchy:
    RoundsServiceError (base)
    ├── RoundNotFoundError
    ├── NoOpenRoundError         (state)
    ├── OpenRoundExistsError     (state)
    └── RoundClosedError         (state)
"""


class RoundsServiceError(Exception):
    """Base exception for all rounds service errors."""
    pass


class RoundNotFoundError(RoundsServiceError):
    """Raised when a round does not exist or is inaccessible."""
    pass


class NoOpenRoundError(RoundsServiceError):
    """Raised when an operation needs the room's open round and there is none."""
    pass


class OpenRoundExistsError(RoundsServiceError):
    """Raised when starting a round while another one is still open."""
    pass


class RoundClosedError(RoundsServiceError):
    """
    Raised when mutating expenses or settlements of a cleared round.

    Example:
        raise RoundClosedError("Cannot edit expenses in a cleared round")
    """
    pass
