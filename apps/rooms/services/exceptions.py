"""
Domain-specific exceptions for rooms app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.

NotMemberError and InsufficientPermissionsError are the authorization
errors shared by the rounds, expenses and settlements apps.
"""


class RoomsServiceError(Exception):
    """Base exception for all rooms service errors."""
    pass


class RoomNotFoundError(RoomsServiceError):
    """Raised when a room does not exist or is inaccessible."""
    pass


class InvalidInviteCodeError(RoomsServiceError):
    """Raised when an invite code does not match any room."""
    pass


class AlreadyMemberError(RoomsServiceError):
    """Raised when a user tries to join a room they're already in."""
    pass


class NotMemberError(RoomsServiceError):
    """Raised when a user tries to perform an action requiring membership."""
    pass


class InsufficientPermissionsError(RoomsServiceError):
    """Raised when a user lacks the role required for an action."""
    pass


class InvalidRoleError(RoomsServiceError):
    """Raised when an unknown role is requested."""
    pass


class LastAdminError(RoomsServiceError):
    """Raised when the only admin of a room tries to give up the role."""
    pass
