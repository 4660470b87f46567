"""Account services: sign-up, login and profile edits."""

from .exceptions import (
    AccountsServiceError,
    EmailTakenError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidProfileError,
)
from .registration import register_user
from .authentication import authenticate_user, issue_tokens
from .profile import update_profile

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'EmailTakenError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidProfileError',
    # Services
    'register_user',
    'authenticate_user',
    'issue_tokens',
    'update_profile',
]
