"""Errors raised by the accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class EmailTakenError(AccountsServiceError):
    """An account already uses this email."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    pass


class InactiveAccountError(AccountsServiceError):
    pass


class InvalidProfileError(AccountsServiceError):
    """Profile fields failed validation."""
    pass
