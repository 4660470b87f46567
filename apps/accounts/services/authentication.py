"""Login and JWT issuing."""

import logging

from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, normalize_login_email

from .exceptions import InvalidCredentialsError, InactiveAccountError

logger = logging.getLogger(__name__)


def authenticate_user(*, email: str, password: str) -> User:
    """
    Check an email/password pair and stamp last_login.

    Unknown email and wrong password raise the same error so a caller
    cannot tell which addresses are registered.

    Raises:
        InvalidCredentialsError: If the email or password is wrong
        InactiveAccountError: If the account is deactivated
    """
    user = User.objects.filter(email=normalize_login_email(email)).first()
    if user is None or not user.check_password(password):
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    User.objects.filter(pk=user.pk).update(last_login=user.last_login)

    logger.info("User %s logged in", user.id)
    return user


def issue_tokens(user: User) -> dict:
    """
    Return a refresh/access JWT pair for ``user``.

    Both tokens carry the user's email and display name, so a client can
    label the signed-in roommate without another request.
    """
    refresh = RefreshToken.for_user(user)
    refresh['email'] = user.email
    refresh['display_name'] = user.display_name

    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }
