"""Sign-up."""

import logging

from django.db import transaction, IntegrityError

from apps.accounts.models import User, normalize_login_email

from .exceptions import EmailTakenError

logger = logging.getLogger(__name__)


def register_user(
    *,
    email: str,
    password: str,
    display_name: str = '',
    avatar_url: str = ''
) -> User:
    """
    Create a roommate account.

    The email is stored lower-cased. A blank display name falls back to
    the part of the email before the '@'.

    Raises:
        EmailTakenError: If the email is already registered, in any case
    """
    email = normalize_login_email(email)
    if User.objects.filter(email=email).exists():
        raise EmailTakenError(f"An account with email {email} already exists")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                display_name=display_name.strip(),
                avatar_url=avatar_url,
            )
    except IntegrityError:
        # Lost a race with a concurrent sign-up
        raise EmailTakenError(f"An account with email {email} already exists")

    logger.info("Registered user %s", user.id)
    return user
