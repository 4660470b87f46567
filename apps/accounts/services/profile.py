"""Profile edits."""

import logging
from typing import Optional

from django.core.exceptions import ValidationError
from django.core.validators import URLValidator

from apps.accounts.models import User, DISPLAY_NAME_MAX_LENGTH

from .exceptions import InvalidProfileError

logger = logging.getLogger(__name__)


def update_profile(
    *,
    user: User,
    display_name: Optional[str] = None,
    avatar_url: Optional[str] = None
) -> User:
    """
    Change the name and avatar other roommates see.

    Fields left as None are not touched. An empty avatar_url clears it.

    Raises:
        InvalidProfileError: If display_name is blank or too long, or
            avatar_url is not a URL
    """
    update_fields = []

    if display_name is not None:
        display_name = display_name.strip()
        if not display_name:
            raise InvalidProfileError("Display name cannot be blank")
        if len(display_name) > DISPLAY_NAME_MAX_LENGTH:
            raise InvalidProfileError(
                f"Display name must be at most {DISPLAY_NAME_MAX_LENGTH} characters"
            )
        user.display_name = display_name
        update_fields.append('display_name')

    if avatar_url is not None:
        avatar_url = avatar_url.strip()
        if avatar_url:
            try:
                URLValidator()(avatar_url)
            except ValidationError:
                raise InvalidProfileError("Avatar must be a valid URL")
        user.avatar_url = avatar_url
        update_fields.append('avatar_url')

    if update_fields:
        user.save(update_fields=update_fields)
        logger.info("User %s updated %s", user.id, ', '.join(update_fields))

    return user
