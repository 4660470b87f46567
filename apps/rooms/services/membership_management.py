"""
Membership management service.

Handles joining rooms and the membership/role checks every other
app runs before touching a room's rounds, expenses or settlements.
"""

import logging
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.rooms.models import Room, RoomMembership, RoomRole

from .exceptions import (
    RoomNotFoundError,
    InvalidInviteCodeError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def join_room(*, invite_code: str, user: User) -> RoomMembership:
    """
    Join a room using its invite code.

    Uses row-level locking to prevent race conditions when checking
    and creating memberships.

    Args:
        invite_code: Invite code shared by a room member
        user: User joining the room

    Returns:
        Created RoomMembership instance

    Raises:
        InvalidInviteCodeError: If no room has this invite code
        AlreadyMemberError: If user is already a member
    """
    try:
        room = (
            Room.objects
            .select_for_update()
            .get(invite_code=invite_code)
        )
    except Room.DoesNotExist:
        raise InvalidInviteCodeError("Invalid invite code")

    if room.has_member(user):
        raise AlreadyMemberError(f"User is already a member of {room.name}")

    try:
        with transaction.atomic():
            membership = RoomMembership.objects.create(
                user=user,
                room=room,
                role=RoomRole.MEMBER
            )
    except IntegrityError:
        # Database constraint caught duplicate membership
        raise AlreadyMemberError(f"User is already a member of {room.name}")

    logger.info("User %s joined room %s", user.id, room.id)
    return membership


def get_room_members(*, room_id: UUID) -> QuerySet[RoomMembership]:
    """
    Get all members of a room in join order.

    Join order is the order balances are laid out in when settlements
    are computed, so it must stay stable.

    Raises:
        RoomNotFoundError: If room doesn't exist
    """
    if not Room.objects.filter(id=room_id).exists():
        raise RoomNotFoundError(f"Room with ID {room_id} not found")

    return (
        RoomMembership.objects
        .filter(room_id=room_id)
        .select_related('user')
        .order_by('joined_at', 'id')
    )


def require_room_membership(*, user: User, room_id: UUID) -> RoomMembership:
    """
    Return the user's membership in the room.

    Raises:
        RoomNotFoundError: If room doesn't exist
        NotMemberError: If user is not a member
    """
    try:
        return (
            RoomMembership.objects
            .select_related('room')
            .get(room_id=room_id, user=user)
        )
    except RoomMembership.DoesNotExist:
        if not Room.objects.filter(id=room_id).exists():
            raise RoomNotFoundError(f"Room with ID {room_id} not found")
        raise NotMemberError("You must be a member of this room")


def require_admin(membership: RoomMembership) -> RoomMembership:
    """Raise InsufficientPermissionsError unless the membership is an admin one."""
    if not membership.is_admin:
        raise InsufficientPermissionsError("Only room admins can perform this action")
    return membership
