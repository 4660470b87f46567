"""
Role management service.

Handles member role updates with concurrency protection.
"""

from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.rooms.models import RoomMembership, RoomRole

from .exceptions import (
    NotMemberError,
    InvalidRoleError,
    LastAdminError,
)
from .membership_management import require_room_membership, require_admin


@transaction.atomic
def update_member_role(
    *,
    room_id: UUID,
    user_id: UUID,
    new_role: str,
    updated_by: User
) -> RoomMembership:
    """
    Update a member's role (admin only).

    Uses select_for_update to prevent concurrent role changes.
    A room always keeps at least one admin.

    Args:
        room_id: UUID of the room
        user_id: UUID of the user whose role to update
        new_role: New role ('admin' or 'member')
        updated_by: User performing the update (must be admin)

    Returns:
        Updated RoomMembership instance

    Raises:
        RoomNotFoundError: If room doesn't exist
        NotMemberError: If updater or target user is not a member
        InsufficientPermissionsError: If updated_by is not admin
        InvalidRoleError: If new_role is invalid
        LastAdminError: If the change would leave the room without an admin
    """
    if new_role not in RoomRole.values:
        raise InvalidRoleError(f"Invalid role. Must be one of: {RoomRole.values}")

    require_admin(require_room_membership(user=updated_by, room_id=room_id))

    # Lock all admin rows so two admins can't demote each other at once
    admins = list(
        RoomMembership.objects
        .select_for_update()
        .filter(room_id=room_id, role=RoomRole.ADMIN)
    )

    try:
        membership = (
            RoomMembership.objects
            .select_for_update()
            .get(room_id=room_id, user_id=user_id)
        )
    except RoomMembership.DoesNotExist:
        raise NotMemberError("User is not a member of this room")

    if (
        membership.role == RoomRole.ADMIN
        and new_role != RoomRole.ADMIN
        and len(admins) <= 1
    ):
        raise LastAdminError("A room must keep at least one admin")

    membership.role = new_role
    membership.save(update_fields=['role'])

    return membership
