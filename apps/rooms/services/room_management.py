"""
Room management service.

Handles room creation with proper transaction safety.
"""

import logging
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import Prefetch

from apps.accounts.models import User
from apps.rooms.models import Room, RoomMembership, RoomRole, generate_invite_code

from .exceptions import RoomNotFoundError

logger = logging.getLogger(__name__)


def create_room(
    *,
    name: str,
    creator: User,
    max_retries: int = 5
) -> Room:
    """
    Create a new room, make the creator its admin and open the first round.

    This is a multi-step operation wrapped in a transaction:
    1. Generate unique invite code
    2. Create the room
    3. Create admin membership for the creator
    4. Open the initial round

    Args:
        name: Room name
        creator: User who creates (and administers) the room
        max_retries: Maximum attempts to generate unique invite code

    Returns:
        Created Room instance

    Raises:
        RuntimeError: If cannot generate unique invite code after retries
    """
    from apps.rounds.services import ensure_open_round

    # Retry logic outside transaction to handle invite code collisions
    for attempt in range(max_retries):
        invite_code = generate_invite_code()

        try:
            # Each attempt is a separate transaction
            with transaction.atomic():
                room = Room.objects.create(
                    name=name,
                    created_by=creator,
                    invite_code=invite_code
                )

                RoomMembership.objects.create(
                    user=creator,
                    room=room,
                    role=RoomRole.ADMIN
                )

                ensure_open_round(room_id=room.id)

                logger.info("Room %s created by user %s", room.id, creator.id)
                return room

        except IntegrityError:
            # Invite code collision (very rare)
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique invite code after {max_retries} attempts"
                )
            continue

    # Should never reach here
    raise RuntimeError("Unexpected error in room creation")


def get_room_by_id(*, room_id: UUID) -> Room:
    """
    Get a room by ID with its memberships prefetched.

    Args:
        room_id: UUID of the room

    Returns:
        Room instance

    Raises:
        RoomNotFoundError: If room doesn't exist
    """
    try:
        return (
            Room.objects
            .select_related('created_by')
            .prefetch_related(
                Prefetch(
                    'memberships',
                    queryset=RoomMembership.objects.select_related('user')
                )
            )
            .get(id=room_id)
        )
    except Room.DoesNotExist:
        raise RoomNotFoundError(f"Room with ID {room_id} not found")
