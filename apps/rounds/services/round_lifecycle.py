"""
Round lifecycle service.

States: OPEN -> CLEARED (terminal). A room always has exactly one OPEN
round; the partial unique constraint on Round backs that up at the
database level and the room row lock serializes creation.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError

from apps.accounts.models import User
from apps.rooms.models import Room
from apps.rooms.services import (
    RoomNotFoundError,
    require_room_membership,
    require_admin,
)
from apps.rounds.models import Round, RoundStatus
from apps.settlements.models import Settlement, SettlementStatus

from .exceptions import (
    RoundNotFoundError,
    NoOpenRoundError,
    OpenRoundExistsError,
)

logger = logging.getLogger(__name__)


def _lock_room(room_id: UUID) -> Room:
    try:
        return Room.objects.select_for_update().get(id=room_id)
    except Room.DoesNotExist:
        raise RoomNotFoundError(f"Room with ID {room_id} not found")


def _open_round(room_id: UUID) -> Round:
    open_round = Round.objects.filter(room_id=room_id, status=RoundStatus.OPEN).first()
    if open_round is not None:
        return open_round

    try:
        with transaction.atomic():
            open_round = Round.objects.create(room_id=room_id, status=RoundStatus.OPEN)
    except IntegrityError:
        # Another transaction opened it between our check and insert
        return Round.objects.get(room_id=room_id, status=RoundStatus.OPEN)

    logger.info("Opened round %s for room %s", open_round.id, room_id)
    return open_round


@transaction.atomic
def ensure_open_round(*, room_id: UUID) -> Round:
    """
    Return the room's OPEN round, creating one if none exists.

    Called eagerly when a room is created and lazily when expenses are
    posted or listed.

    Raises:
        RoomNotFoundError: If room doesn't exist
    """
    _lock_room(room_id)
    return _open_round(room_id)


def get_open_round(*, room_id: UUID, lock: bool = False) -> Round:
    """
    Return the room's OPEN round without creating one.

    Args:
        room_id: UUID of the room
        lock: Take a row lock on the round (caller must be inside a transaction)

    Raises:
        NoOpenRoundError: If the room has no OPEN round
    """
    queryset = Round.objects.filter(room_id=room_id, status=RoundStatus.OPEN)
    if lock:
        queryset = queryset.select_for_update()

    open_round = queryset.first()
    if open_round is None:
        raise NoOpenRoundError("No open round found")
    return open_round


@transaction.atomic
def close_round_if_all_confirmed(*, round_id: UUID) -> Optional[Round]:
    """
    Clear the round once every one of its settlements is CONFIRMED.

    Runs under the round's row lock, so of two concurrent confirmations
    only the one that commits last sees every settlement confirmed. A
    round that is already CLEARED, or has no settlements, is left alone.

    Args:
        round_id: UUID of the round

    Returns:
        The cleared Round, or None when nothing changed

    Raises:
        RoundNotFoundError: If round doesn't exist
    """
    try:
        target_round = Round.objects.select_for_update().get(id=round_id)
    except Round.DoesNotExist:
        raise RoundNotFoundError(f"Round with ID {round_id} not found")

    if not target_round.can_transition_to(RoundStatus.CLEARED):
        return None

    statuses = list(
        Settlement.objects
        .filter(round_id=round_id)
        .values_list('status', flat=True)
    )
    if not statuses or any(s != SettlementStatus.CONFIRMED for s in statuses):
        return None

    target_round.mark_cleared()
    # Only the round lock is held here; the partial unique index guards the insert
    successor = _open_round(target_round.room_id)

    logger.info(
        "Round %s cleared after %d confirmed settlements; successor round %s",
        target_round.id,
        len(statuses),
        successor.id,
    )
    return target_round


@transaction.atomic
def start_round(*, room_id: UUID, user: User) -> Round:
    """
    Explicitly start a new round (admin only).

    Raises:
        RoomNotFoundError: If room doesn't exist
        NotMemberError: If user is not a member
        InsufficientPermissionsError: If user is not an admin
        OpenRoundExistsError: If the room already has an OPEN round
    """
    require_admin(require_room_membership(user=user, room_id=room_id))

    _lock_room(room_id)
    if Round.objects.filter(room_id=room_id, status=RoundStatus.OPEN).exists():
        raise OpenRoundExistsError("There is already an open round")

    return _open_round(room_id)
