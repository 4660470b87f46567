"""
Settlement management service.

Generates a round's settlements from its expenses and moves each one
through PENDING -> PAID -> CONFIRMED. Both operations run under the
round's row lock and retry the whole transaction on write conflicts.
"""

import logging
import time
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction, OperationalError
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.expenses.models import Expense
from apps.rooms.services import (
    InsufficientPermissionsError,
    get_room_members,
    require_room_membership,
    require_admin,
)
from apps.rounds.models import Round
from apps.rounds.services import (
    RoundClosedError,
    RoundNotFoundError,
    ensure_open_round,
    get_open_round,
    close_round_if_all_confirmed,
)
from apps.settlements.models import Settlement, SettlementStatus

from .balance_calculation import calculate_balances, allocate_to_cents
from .settlement_matching import match_settlements
from .exceptions import (
    SettlementNotFoundError,
    InvalidStateTransitionError,
)

logger = logging.getLogger(__name__)


def _with_retries(operation, **kwargs):
    """
    Run a transactional operation, retrying on write conflicts.

    Each attempt is a fresh transaction that re-reads all state.
    """
    max_retries = settings.LEDGER_MAX_RETRIES
    backoff = settings.LEDGER_RETRY_BACKOFF_SECONDS

    for attempt in range(1, max_retries + 1):
        try:
            return operation(**kwargs)
        except OperationalError as e:
            if attempt == max_retries:
                logger.error(
                    "%s failed after %d attempts: %s",
                    operation.__name__, attempt, e,
                )
                raise
            logger.warning(
                "Write conflict in %s (attempt %d/%d): %s",
                operation.__name__, attempt, max_retries, e,
            )
            time.sleep(backoff * attempt)


def _round_balances(round_id: UUID, room_id: UUID) -> Dict[UUID, Decimal]:
    member_ids = list(
        get_room_members(room_id=room_id).values_list('user_id', flat=True)
    )
    expenses = Expense.objects.filter(room_id=room_id, round_id=round_id).only('payer_id', 'amount')
    # Cent-rounded with the zero sum kept, so stored settlements add up
    return allocate_to_cents(calculate_balances(expenses=expenses, member_ids=member_ids))


@transaction.atomic
def _generate(*, room_id: UUID, user: User) -> List[Settlement]:
    require_admin(require_room_membership(user=user, room_id=room_id))

    open_round = get_open_round(room_id=room_id, lock=True)

    replaced, _ = Settlement.objects.filter(round=open_round).delete()

    balances = _round_balances(open_round.id, room_id)
    drafts = match_settlements(
        balances,
        tolerance=settings.LEDGER_SETTLEMENT_TOLERANCE,
    )

    created = Settlement.objects.bulk_create([
        Settlement(
            room_id=room_id,
            round=open_round,
            from_user_id=draft.from_user_id,
            to_user_id=draft.to_user_id,
            amount=draft.amount,
            status=SettlementStatus.PENDING,
        )
        for draft in drafts
    ])
    settlements = list(
        Settlement.objects
        .filter(id__in=[s.id for s in created])
        .select_related('from_user', 'to_user')
    )

    logger.info(
        "Generated %d settlements for round %s (replaced %d)",
        len(settlements), open_round.id, replaced,
    )
    return settlements


def generate_settlements(*, room_id: UUID, user: User) -> List[Settlement]:
    """
    Replace the open round's settlements with freshly computed ones.

    Regenerating over the same expenses yields the same
    (from_user, to_user, amount) triples, all PENDING again.

    Args:
        room_id: UUID of the room
        user: User requesting generation (must be admin)

    Returns:
        List of created Settlement instances

    Raises:
        RoomNotFoundError: If room doesn't exist
        NotMemberError: If user is not a member
        InsufficientPermissionsError: If user is not an admin
        NoOpenRoundError: If the room has no open round
        NoParticipantsError: If the room has no members
    """
    return _with_retries(_generate, room_id=room_id, user=user)


@transaction.atomic
def _advance(*, settlement_id: UUID, user: User, new_status: str) -> Settlement:
    try:
        round_id = Settlement.objects.values_list('round_id', flat=True).get(id=settlement_id)
    except Settlement.DoesNotExist:
        raise SettlementNotFoundError(f"Settlement with ID {settlement_id} not found")

    # Round lock first; every writer to this round's settlements takes it
    try:
        target_round = Round.objects.select_for_update().get(id=round_id)
    except Round.DoesNotExist:
        raise RoundNotFoundError(f"Round with ID {round_id} not found")

    try:
        settlement = (
            Settlement.objects
            .select_for_update()
            .select_related('from_user', 'to_user')
            .get(id=settlement_id)
        )
    except Settlement.DoesNotExist:
        # Deleted by a regeneration that committed before we got the lock
        raise SettlementNotFoundError(f"Settlement with ID {settlement_id} not found")

    if not target_round.is_open:
        raise RoundClosedError("Cannot update settlements in a cleared round")

    require_room_membership(user=user, room_id=settlement.room_id)

    if not settlement.can_transition_to(new_status):
        raise InvalidStateTransitionError(
            f"Cannot change settlement from {settlement.status} to {new_status}"
        )

    now = timezone.now()
    if new_status == SettlementStatus.PAID:
        if settlement.from_user_id != user.id:
            raise InsufficientPermissionsError("Only the payer can mark a settlement as paid")
        settlement.paid_at = now
    elif new_status == SettlementStatus.CONFIRMED:
        if settlement.to_user_id != user.id:
            raise InsufficientPermissionsError("Only the receiver can confirm a settlement")
        settlement.confirmed_at = now

    settlement.status = new_status
    settlement.save(update_fields=['status', 'paid_at', 'confirmed_at', 'updated_at'])

    logger.info(
        "Settlement %s moved to %s by user %s",
        settlement.id, new_status, user.id,
    )

    close_round_if_all_confirmed(round_id=round_id)
    return settlement


def advance_settlement_status(
    *,
    settlement_id: UUID,
    user: User,
    new_status: str
) -> Settlement:
    """
    Move a settlement one step along PENDING -> PAID -> CONFIRMED.

    Only the debtor (from_user) may mark PAID and only the creditor
    (to_user) may mark CONFIRMED. When the last settlement of the round
    is confirmed the round is cleared and a new one opened, all in the
    same transaction.

    Args:
        settlement_id: UUID of the settlement
        user: User making the change
        new_status: 'paid' or 'confirmed'

    Returns:
        Updated Settlement instance

    Raises:
        SettlementNotFoundError: If settlement doesn't exist
        RoundClosedError: If the settlement's round is cleared
        NotMemberError: If user is not a member of the room
        InvalidStateTransitionError: If the step is not allowed from the current status
        InsufficientPermissionsError: If user is not the party allowed to take the step
    """
    return _with_retries(
        _advance,
        settlement_id=settlement_id,
        user=user,
        new_status=new_status,
    )


def list_round_settlements(
    *,
    room_id: UUID,
    user: User,
    round_id: Optional[UUID] = None
) -> QuerySet[Settlement]:
    """
    Settlements of a round (the open round by default).

    Raises:
        RoomNotFoundError: If room doesn't exist
        NotMemberError: If user is not a member
        RoundNotFoundError: If round_id doesn't belong to the room
    """
    require_room_membership(user=user, room_id=room_id)

    if round_id is None:
        round_id = ensure_open_round(room_id=room_id).id
    elif not Round.objects.filter(id=round_id, room_id=room_id).exists():
        raise RoundNotFoundError(f"Round with ID {round_id} not found")

    return (
        Settlement.objects
        .filter(room_id=room_id, round_id=round_id)
        .select_related('from_user', 'to_user')
    )


def get_room_balances(*, room_id: UUID, user: User) -> List[dict]:
    """
    Current balances of every member in the open round.

    Returns:
        List of dicts with 'user' (User) and 'balance' (Decimal, in cents,
        summing to zero),
        in member join order

    Raises:
        RoomNotFoundError: If room doesn't exist
        NotMemberError: If user is not a member
    """
    require_room_membership(user=user, room_id=room_id)
    open_round = ensure_open_round(room_id=room_id)

    balances = _round_balances(open_round.id, room_id)
    users = User.objects.in_bulk(list(balances.keys()))

    return [
        {'user': users[user_id], 'balance': balance}
        for user_id, balance in balances.items()
    ]
