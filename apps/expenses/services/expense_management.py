"""
Expense management service.

Expenses always belong to the room's open round. Once the round is
cleared its expenses are frozen.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.expenses.models import Expense
from apps.rooms.models import RoomMembership
from apps.rooms.services import require_room_membership
from apps.rounds.models import Round
from apps.rounds.services import (
    RoundClosedError,
    RoundNotFoundError,
    ensure_open_round,
)

from .exceptions import (
    ExpenseNotFoundError,
    NotExpenseCreatorError,
    InvalidExpenseError,
    InvalidPayerError,
)

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')

# Expense.amount is max_digits=12, decimal_places=2
MAX_AMOUNT = Decimal('10000000000')


def _clean_amount(amount) -> Decimal:
    try:
        amount = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise InvalidExpenseError("Amount must be a number")

    if not amount.is_finite() or amount <= 0:
        raise InvalidExpenseError("Amount must be greater than zero")
    if amount >= MAX_AMOUNT:
        raise InvalidExpenseError("Amount is too large")
    if amount != amount.quantize(CENT):
        raise InvalidExpenseError("Amount cannot have more than 2 decimal places")
    return amount.quantize(CENT)


def _clean_title(title: str) -> str:
    title = (title or '').strip()
    if not title:
        raise InvalidExpenseError("Title is required")
    return title


def _require_payer(room_id: UUID, payer_id: UUID) -> None:
    if not RoomMembership.objects.filter(room_id=room_id, user_id=payer_id).exists():
        raise InvalidPayerError("Payer must be a member of this room")


def _lock_open_round(room_id: UUID) -> Round:
    open_round = ensure_open_round(room_id=room_id)
    locked = Round.objects.select_for_update().get(id=open_round.id)
    if not locked.is_open:
        # Cleared while we waited for the lock; its successor is open now
        return ensure_open_round(room_id=room_id)
    return locked


def _get_editable_expense(expense_id: UUID, user: User) -> Expense:
    try:
        round_id = Expense.objects.values_list('round_id', flat=True).get(id=expense_id)
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")

    expense_round = Round.objects.select_for_update().get(id=round_id)

    try:
        expense = Expense.objects.select_for_update().get(id=expense_id)
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")

    require_room_membership(user=user, room_id=expense.room_id)

    if expense.created_by_id != user.id:
        raise NotExpenseCreatorError("Only the creator can change this expense")

    if not expense_round.is_open:
        raise RoundClosedError("Cannot change expenses in a cleared round")

    return expense


@transaction.atomic
def create_expense(
    *,
    room_id: UUID,
    created_by: User,
    title: str,
    amount,
    payer_id: Optional[UUID] = None,
    notes: str = ''
) -> Expense:
    """
    Log an expense in the room's open round.

    Args:
        room_id: UUID of the room
        created_by: Member logging the expense
        title: Short description (required)
        amount: Positive amount
        payer_id: Member who paid (defaults to created_by)
        notes: Optional free text

    Returns:
        Created Expense instance

    Raises:
        RoomNotFoundError: If room doesn't exist
        NotMemberError: If created_by is not a member
        InvalidExpenseError: If amount <= 0 or title is blank
        InvalidPayerError: If payer is not a member
    """
    require_room_membership(user=created_by, room_id=room_id)

    amount = _clean_amount(amount)
    title = _clean_title(title)

    if payer_id is None:
        payer_id = created_by.id
    else:
        _require_payer(room_id, payer_id)

    open_round = _lock_open_round(room_id)

    expense = Expense.objects.create(
        room_id=room_id,
        round=open_round,
        payer_id=payer_id,
        created_by=created_by,
        amount=amount,
        title=title,
        notes=notes or '',
    )

    logger.info(
        "Expense %s (%s) added to round %s by user %s",
        expense.id, amount, open_round.id, created_by.id,
    )
    return expense


@transaction.atomic
def update_expense(
    *,
    expense_id: UUID,
    user: User,
    title: Optional[str] = None,
    amount=None,
    payer_id: Optional[UUID] = None,
    notes: Optional[str] = None
) -> Expense:
    """
    Edit an expense. Only fields passed as non-None are changed.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        NotMemberError: If user is not a member of the room
        NotExpenseCreatorError: If user did not create the expense
        RoundClosedError: If the expense's round is cleared
        InvalidExpenseError: If amount <= 0 or title is blank
        InvalidPayerError: If payer is not a member
    """
    expense = _get_editable_expense(expense_id, user)

    if title is not None:
        expense.title = _clean_title(title)
    if amount is not None:
        expense.amount = _clean_amount(amount)
    if payer_id is not None:
        _require_payer(expense.room_id, payer_id)
        expense.payer_id = payer_id
    if notes is not None:
        expense.notes = notes

    expense.save()
    return expense


@transaction.atomic
def delete_expense(*, expense_id: UUID, user: User) -> None:
    """
    Delete an expense.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        NotMemberError: If user is not a member of the room
        NotExpenseCreatorError: If user did not create the expense
        RoundClosedError: If the expense's round is cleared
    """
    expense = _get_editable_expense(expense_id, user)
    expense.delete()

    logger.info("Expense %s deleted by user %s", expense_id, user.id)


def get_expense_for_member(*, expense_id: UUID, user: User) -> Expense:
    """
    Get a single expense, visible to members of its room only.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        NotMemberError: If user is not a member of the room
    """
    try:
        expense = (
            Expense.objects
            .select_related('payer', 'created_by', 'round')
            .get(id=expense_id)
        )
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")

    require_room_membership(user=user, room_id=expense.room_id)
    return expense


def list_round_expenses(
    *,
    room_id: UUID,
    user: User,
    round_id: Optional[UUID] = None
) -> QuerySet[Expense]:
    """
    Expenses of a round, newest first (the open round by default).

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
        Expense.objects
        .filter(room_id=room_id, round_id=round_id)
        .select_related('payer', 'created_by')
        .order_by('-created_at')
    )
