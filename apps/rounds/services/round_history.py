"""Round history queries."""

from decimal import Decimal
from uuid import UUID

from django.db.models import Count, DecimalField, Prefetch, QuerySet, Sum, Value
from django.db.models.functions import Coalesce

from apps.accounts.models import User
from apps.rooms.services import require_room_membership
from apps.rounds.models import Round
from apps.settlements.models import Settlement

from .exceptions import RoundNotFoundError


def _with_totals(queryset: QuerySet[Round]) -> QuerySet[Round]:
    return queryset.annotate(
        total_amount=Coalesce(
            Sum('expenses__amount'),
            Value(Decimal('0.00')),
            output_field=DecimalField(max_digits=12, decimal_places=2),
        ),
        expense_count=Count('expenses'),
    ).prefetch_related(
        Prefetch(
            'settlements',
            queryset=Settlement.objects.select_related('from_user', 'to_user'),
        )
    )


def list_room_rounds(*, room_id: UUID, user: User) -> QuerySet[Round]:
    """
    All rounds of a room, newest first, with expense totals.

    Raises:
        RoomNotFoundError: If room doesn't exist
        NotMemberError: If user is not a member
    """
    require_room_membership(user=user, room_id=room_id)

    return _with_totals(
        Round.objects.filter(room_id=room_id)
    ).order_by('-created_at')


def get_round_for_member(*, round_id: UUID, user: User) -> Round:
    """
    A single round with totals, visible to members of its room only.

    Raises:
        RoundNotFoundError: If round doesn't exist
        NotMemberError: If user is not a member of the round's room
    """
    try:
        target_round = _with_totals(Round.objects.filter(id=round_id)).get()
    except Round.DoesNotExist:
        raise RoundNotFoundError(f"Round with ID {round_id} not found")

    require_room_membership(user=user, room_id=target_round.room_id)
    return target_round
