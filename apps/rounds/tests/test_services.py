"""
Service layer unit tests for rounds app.

Tests cover:
- ensure_open_round idempotency and the one-open-round rule
- Closing a round once every settlement is confirmed
- Manual round start
- Round history totals
"""

import pytest
from decimal import Decimal
from uuid import uuid4
from django.db import IntegrityError, transaction

from apps.rooms.services import (
    RoomNotFoundError,
    NotMemberError,
    InsufficientPermissionsError,
)
from apps.rounds.models import Round, RoundStatus
from apps.rounds.services import (
    ensure_open_round,
    get_open_round,
    close_round_if_all_confirmed,
    start_round,
    list_room_rounds,
    get_round_for_member,
)
from apps.rounds.services.exceptions import (
    RoundNotFoundError,
    NoOpenRoundError,
    OpenRoundExistsError,
)
from apps.settlements.models import Settlement, SettlementStatus


def make_settlement(room, round_, from_user, to_user, amount='10.00', status=SettlementStatus.PENDING):
    return Settlement.objects.create(
        room=room,
        round=round_,
        from_user=from_user,
        to_user=to_user,
        amount=Decimal(amount),
        status=status,
    )


# =============================================================================
# Open Round Tests
# =============================================================================

@pytest.mark.django_db
class TestEnsureOpenRound:
    """Tests for ensure_open_round / get_open_round."""

    def test_returns_existing_open_round(self, room, open_round):
        assert ensure_open_round(room_id=room.id) == open_round
        assert Round.objects.filter(room=room).count() == 1

    def test_creates_round_when_missing(self, room, open_round):
        open_round.mark_cleared()

        new_round = ensure_open_round(room_id=room.id)

        assert new_round.id != open_round.id
        assert new_round.status == RoundStatus.OPEN

    def test_room_not_found(self):
        with pytest.raises(RoomNotFoundError):
            ensure_open_round(room_id=uuid4())

    def test_get_open_round_without_creating(self, room, open_round):
        open_round.mark_cleared()

        with pytest.raises(NoOpenRoundError):
            get_open_round(room_id=room.id)
        assert not Round.objects.filter(room=room, status=RoundStatus.OPEN).exists()

    def test_database_rejects_second_open_round(self, room, open_round):
        """The partial unique constraint allows one open round per room."""
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Round.objects.create(room=room, status=RoundStatus.OPEN)

    def test_cleared_rounds_do_not_conflict(self, room, open_round):
        open_round.mark_cleared()
        ensure_open_round(room_id=room.id).mark_cleared()
        ensure_open_round(room_id=room.id)

        assert Round.objects.filter(room=room, status=RoundStatus.CLEARED).count() == 2
        assert Round.objects.filter(room=room, status=RoundStatus.OPEN).count() == 1


# =============================================================================
# Round Closure Tests
# =============================================================================

@pytest.mark.django_db
class TestCloseRoundIfAllConfirmed:
    """Tests for close_round_if_all_confirmed."""

    def test_closes_when_all_confirmed(self, room_with_members, room_admin, member_user, third_user):
        open_round = Round.objects.get(room=room_with_members, status=RoundStatus.OPEN)
        make_settlement(room_with_members, open_round, member_user, room_admin, status=SettlementStatus.CONFIRMED)
        make_settlement(room_with_members, open_round, third_user, room_admin, status=SettlementStatus.CONFIRMED)

        cleared = close_round_if_all_confirmed(round_id=open_round.id)

        assert cleared.id == open_round.id
        open_round.refresh_from_db()
        assert open_round.status == RoundStatus.CLEARED
        assert open_round.cleared_at is not None

        successor = Round.objects.get(room=room_with_members, status=RoundStatus.OPEN)
        assert successor.id != open_round.id

    def test_noop_when_some_not_confirmed(self, room_with_members, room_admin, member_user, third_user):
        open_round = Round.objects.get(room=room_with_members, status=RoundStatus.OPEN)
        make_settlement(room_with_members, open_round, member_user, room_admin, status=SettlementStatus.CONFIRMED)
        make_settlement(room_with_members, open_round, third_user, room_admin, status=SettlementStatus.PAID)

        assert close_round_if_all_confirmed(round_id=open_round.id) is None

        open_round.refresh_from_db()
        assert open_round.status == RoundStatus.OPEN
        assert open_round.cleared_at is None

    def test_noop_without_settlements(self, room, open_round):
        assert close_round_if_all_confirmed(round_id=open_round.id) is None

        open_round.refresh_from_db()
        assert open_round.is_open

    def test_closes_exactly_once(self, room_with_members, room_admin, member_user):
        open_round = Round.objects.get(room=room_with_members, status=RoundStatus.OPEN)
        make_settlement(room_with_members, open_round, member_user, room_admin, status=SettlementStatus.CONFIRMED)

        assert close_round_if_all_confirmed(round_id=open_round.id) is not None
        open_round.refresh_from_db()
        first_cleared_at = open_round.cleared_at

        assert close_round_if_all_confirmed(round_id=open_round.id) is None

        open_round.refresh_from_db()
        assert open_round.cleared_at == first_cleared_at
        assert Round.objects.filter(room=room_with_members).count() == 2

    def test_round_not_found(self):
        with pytest.raises(RoundNotFoundError):
            close_round_if_all_confirmed(round_id=uuid4())


# =============================================================================
# Manual Start Tests
# =============================================================================

@pytest.mark.django_db
class TestStartRound:
    """Tests for start_round."""

    def test_fails_while_round_open(self, room, room_admin, open_round):
        with pytest.raises(OpenRoundExistsError):
            start_round(room_id=room.id, user=room_admin)

    def test_starts_after_clear(self, room, room_admin, open_round):
        open_round.mark_cleared()

        new_round = start_round(room_id=room.id, user=room_admin)

        assert new_round.status == RoundStatus.OPEN
        assert new_round.id != open_round.id

    def test_member_cannot_start(self, room_with_members, member_user):
        with pytest.raises(InsufficientPermissionsError):
            start_round(room_id=room_with_members.id, user=member_user)

    def test_outsider_cannot_start(self, room, outsider):
        with pytest.raises(NotMemberError):
            start_round(room_id=room.id, user=outsider)


# =============================================================================
# History Tests
# =============================================================================

@pytest.mark.django_db
class TestRoundHistory:
    """Tests for list_room_rounds / get_round_for_member."""

    def test_history_totals(self, room_with_members, room_admin, member_user, add_expense):
        add_expense(room_with_members, room_admin, '30.00')
        add_expense(room_with_members, member_user, '12.50')

        rounds = list(list_room_rounds(room_id=room_with_members.id, user=member_user))

        assert len(rounds) == 1
        assert rounds[0].total_amount == Decimal('42.50')
        assert rounds[0].expense_count == 2

    def test_history_newest_first(self, room, room_admin, open_round):
        open_round.mark_cleared()
        newer = ensure_open_round(room_id=room.id)

        rounds = list(list_room_rounds(room_id=room.id, user=room_admin))

        assert [r.id for r in rounds] == [newer.id, open_round.id]
        assert rounds[0].total_amount == Decimal('0.00')
        assert rounds[0].expense_count == 0

    def test_history_requires_membership(self, room, outsider):
        with pytest.raises(NotMemberError):
            list_room_rounds(room_id=room.id, user=outsider)

    def test_get_round_for_member(self, room, room_admin, open_round, outsider):
        assert get_round_for_member(round_id=open_round.id, user=room_admin).id == open_round.id

        with pytest.raises(NotMemberError):
            get_round_for_member(round_id=open_round.id, user=outsider)

        with pytest.raises(RoundNotFoundError):
            get_round_for_member(round_id=uuid4(), user=room_admin)
