"""
Fixtures shared by the room, round, expense and settlement tests.

Room fixtures go through the services so every room starts with an
admin membership and an open round, as it does in production.
"""

import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.rooms.services import create_room, join_room
from apps.rounds.models import Round, RoundStatus


def client_for(user):
    """Return a new API client authenticated as ``user`` via JWT."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def room_admin(db):
    """Create and return the user who creates the room (admin)."""
    return User.objects.create_user(
        email='alice@example.com',
        password='TestPass123!',
        display_name='Alice',
    )


@pytest.fixture
def member_user(db):
    """Create and return a regular room member."""
    return User.objects.create_user(
        email='bob@example.com',
        password='TestPass123!',
        display_name='Bob',
    )


@pytest.fixture
def third_user(db):
    """Create and return a second regular room member."""
    return User.objects.create_user(
        email='carol@example.com',
        password='TestPass123!',
        display_name='Carol',
    )


@pytest.fixture
def outsider(db):
    """Create and return a user who is not in the room."""
    return User.objects.create_user(
        email='dave@example.com',
        password='TestPass123!',
        display_name='Dave',
    )


@pytest.fixture
def admin_client(room_admin):
    return client_for(room_admin)


@pytest.fixture
def member_client(member_user):
    return client_for(member_user)


@pytest.fixture
def third_client(third_user):
    return client_for(third_user)


@pytest.fixture
def outsider_client(outsider):
    return client_for(outsider)


@pytest.fixture
def room(room_admin):
    """Room with only its admin."""
    return create_room(name='Flat 4B', creator=room_admin)


@pytest.fixture
def room_with_members(room, member_user, third_user):
    """Room with admin (Alice), then Bob and Carol as members, in that join order."""
    join_room(invite_code=room.invite_code, user=member_user)
    join_room(invite_code=room.invite_code, user=third_user)
    return room


@pytest.fixture
def open_round(room):
    return Round.objects.get(room=room, status=RoundStatus.OPEN)


@pytest.fixture
def add_expense():
    """Factory: log an expense through the service."""
    from apps.expenses.services import create_expense

    def _add_expense(room, user, amount, title='Groceries', payer=None, notes=''):
        return create_expense(
            room_id=room.id,
            created_by=user,
            title=title,
            amount=Decimal(str(amount)),
            payer_id=payer.id if payer else None,
            notes=notes,
        )

    return _add_expense
