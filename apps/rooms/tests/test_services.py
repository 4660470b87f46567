"""
Service layer unit tests for rooms app.

Tests cover:
- Room creation (admin membership, first round)
- Joining by invite code
- Membership and admin checks used by the other apps
- Role changes and the last-admin rule
- Concurrency protection (race conditions)
"""

import pytest
import threading
from uuid import uuid4
from unittest.mock import patch
from django.db import connection
from django.test import TransactionTestCase

from apps.rooms.models import Room, RoomMembership, RoomRole
from apps.rooms.services import (
    create_room,
    get_room_by_id,
    join_room,
    get_room_members,
    require_room_membership,
    require_admin,
    update_member_role,
)
from apps.rooms.services.exceptions import (
    RoomNotFoundError,
    InvalidInviteCodeError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
    InvalidRoleError,
    LastAdminError,
)
from apps.rounds.models import Round, RoundStatus


# =============================================================================
# Room Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestRoomManagement:
    """Tests for room_management.py service functions."""

    def test_create_room_success(self, room_admin):
        """Creating a room makes the creator admin."""
        room = create_room(name="Flat 4B", creator=room_admin)

        assert room.name == "Flat 4B"
        assert room.created_by == room_admin
        assert len(room.invite_code) == 16

        membership = RoomMembership.objects.get(room=room, user=room_admin)
        assert membership.role == RoomRole.ADMIN

    def test_create_room_opens_first_round(self, room_admin):
        """A new room starts with exactly one open round."""
        room = create_room(name="Flat 4B", creator=room_admin)

        rounds = Round.objects.filter(room=room)
        assert rounds.count() == 1
        assert rounds.get().status == RoundStatus.OPEN

    def test_create_room_generates_unique_invite_code(self, room_admin):
        room1 = create_room(name="Room 1", creator=room_admin)
        room2 = create_room(name="Room 2", creator=room_admin)

        assert room1.invite_code != room2.invite_code

    def test_create_room_retries_on_collision(self, room_admin):
        """Gives up after max_retries identical invite codes."""
        with patch('apps.rooms.services.room_management.generate_invite_code') as mock_code:
            mock_code.return_value = 'samecode12345678'

            create_room(name="Room 1", creator=room_admin)

            with pytest.raises(RuntimeError, match="Failed to generate unique invite code"):
                create_room(name="Room 2", creator=room_admin)

        assert mock_code.call_count == 6
        assert Room.objects.count() == 1

    def test_get_room_by_id_success(self, room):
        retrieved = get_room_by_id(room_id=room.id)

        assert retrieved.id == room.id

    def test_get_room_by_id_not_found(self):
        with pytest.raises(RoomNotFoundError):
            get_room_by_id(room_id=uuid4())


# =============================================================================
# Membership Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestMembershipManagement:
    """Tests for membership_management.py service functions."""

    def test_join_room_success(self, room, member_user):
        membership = join_room(invite_code=room.invite_code, user=member_user)

        assert membership.room == room
        assert membership.role == RoomRole.MEMBER

    def test_join_room_invalid_code(self, room, member_user):
        with pytest.raises(InvalidInviteCodeError):
            join_room(invite_code='doesnotexist0000', user=member_user)

    def test_join_room_already_member(self, room, room_admin):
        with pytest.raises(AlreadyMemberError):
            join_room(invite_code=room.invite_code, user=room_admin)

    def test_get_room_members_in_join_order(self, room_with_members, room_admin, member_user, third_user):
        members = list(get_room_members(room_id=room_with_members.id))

        assert [m.user for m in members] == [room_admin, member_user, third_user]

    def test_get_room_members_room_not_found(self):
        with pytest.raises(RoomNotFoundError):
            get_room_members(room_id=uuid4())

    def test_require_room_membership_member(self, room, room_admin):
        membership = require_room_membership(user=room_admin, room_id=room.id)

        assert membership.user == room_admin

    def test_require_room_membership_not_member(self, room, outsider):
        with pytest.raises(NotMemberError):
            require_room_membership(user=outsider, room_id=room.id)

    def test_require_room_membership_room_not_found(self, outsider):
        with pytest.raises(RoomNotFoundError):
            require_room_membership(user=outsider, room_id=uuid4())

    def test_require_admin(self, room_with_members, room_admin, member_user):
        admin_membership = require_room_membership(user=room_admin, room_id=room_with_members.id)
        member_membership = require_room_membership(user=member_user, room_id=room_with_members.id)

        assert require_admin(admin_membership) == admin_membership
        with pytest.raises(InsufficientPermissionsError):
            require_admin(member_membership)


# =============================================================================
# Role Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestRoleManagement:
    """Tests for role_management.py service functions."""

    def test_promote_member(self, room_with_members, room_admin, member_user):
        membership = update_member_role(
            room_id=room_with_members.id,
            user_id=member_user.id,
            new_role=RoomRole.ADMIN,
            updated_by=room_admin,
        )

        assert membership.role == RoomRole.ADMIN

    def test_member_cannot_change_roles(self, room_with_members, member_user, third_user):
        with pytest.raises(InsufficientPermissionsError):
            update_member_role(
                room_id=room_with_members.id,
                user_id=third_user.id,
                new_role=RoomRole.ADMIN,
                updated_by=member_user,
            )

    def test_invalid_role(self, room_with_members, room_admin, member_user):
        with pytest.raises(InvalidRoleError):
            update_member_role(
                room_id=room_with_members.id,
                user_id=member_user.id,
                new_role='owner',
                updated_by=room_admin,
            )

    def test_target_not_member(self, room, room_admin, outsider):
        with pytest.raises(NotMemberError):
            update_member_role(
                room_id=room.id,
                user_id=outsider.id,
                new_role=RoomRole.ADMIN,
                updated_by=room_admin,
            )

    def test_last_admin_cannot_step_down(self, room, room_admin):
        with pytest.raises(LastAdminError):
            update_member_role(
                room_id=room.id,
                user_id=room_admin.id,
                new_role=RoomRole.MEMBER,
                updated_by=room_admin,
            )

    def test_admin_can_step_down_when_another_admin_exists(self, room_with_members, room_admin, member_user):
        update_member_role(
            room_id=room_with_members.id,
            user_id=member_user.id,
            new_role=RoomRole.ADMIN,
            updated_by=room_admin,
        )

        membership = update_member_role(
            room_id=room_with_members.id,
            user_id=room_admin.id,
            new_role=RoomRole.MEMBER,
            updated_by=room_admin,
        )

        assert membership.role == RoomRole.MEMBER


# =============================================================================
# Concurrency Tests
# =============================================================================

class TestConcurrency(TransactionTestCase):
    """
    Tests for concurrency protection using TransactionTestCase.

    TransactionTestCase is required for testing actual database
    transactions; regular TestCase wraps each test in one transaction.
    """

    def setUp(self):
        from apps.accounts.models import User

        self.admin = User.objects.create_user(
            email='admin@test.com',
            password='TestPass123!',
            display_name='Admin',
        )
        self.room = create_room(name='Test Room', creator=self.admin)

    def test_concurrent_joins_prevented(self):
        """Concurrent joins by the same user create a single membership."""
        from apps.accounts.models import User

        user = User.objects.create_user(
            email='joiner@test.com',
            password='TestPass123!',
        )

        results = []
        errors = []

        def join_in_thread():
            try:
                results.append(join_room(invite_code=self.room.invite_code, user=user))
            except AlreadyMemberError:
                errors.append(True)
            finally:
                connection.close()

        threads = [threading.Thread(target=join_in_thread) for _ in range(5)]

        for thread in threads:
            thread.start()

        for thread in threads:
            thread.join()

        assert len(results) == 1
        assert len(errors) == 4
        assert RoomMembership.objects.filter(room=self.room, user=user).count() == 1
