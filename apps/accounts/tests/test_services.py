"""
Service layer tests for accounts app.
"""

import pytest
from rest_framework_simplejwt.tokens import AccessToken

from apps.accounts.models import User
from apps.accounts.services import (
    register_user,
    authenticate_user,
    issue_tokens,
    update_profile,
    EmailTakenError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidProfileError,
)


@pytest.mark.django_db
class TestRegisterUser:

    def test_hashes_password(self):
        user = register_user(email='erin@example.com', password='SecurePass123!', display_name='Erin')

        assert user.check_password('SecurePass123!')
        assert user.password != 'SecurePass123!'
        assert user.display_name == 'Erin'

    def test_email_stored_lower_case(self):
        user = register_user(email='  Erin@Example.COM ', password='SecurePass123!')

        assert user.email == 'erin@example.com'

    def test_blank_display_name_falls_back_to_email(self):
        user = register_user(email='frank.ocean@example.com', password='SecurePass123!', display_name='   ')

        assert user.display_name == 'frank.ocean'

    def test_duplicate_email_any_case(self, room_admin):
        with pytest.raises(EmailTakenError):
            register_user(email='ALICE@example.com', password='SecurePass123!')

        assert User.objects.filter(email='alice@example.com').count() == 1


@pytest.mark.django_db
class TestAuthenticateUser:

    def test_success_stamps_last_login(self, room_admin):
        user = authenticate_user(email='alice@example.com', password='TestPass123!')

        assert user.id == room_admin.id
        room_admin.refresh_from_db()
        assert room_admin.last_login is not None

    def test_email_case_ignored(self, room_admin):
        assert authenticate_user(email='Alice@Example.com', password='TestPass123!').id == room_admin.id

    def test_wrong_password(self, room_admin):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email=room_admin.email, password='nope')

    def test_unknown_email(self):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email='ghost@example.com', password='TestPass123!')

    def test_inactive(self, room_admin):
        room_admin.is_active = False
        room_admin.save(update_fields=['is_active'])

        with pytest.raises(InactiveAccountError):
            authenticate_user(email=room_admin.email, password='TestPass123!')


@pytest.mark.django_db
class TestIssueTokens:

    def test_access_token_names_the_user(self, room_admin):
        tokens = issue_tokens(room_admin)

        access = AccessToken(tokens['access'])
        assert access['user_id'] == str(room_admin.id)
        assert access['email'] == 'alice@example.com'
        assert access['display_name'] == 'Alice'


@pytest.mark.django_db
class TestUpdateProfile:

    def test_rename(self, room_admin):
        update_profile(user=room_admin, display_name='  Ally ')

        room_admin.refresh_from_db()
        assert room_admin.display_name == 'Ally'

    def test_untouched_fields_kept(self, room_admin):
        update_profile(user=room_admin, avatar_url='https://example.com/a.png')

        room_admin.refresh_from_db()
        assert room_admin.display_name == 'Alice'
        assert room_admin.avatar_url == 'https://example.com/a.png'

    def test_clear_avatar(self, room_admin):
        update_profile(user=room_admin, avatar_url='https://example.com/a.png')
        update_profile(user=room_admin, avatar_url='')

        room_admin.refresh_from_db()
        assert room_admin.avatar_url == ''

    def test_blank_name_rejected(self, room_admin):
        with pytest.raises(InvalidProfileError):
            update_profile(user=room_admin, display_name='   ')

    def test_long_name_rejected(self, room_admin):
        with pytest.raises(InvalidProfileError):
            update_profile(user=room_admin, display_name='x' * 61)

    def test_bad_avatar_rejected(self, room_admin):
        with pytest.raises(InvalidProfileError):
            update_profile(user=room_admin, avatar_url='not a url')
