import pytest
from django.urls import reverse
from rest_framework import status

from apps.accounts.models import User


@pytest.mark.django_db
class TestRegister:
    """Tests for POST /api/auth/register/"""

    def test_register_signs_in(self, api_client):
        response = api_client.post(reverse('accounts:register'), {
            'email': 'erin@example.com',
            'password': 'SecurePass123!',
            'display_name': 'Erin',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert set(response.data['tokens']) == {'access', 'refresh'}
        assert response.data['user']['display_name'] == 'Erin'
        assert User.objects.filter(email='erin@example.com').exists()

    def test_display_name_optional(self, api_client):
        response = api_client.post(reverse('accounts:register'), {
            'email': 'gina@example.com',
            'password': 'SecurePass123!',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['display_name'] == 'gina'

    def test_taken_email(self, api_client, room_admin):
        response = api_client.post(reverse('accounts:register'), {
            'email': 'Alice@example.com',
            'password': 'SecurePass123!',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_weak_password(self, api_client):
        response = api_client.post(reverse('accounts:register'), {
            'email': 'weak@example.com',
            'password': '123',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data

    def test_invalid_email(self, api_client):
        response = api_client.post(reverse('accounts:register'), {
            'email': 'not-an-email',
            'password': 'SecurePass123!',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login(self, api_client, room_admin):
        response = api_client.post(reverse('accounts:login'), {
            'email': 'alice@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['id'] == str(room_admin.id)

    def test_wrong_password(self, api_client, room_admin):
        response = api_client.post(reverse('accounts:login'), {
            'email': room_admin.email,
            'password': 'WrongPassword123!',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_inactive(self, api_client, room_admin):
        room_admin.is_active = False
        room_admin.save(update_fields=['is_active'])

        response = api_client.post(reverse('accounts:login'), {
            'email': room_admin.email,
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_missing_password(self, api_client):
        response = api_client.post(reverse('accounts:login'), {'email': 'alice@example.com'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data

    def test_tokens_work(self, api_client, room_admin):
        login = api_client.post(reverse('accounts:login'), {
            'email': room_admin.email,
            'password': 'TestPass123!',
        })

        refreshed = api_client.post(reverse('token_refresh'), {'refresh': login.data['tokens']['refresh']})
        assert refreshed.status_code == status.HTTP_200_OK

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['tokens']['access']}")
        assert api_client.get(reverse('accounts:me')).status_code == status.HTTP_200_OK


@pytest.mark.django_db
class TestMe:
    """Tests for GET/PATCH /api/auth/me/"""

    def test_get(self, admin_client, room_admin):
        response = admin_client.get(reverse('accounts:me'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == room_admin.email
        assert response.data['display_name'] == 'Alice'

    def test_rename_shows_in_room_members(self, admin_client, room_with_members):
        response = admin_client.patch(reverse('accounts:me'), {'display_name': 'Ally'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['display_name'] == 'Ally'

        members = admin_client.get(reverse('rooms:room-members', kwargs={'pk': room_with_members.id}))
        assert members.data[0]['user']['display_name'] == 'Ally'

    def test_blank_name_rejected(self, admin_client):
        response = admin_client.patch(reverse('accounts:me'), {'display_name': '   '}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unauthenticated(self, api_client):
        assert api_client.get(reverse('accounts:me')).status_code == status.HTTP_401_UNAUTHORIZED
