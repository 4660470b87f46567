import pytest
from django.urls import reverse
from rest_framework import status
from apps.rounds.models import Round, RoundStatus


@pytest.mark.django_db
class TestRoundList:
    """Tests for GET /api/rounds/?room="""

    def test_list_rounds_with_totals(self, admin_client, room_with_members, room_admin, add_expense):
        add_expense(room_with_members, room_admin, '99.99')

        url = reverse('rounds:round-list')
        response = admin_client.get(url, {'room': str(room_with_members.id)})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['total_amount'] == '99.99'
        assert response.data[0]['expense_count'] == 1
        assert response.data[0]['settlements'] == []

    def test_list_rounds_requires_room(self, admin_client):
        url = reverse('rounds:round-list')
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_rounds_outsider(self, outsider_client, room):
        url = reverse('rounds:round-list')
        response = outsider_client.get(url, {'room': str(room.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestCurrentRound:
    """Tests for GET /api/rounds/current/?room="""

    def test_current_round(self, member_client, room_with_members):
        url = reverse('rounds:round-current')
        response = member_client.get(url, {'room': str(room_with_members.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == RoundStatus.OPEN

    def test_current_round_reopens_missing_round(self, admin_client, room, open_round):
        open_round.mark_cleared()

        url = reverse('rounds:round-current')
        response = admin_client.get(url, {'room': str(room.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] != str(open_round.id)
        assert Round.objects.filter(room=room, status=RoundStatus.OPEN).count() == 1


@pytest.mark.django_db
class TestRoundDetail:
    """Tests for GET /api/rounds/{id}/"""

    def test_retrieve_round(self, admin_client, open_round):
        url = reverse('rounds:round-detail', kwargs={'pk': open_round.id})
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(open_round.id)

    def test_retrieve_round_outsider(self, outsider_client, open_round):
        url = reverse('rounds:round-detail', kwargs={'pk': open_round.id})
        response = outsider_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestStartRound:
    """Tests for POST /api/rounds/"""

    def test_start_round_conflicts_with_open_round(self, admin_client, room):
        url = reverse('rounds:round-list')
        response = admin_client.post(url, {'room': str(room.id)})

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_start_round_after_clear(self, admin_client, room, open_round):
        open_round.mark_cleared()

        url = reverse('rounds:round-list')
        response = admin_client.post(url, {'room': str(room.id)})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == RoundStatus.OPEN

    def test_member_cannot_start_round(self, member_client, room_with_members):
        url = reverse('rounds:round-list')
        response = member_client.post(url, {'room': str(room_with_members.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN
