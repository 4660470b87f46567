from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    RoundSerializer,
    RoundHistorySerializer,
    RoundFilterSerializer,
    StartRoundSerializer,
)

from apps.rooms.services import (
    RoomNotFoundError,
    NotMemberError,
    InsufficientPermissionsError,
    require_room_membership,
)
from apps.rounds.services import (
    ensure_open_round,
    start_round,
    list_room_rounds,
    get_round_for_member,
    # Exceptions
    RoundNotFoundError,
    OpenRoundExistsError,
)


ROOM_PARAMETER = OpenApiParameter('room', str, required=True, description='Room ID')


class RoundViewSet(viewsets.ViewSet):
    """
    ViewSet for rounds.

    list: Round history of a room, newest first, with totals
    retrieve: A single round with totals and settlements
    create: Start a new round by hand (admin only)
    current: The room's open round (opened if missing)
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-f-]{36}'

    @extend_schema(parameters=[ROOM_PARAMETER], responses={200: RoundHistorySerializer(many=True)})
    def list(self, request):
        filter_serializer = RoundFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        try:
            rounds = list_room_rounds(
                room_id=filter_serializer.validated_data['room'],
                user=request.user,
            )
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(RoundHistorySerializer(rounds, many=True).data)

    @extend_schema(responses={200: RoundHistorySerializer})
    def retrieve(self, request, pk=None):
        try:
            target_round = get_round_for_member(round_id=pk, user=request.user)
        except RoundNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(RoundHistorySerializer(target_round).data)

    @extend_schema(request=StartRoundSerializer, responses={201: RoundSerializer})
    def create(self, request):
        serializer = StartRoundSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            new_round = start_round(
                room_id=serializer.validated_data['room'],
                user=request.user,
            )
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (NotMemberError, InsufficientPermissionsError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except OpenRoundExistsError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(RoundSerializer(new_round).data, status=status.HTTP_201_CREATED)

    @extend_schema(parameters=[ROOM_PARAMETER], responses={200: RoundSerializer})
    @action(detail=False, methods=['get'])
    def current(self, request):
        """Get the room's open round."""
        filter_serializer = RoundFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        room_id = filter_serializer.validated_data['room']

        try:
            require_room_membership(user=request.user, room_id=room_id)
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        open_round = ensure_open_round(room_id=room_id)
        return Response(RoundSerializer(open_round).data)
