from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    SettlementSerializer,
    SettlementFilterSerializer,
    RoomQuerySerializer,
    GenerateSettlementsSerializer,
    SettlementStatusUpdateSerializer,
    MemberBalanceSerializer,
)

from apps.rooms.services import (
    RoomNotFoundError,
    NotMemberError,
    InsufficientPermissionsError,
)
from apps.rounds.services import (
    RoundNotFoundError,
    NoOpenRoundError,
    RoundClosedError,
)
from apps.settlements.services import (
    generate_settlements,
    advance_settlement_status,
    list_round_settlements,
    get_room_balances,
    # Exceptions
    SettlementNotFoundError,
    InvalidStateTransitionError,
    NoParticipantsError,
)


class SettlementViewSet(viewsets.ViewSet):
    """
    ViewSet for settlements.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Settlements of the room's open round (or ?round=)
    partial_update: Advance a settlement to paid / confirmed
    generate: Recompute the open round's settlements (admin only)
    balances: Current balance of every member
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-f-]{36}'

    @extend_schema(
        parameters=[
            OpenApiParameter('room', str, required=True, description='Room ID'),
            OpenApiParameter('round', str, required=False, description='Round ID (defaults to open round)'),
        ],
        responses={200: SettlementSerializer(many=True)},
    )
    def list(self, request):
        filter_serializer = SettlementFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        try:
            settlements = list_round_settlements(
                room_id=params['room'],
                user=request.user,
                round_id=params.get('round'),
            )
        except (RoomNotFoundError, RoundNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(SettlementSerializer(settlements, many=True).data)

    @extend_schema(request=SettlementStatusUpdateSerializer, responses={200: SettlementSerializer})
    def partial_update(self, request, pk=None):
        serializer = SettlementStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            settlement = advance_settlement_status(
                settlement_id=pk,
                user=request.user,
                new_status=serializer.validated_data['status'],
            )
        except SettlementNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (NotMemberError, InsufficientPermissionsError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (RoundClosedError, InvalidStateTransitionError) as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(SettlementSerializer(settlement).data)

    @extend_schema(request=GenerateSettlementsSerializer, responses={201: SettlementSerializer(many=True)})
    @action(detail=False, methods=['post'])
    def generate(self, request):
        """Generate settlements for the room's open round (admin only)."""
        serializer = GenerateSettlementsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            settlements = generate_settlements(
                room_id=serializer.validated_data['room'],
                user=request.user,
            )
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (NotMemberError, InsufficientPermissionsError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NoOpenRoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except NoParticipantsError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            SettlementSerializer(settlements, many=True).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(
        parameters=[OpenApiParameter('room', str, required=True, description='Room ID')],
        responses={200: MemberBalanceSerializer(many=True)},
    )
    @action(detail=False, methods=['get'])
    def balances(self, request):
        """Get every member's balance in the open round."""
        filter_serializer = RoomQuerySerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        try:
            balances = get_room_balances(
                room_id=filter_serializer.validated_data['room'],
                user=request.user,
            )
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(MemberBalanceSerializer(balances, many=True).data)
