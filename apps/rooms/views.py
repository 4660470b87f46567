from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination

from .models import Room
from .serializers import (
    RoomSerializer,
    RoomCreateSerializer,
    RoomListSerializer,
    RoomMemberSerializer,
    JoinRoomSerializer,
    UpdateMemberRoleSerializer,
)
from .permissions import IsRoomAdmin

from apps.rooms.services import (
    create_room,
    join_room,
    get_room_members,
    update_member_role,
    # Exceptions
    InvalidInviteCodeError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
    InvalidRoleError,
    LastAdminError,
)


class RoomPagination(PageNumberPagination):
    """Custom pagination for rooms."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class RoomViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for Room operations.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get all rooms the user is a member of
    create: Create a new room (creator becomes admin, first round opens)
    retrieve: Get a specific room with members and current round
    """

    serializer_class = RoomSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = RoomPagination

    def get_queryset(self):
        """Return only rooms where user is a member."""
        return Room.objects.filter(
            memberships__user=self.request.user
        ).select_related('created_by').prefetch_related('memberships__user').distinct()

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return RoomListSerializer
        elif self.action == 'create':
            return RoomCreateSerializer
        return RoomSerializer

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action == 'update_member_role':
            return [IsAuthenticated(), IsRoomAdmin()]
        return [IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        """Create a new room."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        room = create_room(
            name=serializer.validated_data['name'],
            creator=request.user,
        )

        output_serializer = RoomSerializer(room, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        """Get all members of the room."""
        room = self.get_object()
        memberships = get_room_members(room_id=room.id)
        serializer = RoomMemberSerializer(memberships, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['post'])
    def join(self, request):
        """Join a room using its invite code."""
        serializer = JoinRoomSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = join_room(
                invite_code=serializer.validated_data['invite_code'],
                user=request.user,
            )
        except (InvalidInviteCodeError, AlreadyMemberError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        output_serializer = RoomSerializer(membership.room, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def update_member_role(self, request, pk=None):
        """Update member's role (admin only)."""
        room = self.get_object()
        serializer = UpdateMemberRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = update_member_role(
                room_id=room.id,
                user_id=serializer.validated_data['user_id'],
                new_role=serializer.validated_data['role'],
                updated_by=request.user
            )
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (NotMemberError, InvalidRoleError, LastAdminError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        output_serializer = RoomMemberSerializer(membership)
        return Response(output_serializer.data)
