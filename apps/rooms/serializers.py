from rest_framework import serializers
from .models import Room, RoomMembership, RoomRole
from apps.accounts.serializers import RoommateSerializer
from apps.rounds.models import RoundStatus


class RoomMemberSerializer(serializers.ModelSerializer):
    """Detailed member information."""
    
    user = RoommateSerializer(read_only=True)
    
    class Meta:
        model = RoomMembership
        fields = ['id', 'user', 'role', 'joined_at']
        read_only_fields = fields


class RoomSerializer(serializers.ModelSerializer):
    """Main serializer for rooms."""
    
    created_by = RoommateSerializer(read_only=True)
    members = RoomMemberSerializer(source='memberships', many=True, read_only=True)
    member_count = serializers.SerializerMethodField()
    user_role = serializers.SerializerMethodField()
    current_round = serializers.SerializerMethodField()
    
    class Meta:
        model = Room
        fields = [
            'id',
            'name',
            'invite_code',
            'created_by',
            'members',
            'member_count',
            'user_role',
            'current_round',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
    
    def get_member_count(self, obj):
        return obj.memberships.count()
    
    def get_user_role(self, obj):
        """Get current user's role in the room."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None
    
    def get_current_round(self, obj):
        open_round = obj.rounds.filter(status=RoundStatus.OPEN).first()
        if open_round is None:
            return None
        return {
            'id': str(open_round.id),
            'status': open_round.status,
            'created_at': open_round.created_at,
        }


class RoomListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""
    
    member_count = serializers.SerializerMethodField()
    user_role = serializers.SerializerMethodField()
    
    class Meta:
        model = Room
        fields = [
            'id',
            'name',
            'member_count',
            'user_role',
            'created_at',
        ]
        read_only_fields = fields
    
    def get_member_count(self, obj):
        return obj.memberships.count()
    
    def get_user_role(self, obj):
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None


class RoomCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating rooms."""
    
    class Meta:
        model = Room
        fields = ['name']


class JoinRoomSerializer(serializers.Serializer):
    """Serializer for joining a room with invite code."""
    
    invite_code = serializers.CharField(max_length=16, required=True)


class UpdateMemberRoleSerializer(serializers.Serializer):
    """Serializer for updating member role."""
    
    user_id = serializers.UUIDField(required=True)
    role = serializers.ChoiceField(choices=RoomRole.choices, required=True)
