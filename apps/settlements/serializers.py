from rest_framework import serializers
from .models import Settlement, SettlementStatus
from apps.accounts.serializers import RoommateSerializer


# =============================================================================
# INPUT SERIALIZERS (for request validation)
# =============================================================================

class SettlementFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for settlement listing.

    Query Parameters:
        room (UUID): Room ID (required)
        round (UUID): Round ID, defaults to the open round
    """

    room = serializers.UUIDField(required=True)
    round = serializers.UUIDField(required=False)


class RoomQuerySerializer(serializers.Serializer):
    """Validate the ``room`` query parameter."""

    room = serializers.UUIDField(required=True)


class GenerateSettlementsSerializer(serializers.Serializer):
    """Input for generating settlements."""

    room = serializers.UUIDField(required=True)


class SettlementStatusUpdateSerializer(serializers.Serializer):
    """
    Input for advancing a settlement.

    Only the two forward steps can be requested; whether the step is
    allowed from the current status is decided by the service.
    """

    status = serializers.ChoiceField(
        choices=[SettlementStatus.PAID, SettlementStatus.CONFIRMED],
        required=True
    )


# =============================================================================
# OUTPUT SERIALIZERS
# =============================================================================

class SettlementSerializer(serializers.ModelSerializer):
    """Settlement with both parties expanded."""
    
    from_user = RoommateSerializer(read_only=True)
    to_user = RoommateSerializer(read_only=True)
    
    class Meta:
        model = Settlement
        fields = [
            'id',
            'room',
            'round',
            'from_user',
            'to_user',
            'amount',
            'status',
            'created_at',
            'updated_at',
            'paid_at',
            'confirmed_at',
        ]
        read_only_fields = fields


class MemberBalanceSerializer(serializers.Serializer):
    """Balance of one member in the open round."""
    
    user = RoommateSerializer(read_only=True)
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
