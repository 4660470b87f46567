from rest_framework import serializers
from .models import Round
from apps.settlements.serializers import SettlementSerializer


class RoundFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for round endpoints.

    Query Parameters:
        room (UUID): Room ID (required)
    """

    room = serializers.UUIDField(required=True)


class StartRoundSerializer(serializers.Serializer):
    """Input for starting a round by hand."""

    room = serializers.UUIDField(required=True)


class RoundSerializer(serializers.ModelSerializer):
    """Basic round information."""
    
    class Meta:
        model = Round
        fields = ['id', 'room', 'status', 'created_at', 'cleared_at']
        read_only_fields = fields


class RoundHistorySerializer(serializers.ModelSerializer):
    """Round with expense totals and its settlements."""
    
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    expense_count = serializers.IntegerField(read_only=True)
    settlements = SettlementSerializer(many=True, read_only=True)
    
    class Meta:
        model = Round
        fields = [
            'id',
            'room',
            'status',
            'created_at',
            'cleared_at',
            'total_amount',
            'expense_count',
            'settlements',
        ]
        read_only_fields = fields
