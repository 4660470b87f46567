from decimal import Decimal
from rest_framework import serializers
from .models import Expense
from apps.accounts.serializers import RoommateSerializer


# =============================================================================
# INPUT SERIALIZERS (for request validation)
# =============================================================================

class ExpenseFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for expense listing.

    Query Parameters:
        room (UUID): Room ID (required)
        round (UUID): Round ID, defaults to the open round
    """

    room = serializers.UUIDField(required=True)
    round = serializers.UUIDField(required=False)


class ExpenseCreateSerializer(serializers.Serializer):
    """Input for logging an expense."""

    room = serializers.UUIDField(required=True)
    title = serializers.CharField(max_length=200, required=True)
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01'),
        required=True
    )
    payer = serializers.UUIDField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class ExpenseUpdateSerializer(serializers.Serializer):
    """Input for editing an expense; every field is optional."""

    title = serializers.CharField(max_length=200, required=False)
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01'),
        required=False
    )
    payer = serializers.UUIDField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


# =============================================================================
# OUTPUT SERIALIZERS
# =============================================================================

class ExpenseSerializer(serializers.ModelSerializer):
    """Expense with payer and creator expanded."""
    
    payer = RoommateSerializer(read_only=True)
    created_by = RoommateSerializer(read_only=True)
    
    class Meta:
        model = Expense
        fields = [
            'id',
            'room',
            'round',
            'title',
            'amount',
            'notes',
            'payer',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
