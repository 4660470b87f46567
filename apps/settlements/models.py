from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class SettlementStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    CONFIRMED = 'confirmed', 'Confirmed'


class Settlement(models.Model):
    """Directed payment obligation between two members for one round."""
    
    # The debtor marks PAID, the creditor marks CONFIRMED
    ALLOWED_TRANSITIONS = {
        SettlementStatus.PENDING: {SettlementStatus.PAID},
        SettlementStatus.PAID: {SettlementStatus.CONFIRMED},
        SettlementStatus.CONFIRMED: set(),
    }
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(
        'rooms.Room',
        on_delete=models.CASCADE,
        related_name='settlements'
    )
    round = models.ForeignKey(
        'rounds.Round',
        on_delete=models.CASCADE,
        related_name='settlements'
    )
    
    # Debtor pays creditor
    from_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='settlements_owed'
    )
    to_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='settlements_due'
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.02'))]
    )
    status = models.CharField(
        max_length=20,
        choices=SettlementStatus.choices,
        default=SettlementStatus.PENDING
    )
    
    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    
    class Meta:
        db_table = 'settlements'
        indexes = [
            models.Index(fields=['round', 'status'], name='settle_round_status_idx'),
            models.Index(fields=['from_user', 'status'], name='settle_from_status_idx'),
            models.Index(fields=['to_user', 'status'], name='settle_to_status_idx'),
        ]
        # Anything at or below the 0.01 tolerance counts as settled
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=Decimal('0.01')),
                name='settle_amount_above_tolerance',
            ),
        ]
        ordering = ['created_at', 'id']
    
    def __str__(self):
        return f"{self.from_user} -> {self.to_user}: {self.amount} ({self.status})"
    
    def can_transition_to(self, new_status):
        return new_status in self.ALLOWED_TRANSITIONS[self.status]
