from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class Expense(models.Model):
    """Shared cost paid by one member, split evenly across the room."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(
        'rooms.Room',
        on_delete=models.CASCADE,
        related_name='expenses'
    )
    round = models.ForeignKey(
        'rounds.Round',
        on_delete=models.CASCADE,
        related_name='expenses'
    )
    
    # Payer gets credited; creator is who may edit it
    payer = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expenses_paid'
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expenses_created'
    )
    
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    title = models.CharField(max_length=200)
    notes = models.TextField(blank=True)
    
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['round', 'created_at'], name='expenses_round_created_idx'),
            models.Index(fields=['room', 'created_at'], name='expenses_room_created_idx'),
            models.Index(fields=['payer'], name='expenses_payer_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return f"{self.title} ({self.amount}) paid by {self.payer}"
