from django.db import models
from django.db.models import Q
from django.utils import timezone
import uuid


class RoundStatus(models.TextChoices):
    OPEN = 'open', 'Open'
    CLEARED = 'cleared', 'Cleared'


class Round(models.Model):
    """Settlement epoch of a room. Exactly one round per room is open."""
    
    # CLEARED is terminal
    ALLOWED_TRANSITIONS = {
        RoundStatus.OPEN: {RoundStatus.CLEARED},
        RoundStatus.CLEARED: set(),
    }
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(
        'rooms.Room',
        on_delete=models.CASCADE,
        related_name='rounds'
    )
    status = models.CharField(
        max_length=20,
        choices=RoundStatus.choices,
        default=RoundStatus.OPEN
    )
    created_at = models.DateTimeField(auto_now_add=True)
    cleared_at = models.DateTimeField(null=True, blank=True)
    
    class Meta:
        db_table = 'rounds'
        constraints = [
            models.UniqueConstraint(
                fields=['room'],
                condition=Q(status='open'),
                name='unique_open_round_per_room',
            ),
        ]
        indexes = [
            models.Index(fields=['room', 'status'], name='rounds_room_status_idx'),
            models.Index(fields=['room', 'created_at'], name='rounds_room_created_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return f"{self.room.name} round ({self.status})"
    
    @property
    def is_open(self):
        return self.status == RoundStatus.OPEN
    
    def can_transition_to(self, new_status):
        return new_status in self.ALLOWED_TRANSITIONS[self.status]
    
    def mark_cleared(self):
        """Close the round. Callers hold the round's row lock."""
        self.status = RoundStatus.CLEARED
        self.cleared_at = timezone.now()
        self.save(update_fields=['status', 'cleared_at'])
