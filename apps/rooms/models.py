# ==========================================
# apps/rooms/models.py
# ==========================================

from django.db import models
import uuid
import secrets


class RoomRole(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    MEMBER = 'member', 'Member'


def generate_invite_code():
    return secrets.token_urlsafe(12)[:16]


class Room(models.Model):
    """A group of roommates sharing expenses."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    invite_code = models.CharField(max_length=16, unique=True, db_index=True, editable=False)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_rooms'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'rooms'
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='rooms_creator_created_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return self.name
    
    def save(self, *args, **kwargs):
        if not self.invite_code:
            self.invite_code = generate_invite_code()
        super().save(*args, **kwargs)
    
    def has_member(self, user):
        return self.memberships.filter(user=user).exists()
    
    def get_user_role(self, user):
        try:
            return self.memberships.get(user=user).role
        except RoomMembership.DoesNotExist:
            return None
    
    def is_admin(self, user):
        return self.get_user_role(user) == RoomRole.ADMIN


class RoomMembership(models.Model):
    """User membership in a room with role."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='room_memberships')
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=20, choices=RoomRole.choices, default=RoomRole.MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'room_memberships'
        unique_together = [['user', 'room']]
        indexes = [
            models.Index(fields=['room', 'role'], name='room_memb_room_role_idx'),
            models.Index(fields=['user', 'joined_at'], name='room_memb_user_joined_idx'),
        ]
        ordering = ['joined_at']
    
    def __str__(self):
        return f"{self.user.display_name} in {self.room.name} ({self.role})"
    
    @property
    def is_admin(self):
        return self.role == RoomRole.ADMIN
