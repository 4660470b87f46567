# ==========================================
# apps/rooms/admin.py
# ==========================================

from django.contrib import admin
from apps.rooms.models import Room, RoomMembership


class RoomMembershipInline(admin.TabularInline):
    """Inline admin for room memberships."""
    model = RoomMembership
    extra = 0
    fields = ['user', 'role', 'joined_at']
    readonly_fields = ['joined_at']


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    """Admin interface for Rooms."""
    
    list_display = [
        'name',
        'created_by',
        'member_count',
        'invite_code',
        'created_at'
    ]
    list_filter = ['created_at']
    search_fields = ['name', 'created_by__email', 'invite_code']
    readonly_fields = ['invite_code', 'created_at', 'updated_at']
    inlines = [RoomMembershipInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    
    def member_count(self, obj):
        """Show number of members."""
        return obj.memberships.count()
    member_count.short_description = 'Members'


@admin.register(RoomMembership)
class RoomMembershipAdmin(admin.ModelAdmin):
    """Admin interface for Room Memberships."""
    
    list_display = ['user', 'room', 'role', 'joined_at']
    list_filter = ['role', 'joined_at']
    search_fields = ['user__email', 'room__name']
    readonly_fields = ['joined_at']
    date_hierarchy = 'joined_at'
    ordering = ['-joined_at']
    
    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'room')
