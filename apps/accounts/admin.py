from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['display_name', 'email', 'room_count', 'is_active', 'joined_at', 'last_login']
    list_filter = ['is_active', 'is_staff']
    search_fields = ['email', 'display_name']
    ordering = ['display_name']
    readonly_fields = ['joined_at', 'last_login']

    # BaseUserAdmin assumes a username field
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('display_name', 'avatar_url')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser')}),
        ('Activity', {'fields': ('joined_at', 'last_login')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2'),
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            room_total=Count('room_memberships', distinct=True)
        )

    @admin.display(description='Rooms', ordering='room_total')
    def room_count(self, obj):
        return obj.room_total
