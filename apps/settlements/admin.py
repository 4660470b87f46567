from django.contrib import admin
from apps.settlements.models import Settlement


@admin.register(Settlement)
class SettlementAdmin(admin.ModelAdmin):
    """Admin interface for Settlements."""
    
    list_display = ['from_user', 'to_user', 'amount', 'status', 'room', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['from_user__email', 'to_user__email', 'room__name']
    readonly_fields = ['created_at', 'updated_at', 'paid_at', 'confirmed_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('from_user', 'to_user', 'room')
