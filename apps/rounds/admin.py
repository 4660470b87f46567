from django.contrib import admin
from apps.rounds.models import Round


@admin.register(Round)
class RoundAdmin(admin.ModelAdmin):
    """Admin interface for Rounds."""
    
    list_display = ['room', 'status', 'expense_count', 'created_at', 'cleared_at']
    list_filter = ['status', 'created_at']
    search_fields = ['room__name']
    readonly_fields = ['created_at', 'cleared_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    
    def expense_count(self, obj):
        return obj.expenses.count()
    expense_count.short_description = 'Expenses'
    
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('room')
