from django.contrib import admin
from apps.expenses.models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    """Admin interface for Expenses."""
    
    list_display = ['title', 'amount', 'payer', 'room', 'round', 'created_at']
    list_filter = ['created_at']
    search_fields = ['title', 'payer__email', 'room__name']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('payer', 'room', 'round')
