from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'expenses'

router = DefaultRouter()
router.register(r'', views.ExpenseViewSet, basename='expense')

urlpatterns = [
    # GET    /api/expenses/?room={id}             - Expenses of the open round
    # POST   /api/expenses/                       - Log an expense
    # GET    /api/expenses/{id}/                  - Expense details
    # PATCH  /api/expenses/{id}/                  - Edit (creator, open round)
    # DELETE /api/expenses/{id}/                  - Delete (creator, open round)
    
    path('', include(router.urls)),
]
