from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'settlements'

router = DefaultRouter()
router.register(r'', views.SettlementViewSet, basename='settlement')

urlpatterns = [
    # GET    /api/settlements/?room={id}          - Settlements of the open round
    # PATCH  /api/settlements/{id}/               - Mark paid / confirmed
    # POST   /api/settlements/generate/           - Generate settlements (admin)
    # GET    /api/settlements/balances/?room={id} - Member balances
    
    path('', include(router.urls)),
]
