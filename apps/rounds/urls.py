from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'rounds'

router = DefaultRouter()
router.register(r'', views.RoundViewSet, basename='round')

urlpatterns = [
    # GET    /api/rounds/?room={id}               - Round history with totals
    # POST   /api/rounds/                         - Start a round (admin)
    # GET    /api/rounds/{id}/                    - Round details
    # GET    /api/rounds/current/?room={id}       - Current open round
    
    path('', include(router.urls)),
]
