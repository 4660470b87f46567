from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'rooms'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.RoomViewSet, basename='room')

urlpatterns = [
    # Room ViewSet routes
    # GET    /api/rooms/                          - List user's rooms
    # POST   /api/rooms/                          - Create room
    # GET    /api/rooms/{id}/                     - Room details
    
    # Custom room actions
    # GET    /api/rooms/{id}/members/             - List members
    # POST   /api/rooms/join/                     - Join with invite code
    # POST   /api/rooms/{id}/update_member_role/  - Update member role (admin)
    
    path('', include(router.urls)),
]
