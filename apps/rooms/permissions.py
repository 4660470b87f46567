from rest_framework import permissions


class IsRoomAdmin(permissions.BasePermission):
    """
    Permission: User must be a room admin.
    """
    
    message = 'Only room admins can perform this action.'
    
    def has_object_permission(self, request, view, obj):
        # obj is a Room instance
        return obj.is_admin(request.user)


class IsRoomMember(permissions.BasePermission):
    """
    Permission: User must be a member of the room.
    """
    
    message = 'You must be a member of this room.'
    
    def has_object_permission(self, request, view, obj):
        # obj is a Room instance
        return obj.has_member(request.user)
