"""
Rooms app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    RoomsServiceError,
    RoomNotFoundError,
    InvalidInviteCodeError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
    InvalidRoleError,
    LastAdminError,
)

from .room_management import (
    create_room,
    get_room_by_id,
)

from .membership_management import (
    join_room,
    get_room_members,
    require_room_membership,
    require_admin,
)

from .role_management import (
    update_member_role,
)


__all__ = [
    # Exceptions
    'RoomsServiceError',
    'RoomNotFoundError',
    'InvalidInviteCodeError',
    'AlreadyMemberError',
    'NotMemberError',
    'InsufficientPermissionsError',
    'InvalidRoleError',
    'LastAdminError',

    # Room Management
    'create_room',
    'get_room_by_id',

    # Membership Management
    'join_room',
    'get_room_members',
    'require_room_membership',
    'require_admin',

    # Role Management
    'update_member_role',
]
