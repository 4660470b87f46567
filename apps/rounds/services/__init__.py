"""
Rounds app services layer.

The round lifecycle (OPEN -> CLEARED) lives here; settlement generation
and status changes in apps.settlements call into it.
"""

from .exceptions import (
    RoundsServiceError,
    RoundNotFoundError,
    NoOpenRoundError,
    OpenRoundExistsError,
    RoundClosedError,
)

from .round_lifecycle import (
    ensure_open_round,
    get_open_round,
    close_round_if_all_confirmed,
    start_round,
)

from .round_history import (
    list_room_rounds,
    get_round_for_member,
)


__all__ = [
    # Exceptions
    'RoundsServiceError',
    'RoundNotFoundError',
    'NoOpenRoundError',
    'OpenRoundExistsError',
    'RoundClosedError',

    # Lifecycle
    'ensure_open_round',
    'get_open_round',
    'close_round_if_all_confirmed',
    'start_round',

    # History
    'list_room_rounds',
    'get_round_for_member',
]
