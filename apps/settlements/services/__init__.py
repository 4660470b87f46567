"""
Settlements app services layer.

balance_calculation and settlement_matching are pure; settlement_management
persists their output and drives the settlement status workflow.
"""

from .exceptions import (
    SettlementsServiceError,
    SettlementNotFoundError,
    InvalidStateTransitionError,
    NoParticipantsError,
)

from .balance_calculation import (
    calculate_balances,
    allocate_to_cents,
)

from .settlement_matching import (
    SettlementDraft,
    match_settlements,
)

from .settlement_management import (
    generate_settlements,
    advance_settlement_status,
    list_round_settlements,
    get_room_balances,
)


__all__ = [
    # Exceptions
    'SettlementsServiceError',
    'SettlementNotFoundError',
    'InvalidStateTransitionError',
    'NoParticipantsError',

    # Calculation
    'calculate_balances',
    'allocate_to_cents',
    'SettlementDraft',
    'match_settlements',

    # Management
    'generate_settlements',
    'advance_settlement_status',
    'list_round_settlements',
    'get_room_balances',
]
