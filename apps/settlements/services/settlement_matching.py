"""
Settlement matching.

Turns net balances into directed payments with a greedy two-cursor walk
over creditors and debtors in balance order. The result always clears
every balance, but is not guaranteed to use the fewest payments.
"""

from collections import namedtuple
from decimal import Decimal
from typing import List, Mapping
from uuid import UUID


SettlementDraft = namedtuple('SettlementDraft', ['from_user_id', 'to_user_id', 'amount'])


def match_settlements(
    balances: Mapping[UUID, Decimal],
    *,
    tolerance: Decimal = Decimal('0.01')
) -> List[SettlementDraft]:
    """
    Pair debtors with creditors.

    Balances within ``tolerance`` of zero are treated as settled, and no
    draft for ``tolerance`` or less is emitted.

    Args:
        balances: User id -> net balance, iterated in insertion order
        tolerance: Rounding epsilon

    Returns:
        List of SettlementDraft(from_user_id, to_user_id, amount)
    """
    creditors = [[user_id, amount] for user_id, amount in balances.items() if amount > tolerance]
    debtors = [[user_id, -amount] for user_id, amount in balances.items() if amount < -tolerance]

    drafts = []
    c = d = 0

    while c < len(creditors) and d < len(debtors):
        creditor, debtor = creditors[c], debtors[d]
        matched = min(creditor[1], debtor[1])

        if matched > tolerance:
            drafts.append(SettlementDraft(debtor[0], creditor[0], matched))

        creditor[1] -= matched
        debtor[1] -= matched

        if creditor[1] <= tolerance:
            c += 1
        if debtor[1] <= tolerance:
            d += 1

    return drafts
