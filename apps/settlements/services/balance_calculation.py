"""
Balance calculation.

Pure functions: no database access. Callers pass in the round's expenses
and the room's member ids in join order.
"""

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Dict, Iterable, Mapping, Sequence
from uuid import UUID

from .exceptions import NoParticipantsError


def calculate_balances(
    *,
    expenses: Iterable,
    member_ids: Sequence[UUID]
) -> Dict[UUID, Decimal]:
    """
    Compute each member's net balance for a round.

    Every member owes an equal share of the total; each expense credits
    its payer. Positive balance means the member is owed money, negative
    means they owe. Amounts stay at full Decimal precision.

    Args:
        expenses: Objects exposing ``payer_id`` and ``amount``
        member_ids: Member user ids, in the order balances should be laid out

    Returns:
        Mapping of user id to balance, in member order. A payer who is not
        a member is appended after the members.

    Raises:
        NoParticipantsError: If member_ids is empty
    """
    if not member_ids:
        raise NoParticipantsError("Room has no members to split expenses between")

    expenses = list(expenses)
    total = sum((Decimal(expense.amount) for expense in expenses), Decimal('0'))
    fair_share = total / Decimal(len(member_ids))

    balances = {member_id: -fair_share for member_id in member_ids}

    for expense in expenses:
        balances[expense.payer_id] = (
            balances.get(expense.payer_id, Decimal('0')) + Decimal(expense.amount)
        )

    return balances


def allocate_to_cents(
    balances: Mapping[UUID, Decimal],
    *,
    unit: Decimal = Decimal('0.01')
) -> Dict[UUID, Decimal]:
    """
    Round balances to ``unit`` without losing their zero sum.

    Largest-remainder rounding: every balance is floored to the unit, then
    the units lost to flooring go one each to the balances with the largest
    remainders (ties in insertion order). Each result is within one unit of
    its exact balance and the results still sum to zero.

    Args:
        balances: User id -> exact net balance
        unit: Minor currency unit

    Returns:
        Mapping of user id to rounded balance, in the same order
    """
    floored = {
        user_id: balance.quantize(unit, rounding=ROUND_FLOOR)
        for user_id, balance in balances.items()
    }
    shortfall = sum(balances.values(), Decimal('0')) - sum(floored.values(), Decimal('0'))
    extra_units = max(0, int((shortfall / unit).to_integral_value(rounding=ROUND_HALF_UP)))

    by_remainder = sorted(
        balances,
        key=lambda user_id: balances[user_id] - floored[user_id],
        reverse=True,
    )
    for user_id in by_remainder[:extra_units]:
        floored[user_id] += unit

    return floored
