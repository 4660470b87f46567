"""
Expenses app services layer.

Expense writes are gated on room membership, on being the creator and
on the expense's round still being open.
"""

from .exceptions import (
    ExpensesServiceError,
    ExpenseNotFoundError,
    NotExpenseCreatorError,
    InvalidExpenseError,
    InvalidPayerError,
)

from .expense_management import (
    create_expense,
    update_expense,
    delete_expense,
    get_expense_for_member,
    list_round_expenses,
)


__all__ = [
    # Exceptions
    'ExpensesServiceError',
    'ExpenseNotFoundError',
    'NotExpenseCreatorError',
    'InvalidExpenseError',
    'InvalidPayerError',

    # Expense Management
    'create_expense',
    'update_expense',
    'delete_expense',
    'get_expense_for_member',
    'list_round_expenses',
]
