"""
Domain exceptions for expenses app.

Exception Hierarchy:
    ExpensesServiceError (base)
    ├── ExpenseNotFoundError
    ├── NotExpenseCreatorError   (permission)
    ├── InvalidExpenseError      (validation)
    └── InvalidPayerError        (validation)
"""


class ExpensesServiceError(Exception):
    """Base exception for all expenses service errors."""
    pass


class ExpenseNotFoundError(ExpensesServiceError):
    """Raised when an expense does not exist."""
    pass


class NotExpenseCreatorError(ExpensesServiceError):
    """Raised when someone other than the creator edits or deletes an expense."""
    pass


class InvalidExpenseError(ExpensesServiceError):
    """
    Raised when an expense has a non-positive amount or a blank title.

    Example:
        raise InvalidExpenseError("Amount must be greater than zero")
    """
    pass


class InvalidPayerError(ExpensesServiceError):
    """Raised when the payer is not a member of the room."""
    pass
