class BudgetAppError(Exception):
    """Base class for errors raised by the budgeting services."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BudgetValidationError(BudgetAppError, ValueError):
    """Input rejected by a business rule (bad period, unknown category...)."""


class InvalidPeriodError(BudgetValidationError):
    pass


class ConflictError(BudgetAppError):
    """The write would duplicate an existing record."""
