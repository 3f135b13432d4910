"""Exception types raised by Grocery Budget."""

from uuid import UUID


class GroceryBudgetError(Exception):
    """Base class for all Grocery Budget errors."""


class InvalidInputError(GroceryBudgetError):
    """Raised when input fails validation before any repository call."""


class InvalidAmountError(InvalidInputError):
    """Raised when a money amount is zero or negative."""

    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"Amount must be greater than zero (got {amount})")


class InvalidDateRangeError(InvalidInputError):
    """Raised when a start date is not strictly before its end date."""

    def __init__(self, start_date, end_date):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Start date {start_date} must be before end date {end_date}"
        )


class EmptyNameError(InvalidInputError):
    """Raised when a required name is blank."""

    def __init__(self, field: str = "name"):
        self.field = field
        super().__init__(f"{field.capitalize()} must not be empty")


class InvalidBudgetError(InvalidInputError):
    """Raised when a budget's category allocations are inconsistent."""


class BudgetExceededError(InvalidInputError):
    """Raised when a shopping list's estimated cost would pass its budget."""

    def __init__(self, list_name: str, estimated_cost, budget_amount):
        self.list_name = list_name
        self.estimated_cost = estimated_cost
        self.budget_amount = budget_amount
        super().__init__(
            f"Shopping list '{list_name}' would cost {estimated_cost}, "
            f"over its budget of {budget_amount}"
        )


class NotFoundError(GroceryBudgetError):
    """Raised when a record does not exist."""

    def __init__(self, kind: str, identifier: UUID | str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} with ID '{identifier}' not found")


class PredictionError(GroceryBudgetError):
    """Raised when a prediction strategy cannot forecast an item."""

    def __init__(self, item_name: str, reason: str):
        self.item_name = item_name
        self.reason = reason
        super().__init__(f"Cannot predict next purchase of '{item_name}': {reason}")


class ProductLookupError(GroceryBudgetError):
    """Raised when the external product or price lookup fails."""
