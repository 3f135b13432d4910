"""Budget lifecycle: validation, creation and overlap resolution."""

import logging
from uuid import UUID

from .concurrency import run_concurrently
from .errors import InvalidAmountError, InvalidBudgetError, InvalidDateRangeError, NotFoundError
from .models import Budget
from .repositories import BudgetRepository

logger = logging.getLogger(__name__)


def overlaps(first: Budget, second: Budget) -> bool:
    """Check whether two budget periods share at least one day (inclusive bounds)."""
    return first.start_date <= second.end_date and first.end_date >= second.start_date


def validate_budget(budget: Budget) -> None:
    """Validate a budget before it reaches the repository.

    Raises:
        InvalidAmountError: If the amount is not positive
        InvalidDateRangeError: If the start date is not before the end date
        InvalidBudgetError: If category allocations are negative or exceed the amount
    """
    if budget.amount <= 0:
        raise InvalidAmountError(budget.amount)

    if budget.start_date >= budget.end_date:
        raise InvalidDateRangeError(budget.start_date, budget.end_date)

    negative = sorted(name for name, limit in budget.category_budgets.items() if limit < 0)
    if negative:
        raise InvalidBudgetError(
            f"Category allocations must not be negative: {', '.join(negative)}"
        )

    if budget.total_category_budgets > budget.amount:
        raise InvalidBudgetError(
            f"Category allocations ({budget.total_category_budgets}) "
            f"exceed the budget amount ({budget.amount})"
        )


class BudgetManager:
    """Creates budgets and keeps at most one active budget per overlapping period."""

    def __init__(self, repository: BudgetRepository):
        self.repository = repository

    async def create_budget(self, candidate: Budget) -> Budget:
        """Create a budget, first deactivating every active budget it overlaps.

        Deactivations run concurrently; the candidate is only created once all
        of them have been persisted. If any deactivation fails the error
        propagates and the candidate is not created. Deactivations that already
        succeeded are not rolled back.

        Args:
            candidate: Budget to create

        Returns:
            The created budget

        Raises:
            InvalidAmountError: If the amount is not positive
            InvalidDateRangeError: If the start date is not before the end date
            InvalidBudgetError: If category allocations are inconsistent
        """
        validate_budget(candidate)

        active_budgets = await self.repository.fetch_active_budgets()
        conflicting = [
            budget
            for budget in active_budgets
            if budget.id != candidate.id and overlaps(candidate, budget)
        ]

        if conflicting:
            logger.info(
                "Deactivating %d budget(s) overlapping '%s': %s",
                len(conflicting),
                candidate.name,
                ", ".join(b.name for b in conflicting),
            )
            await run_concurrently(
                self.repository.update_budget(budget.model_copy(update={"is_active": False}))
                for budget in conflicting
            )

        created = await self.repository.create_budget(candidate)
        logger.info("Created budget '%s' (%s)", created.name, created.id)
        return created

    async def get_budget(self, budget_id: UUID | str) -> Budget:
        """Get a budget by ID.

        Raises:
            NotFoundError: If no budget has this ID
        """
        if isinstance(budget_id, str):
            budget_id = UUID(budget_id)

        budget = await self.repository.fetch_budget(budget_id)
        if budget is None:
            raise NotFoundError("Budget", budget_id)
        return budget

    async def list_budgets(self, active_only: bool = False) -> list[Budget]:
        """List budgets, newest period first."""
        if active_only:
            return await self.repository.fetch_active_budgets()
        return await self.repository.fetch_all_budgets()

