"""Budget summaries: spend totals, category breakdown and end-of-period projection."""

import logging
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from .dates import as_date, days_between
from .errors import NotFoundError
from .models import Budget, BudgetSummary, Purchase
from .repositories import BudgetRepository, NotificationScheduler, PurchaseRepository

logger = logging.getLogger(__name__)


def build_summary(budget: Budget, purchases: list[Purchase], today: date) -> BudgetSummary:
    """Compute a budget summary from the purchases made within its period.

    Day counts truncate to calendar dates. ``days_passed`` is floored at 1 so
    the daily average is defined on (or before) the first day of the period.
    """
    total_spent = sum((p.total_cost for p in purchases), Decimal(0))
    remaining = budget.amount - total_spent
    percentage_used = 0.0 if total_spent == 0 else float(total_spent / budget.amount) * 100

    by_category: dict[str, Decimal] = defaultdict(Decimal)
    for purchase in purchases:
        by_category[purchase.item.category] += purchase.total_cost

    days_passed = max(1, days_between(budget.start_date, today))
    total_days = days_between(budget.start_date, budget.end_date)
    daily_average = total_spent / days_passed
    projected_total = daily_average * total_days

    return BudgetSummary(
        budget=budget,
        total_spent=total_spent,
        remaining_amount=remaining,
        percentage_used=percentage_used,
        spending_by_category=dict(sorted(by_category.items())),
        daily_average=daily_average,
        projected_total=projected_total,
        is_on_track=projected_total <= budget.amount,
        days_passed=days_passed,
        total_days=total_days,
        days_remaining=total_days - days_passed,
    )


class BudgetSummaryEngine:
    """Summarizes budgets against recorded purchases."""

    def __init__(
        self,
        budget_repository: BudgetRepository,
        purchase_repository: PurchaseRepository,
        notifier: NotificationScheduler | None = None,
        alert_threshold: float = 80.0,
    ):
        self.budget_repository = budget_repository
        self.purchase_repository = purchase_repository
        self.notifier = notifier
        self.alert_threshold = alert_threshold

    async def summarize(
        self, budget_id: UUID | str, now: date | datetime | None = None
    ) -> BudgetSummary:
        """Summarize a budget as of ``now``.

        Args:
            budget_id: Budget to summarize
            now: Reference point for elapsed days. Defaults to today.

        Returns:
            BudgetSummary computed fresh from the repositories

        Raises:
            NotFoundError: If no budget has this ID
        """
        if isinstance(budget_id, str):
            budget_id = UUID(budget_id)

        budget = await self.budget_repository.fetch_budget(budget_id)
        if budget is None:
            raise NotFoundError("Budget", budget_id)

        purchases = await self.purchase_repository.fetch_purchases_between(
            budget.start_date, budget.end_date
        )
        return build_summary(budget, purchases, as_date(now))

    async def check_alert(self, summary: BudgetSummary) -> bool:
        """Schedule a budget alert once spending reaches the alert threshold.

        Returns:
            True if an alert was scheduled
        """
        if self.notifier is None or summary.percentage_used < self.alert_threshold:
            return False

        try:
            await self.notifier.schedule_budget_alert(summary.budget, summary.percentage_used)
        except Exception:
            logger.warning(
                "Could not schedule budget alert for '%s'", summary.budget.name, exc_info=True
            )
            return False
        return True
