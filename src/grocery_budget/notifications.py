"""Reminder scheduling backed by the data store."""

import logging
from datetime import date

from .models import Budget, GroceryItem, Reminder, ReminderKind
from .repositories import ReminderRepository

logger = logging.getLogger(__name__)


class ReminderScheduler:
    """Records purchase reminders and budget alerts for later delivery.

    Reminders are keyed by identifier, so rescheduling the same item or budget
    replaces the earlier reminder.
    """

    def __init__(self, store: ReminderRepository):
        self.store = store

    async def schedule_reminder(self, item: GroceryItem, predicted_date: date) -> Reminder:
        """Remind the user to buy an item on its predicted date."""
        reminder = Reminder(
            identifier=f"purchase-{item.id}",
            kind=ReminderKind.PURCHASE,
            title="Time to Buy",
            body=f"You usually buy {item.name} around this time. Add it to your shopping list?",
            trigger_date=predicted_date,
            item_id=item.id,
        )
        await self.store.save_reminder(reminder)
        logger.info("Scheduled purchase reminder for '%s' on %s", item.name, predicted_date)
        return reminder

    async def schedule_budget_alert(self, budget: Budget, percentage_used: float) -> Reminder:
        """Alert the user that a budget is running low."""
        reminder = Reminder(
            identifier=f"budget-alert-{budget.id}",
            kind=ReminderKind.BUDGET_ALERT,
            title="Budget Alert",
            body=f"You've used {int(percentage_used)}% of your {budget.name} budget",
            trigger_date=date.today(),
        )
        await self.store.save_reminder(reminder)
        logger.info("Scheduled budget alert for '%s' at %.1f%%", budget.name, percentage_used)
        return reminder

    async def list_reminders(self) -> list[Reminder]:
        """All scheduled reminders, earliest first."""
        return await self.store.list_reminders()
