"""Tests for reminder scheduling."""

from datetime import date

import pytest

from grocery_budget.models import ReminderKind
from grocery_budget.notifications import ReminderScheduler

from helpers import make_budget, make_item


class TestReminderScheduler:
    """Tests for ReminderScheduler."""

    @pytest.mark.asyncio
    async def test_purchase_reminder(self, data_store):
        scheduler = ReminderScheduler(data_store)
        milk = make_item("Milk")

        reminder = await scheduler.schedule_reminder(milk, date(2025, 10, 22))

        assert reminder.identifier == f"purchase-{milk.id}"
        assert reminder.kind == ReminderKind.PURCHASE
        assert reminder.title == "Time to Buy"
        assert reminder.body == (
            "You usually buy Milk around this time. Add it to your shopping list?"
        )
        assert reminder.trigger_date == date(2025, 10, 22)
        assert reminder.item_id == milk.id

    @pytest.mark.asyncio
    async def test_rescheduling_replaces(self, data_store):
        scheduler = ReminderScheduler(data_store)
        milk = make_item("Milk")

        await scheduler.schedule_reminder(milk, date(2025, 10, 22))
        await scheduler.schedule_reminder(milk, date(2025, 10, 29))

        reminders = await scheduler.list_reminders()
        assert len(reminders) == 1
        assert reminders[0].trigger_date == date(2025, 10, 29)

    @pytest.mark.asyncio
    async def test_budget_alert(self, data_store):
        scheduler = ReminderScheduler(data_store)
        budget = make_budget(name="October")

        reminder = await scheduler.schedule_budget_alert(budget, 85.7)

        assert reminder.identifier == f"budget-alert-{budget.id}"
        assert reminder.kind == ReminderKind.BUDGET_ALERT
        assert reminder.title == "Budget Alert"
        assert reminder.body == "You've used 85% of your October budget"
        assert reminder.trigger_date == date.today()
        assert reminder.item_id is None
