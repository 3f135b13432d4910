"""Tests for budget summaries and alerts."""

from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from grocery_budget.budget_summary import BudgetSummaryEngine, build_summary
from grocery_budget.errors import NotFoundError

from helpers import make_budget, make_item, make_purchase


@pytest.fixture
def october():
    return make_budget(amount="500", start=date(2025, 10, 1), end=date(2025, 10, 31))


class TestBuildSummary:
    """Tests for the pure summary computation."""

    def test_no_purchases(self, october):
        summary = build_summary(october, [], date(2025, 10, 11))

        assert summary.total_spent == Decimal(0)
        assert summary.remaining_amount == Decimal("500")
        assert summary.percentage_used == 0.0
        assert summary.spending_by_category == {}
        assert summary.daily_average == Decimal(0)
        assert summary.projected_total == Decimal(0)
        assert summary.is_on_track is True

    def test_totals_and_projection(self, october):
        milk = make_item("Milk", "Dairy")
        apples = make_item("Apples", "Produce")
        purchases = [
            make_purchase(milk, datetime(2025, 10, 2, 9), total="20"),
            make_purchase(apples, datetime(2025, 10, 5, 18), total="30"),
            make_purchase(milk, datetime(2025, 10, 9, 12), total="10"),
        ]

        summary = build_summary(october, purchases, date(2025, 10, 11))

        assert summary.total_spent == Decimal("60")
        assert summary.remaining_amount == Decimal("440")
        assert summary.percentage_used == pytest.approx(12.0)
        assert summary.spending_by_category == {"Dairy": Decimal("30"), "Produce": Decimal("30")}
        assert summary.days_passed == 10
        assert summary.total_days == 30
        assert summary.days_remaining == 20
        assert summary.daily_average == Decimal("6")
        assert summary.projected_total == Decimal("180")
        assert summary.is_on_track is True

    def test_over_pace(self, october):
        item = make_item("Steak", "Meat & Seafood")
        purchases = [make_purchase(item, datetime(2025, 10, 3), total="100")]

        summary = build_summary(october, purchases, date(2025, 10, 5))

        assert summary.daily_average == Decimal("25")
        assert summary.projected_total == Decimal("750")
        assert summary.is_on_track is False

    def test_days_passed_floor_before_start(self, october):
        """Before the period starts, one day is assumed to have passed."""
        item = make_item()
        summary = build_summary(
            october, [make_purchase(item, datetime(2025, 10, 1), total="5")], date(2025, 9, 20)
        )
        assert summary.days_passed == 1
        assert summary.daily_average == Decimal("5")

    def test_overspent(self, october):
        item = make_item()
        summary = build_summary(
            october, [make_purchase(item, datetime(2025, 10, 2), total="600")], date(2025, 10, 31)
        )
        assert summary.remaining_amount == Decimal("-100")
        assert summary.percentage_used == pytest.approx(120.0)

    def test_time_of_day_ignored(self, october):
        summary_morning = build_summary(october, [], datetime(2025, 10, 11, 0, 1).date())
        summary_night = build_summary(october, [], datetime(2025, 10, 11, 23, 59).date())
        assert summary_morning.days_passed == summary_night.days_passed == 10

    def test_deterministic(self, october):
        milk = make_item("Milk", "Dairy")
        bread = make_item("Bread", "Bakery")
        purchases = [
            make_purchase(milk, datetime(2025, 10, 2), total="4.50"),
            make_purchase(bread, datetime(2025, 10, 3), total="3.25"),
        ]
        first = build_summary(october, purchases, date(2025, 10, 11))
        second = build_summary(october, purchases, date(2025, 10, 11))
        assert first.model_dump_json() == second.model_dump_json()


class TestBudgetSummaryEngine:
    """Tests for summaries read through repositories."""

    @pytest.mark.asyncio
    async def test_unknown_budget(self, data_store):
        engine = BudgetSummaryEngine(data_store, data_store)
        with pytest.raises(NotFoundError):
            await engine.summarize("00000000-0000-0000-0000-000000000000")

    @pytest.mark.asyncio
    async def test_only_purchases_in_period_count(self, store, october):
        milk = await store.create_item(make_item("Milk", "Dairy"))
        await store.create_budget(october)
        await store.create_purchase(make_purchase(milk, datetime(2025, 9, 30, 23, 59), total="99"))
        await store.create_purchase(make_purchase(milk, datetime(2025, 10, 1, 0, 0), total="10"))
        await store.create_purchase(make_purchase(milk, datetime(2025, 10, 31, 22, 0), total="15"))
        await store.create_purchase(make_purchase(milk, datetime(2025, 11, 1, 8, 0), total="99"))

        engine = BudgetSummaryEngine(store, store)
        summary = await engine.summarize(october.id, now=datetime(2025, 10, 11, 15, 30))

        assert summary.total_spent == Decimal("25")
        assert summary.days_passed == 10
        assert summary.spending_by_category == {"Dairy": Decimal("25")}

    @pytest.mark.asyncio
    async def test_summarize_twice_is_identical(self, data_store, october):
        milk = await data_store.create_item(make_item("Milk", "Dairy"))
        await data_store.create_budget(october)
        await data_store.create_purchase(make_purchase(milk, datetime(2025, 10, 3), total="7.20"))

        engine = BudgetSummaryEngine(data_store, data_store)
        first = await engine.summarize(october.id, now=date(2025, 10, 11))
        second = await engine.summarize(october.id, now=date(2025, 10, 11))
        assert first.model_dump_json() == second.model_dump_json()


class TestBudgetAlert:
    """Tests for threshold alerts."""

    @pytest.mark.asyncio
    async def test_alert_at_threshold(self, october):
        notifier = AsyncMock()
        engine = BudgetSummaryEngine(AsyncMock(), AsyncMock(), notifier=notifier)
        item = make_item()
        summary = build_summary(
            october, [make_purchase(item, datetime(2025, 10, 2), total="400")], date(2025, 10, 20)
        )

        assert await engine.check_alert(summary) is True
        notifier.schedule_budget_alert.assert_awaited_once_with(october, pytest.approx(80.0))

    @pytest.mark.asyncio
    async def test_no_alert_below_threshold(self, october):
        notifier = AsyncMock()
        engine = BudgetSummaryEngine(AsyncMock(), AsyncMock(), notifier=notifier)
        summary = build_summary(october, [], date(2025, 10, 20))

        assert await engine.check_alert(summary) is False
        notifier.schedule_budget_alert.assert_not_called()

    @pytest.mark.asyncio
    async def test_alert_failure_is_not_raised(self, october):
        notifier = AsyncMock()
        notifier.schedule_budget_alert.side_effect = RuntimeError("boom")
        engine = BudgetSummaryEngine(AsyncMock(), AsyncMock(), notifier=notifier)
        item = make_item()
        summary = build_summary(
            october, [make_purchase(item, datetime(2025, 10, 2), total="450")], date(2025, 10, 20)
        )

        assert await engine.check_alert(summary) is False

    @pytest.mark.asyncio
    async def test_without_notifier(self, october):
        engine = BudgetSummaryEngine(AsyncMock(), AsyncMock())
        item = make_item()
        summary = build_summary(
            october, [make_purchase(item, datetime(2025, 10, 2), total="450")], date(2025, 10, 20)
        )
        assert await engine.check_alert(summary) is False
