"""Tests for price analysis and shopping list price advice."""

from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from grocery_budget.errors import NotFoundError
from grocery_budget.models import PriceHistoryEntry, ShoppingList, ShoppingListItem
from grocery_budget.pricing import PriceAdvisor, analyze_price, best_time_to_buy, recommend
from grocery_budget.shopping_lists import ShoppingListManager

from helpers import make_item

HISTORY = [Decimal(p) for p in ("6", "2", "4", "5", "3")]


def entry_on(day: int, price: str, item_id=None) -> PriceHistoryEntry:
    """Price entry recorded on a day of October 2025 (the 6th is a Monday)."""
    return PriceHistoryEntry(
        item_id=item_id or uuid4(), price=Decimal(price), recorded_at=datetime(2025, 10, day, 10)
    )


class TestAnalyzePrice:
    """Tests for analyze_price."""

    def test_no_history(self):
        analysis = analyze_price(Decimal("3.99"), [])

        assert analysis.average_price == Decimal("3.99")
        assert analysis.lowest_price == Decimal("3.99")
        assert analysis.price_score == 0.5
        assert analysis.is_good_deal is False
        assert analysis.recommendation == "Insufficient price history"

    def test_statistics(self):
        analysis = analyze_price(Decimal("4.5"), HISTORY)

        assert analysis.average_price == Decimal("4")
        assert analysis.median_price == Decimal("4")
        assert analysis.lowest_price == Decimal("2")
        assert analysis.highest_price == Decimal("6")

    def test_best_price(self):
        analysis = analyze_price(Decimal("2.05"), HISTORY)

        assert analysis.is_best_price is True
        assert analysis.is_good_deal is True
        assert analysis.recommendation == "Excellent price! Best deal we've seen"

    def test_good_deal(self):
        analysis = analyze_price(Decimal("3"), HISTORY)

        assert analysis.is_best_price is False
        assert analysis.is_good_deal is True
        assert analysis.savings_percentage == 25.0
        assert analysis.price_score == 0.75
        assert analysis.recommendation == "Good deal! 25% below average"

    def test_fair_price(self):
        assert analyze_price(Decimal("3.5"), HISTORY).recommendation == (
            "Fair price, slightly below average"
        )

    def test_average_price(self):
        assert analyze_price(Decimal("4.5"), HISTORY).recommendation == "Average price for this item"

    def test_high_price(self):
        analysis = analyze_price(Decimal("5"), HISTORY)

        assert analysis.recommendation == "Price is high. Wait for better deal"
        assert analysis.savings_percentage == -25.0

    def test_score_clamped_above_highest(self):
        assert analyze_price(Decimal("9"), HISTORY).price_score == 0.0

    def test_flat_history_scores_full(self):
        assert analyze_price(Decimal("3"), [Decimal("3"), Decimal("3")]).price_score == 1.0


class TestBestTimeToBuy:
    """Tests for best_time_to_buy."""

    def test_cheapest_weekday(self):
        best = best_time_to_buy([entry_on(6, "4"), entry_on(7, "3"), entry_on(14, "3.5")])

        assert best.weekday == "Tuesday"
        assert best.expected_price == Decimal("3.25")
        assert best.highest_weekday_price == Decimal("4")
        assert best.savings == Decimal("0.75")
        assert best.confidence == pytest.approx(0.15)

    def test_tie_goes_to_earlier_weekday(self):
        assert best_time_to_buy([entry_on(7, "3"), entry_on(6, "3")]).weekday == "Monday"

    def test_confidence_capped(self):
        history = [entry_on(6, "3") for _ in range(30)]
        assert best_time_to_buy(history).confidence == 0.9


class TestRecommend:
    """Tests for recommend."""

    def test_wait_when_estimate_above_average(self):
        item = make_item("Milk")
        entry = ShoppingListItem(item_id=item.id, quantity=Decimal("2"), estimated_price=Decimal("5"))
        history = [entry_on(6, "5"), entry_on(7, "3"), entry_on(8, "4")]

        recommendation = recommend(entry, item, history)

        assert recommendation.potential_savings == Decimal("2")
        assert recommendation.should_buy_now is False
        assert recommendation.recommendation == (
            "Consider waiting. Prices are usually lowest on Tuesdays"
        )

    def test_buy_when_estimate_below_average(self):
        item = make_item("Milk")
        entry = ShoppingListItem(item_id=item.id, quantity=Decimal("2"), estimated_price=Decimal("3.5"))
        history = [entry_on(6, "5"), entry_on(7, "3"), entry_on(8, "4")]

        recommendation = recommend(entry, item, history)

        assert recommendation.potential_savings == Decimal("-1.0")
        assert recommendation.should_buy_now is True
        assert recommendation.recommendation == (
            "Good time to buy! Fair price, slightly below average"
        )


class TestPriceAdvisor:
    """Tests for PriceAdvisor.recommendations."""

    @pytest.mark.asyncio
    async def test_sorted_by_potential_savings(self, store):
        milk = await store.create_item(make_item("Milk"))
        eggs = await store.create_item(make_item("Eggs"))
        bread = await store.create_item(make_item("Bread"))
        for day, price in ((6, "4"), (7, "4")):
            await store.add_price_history(entry_on(day, price, milk.id))
            await store.add_price_history(entry_on(day, price, eggs.id))

        manager = ShoppingListManager(store, store)
        shopping_list = await manager.create_list("Weekend", Decimal("100"))
        await manager.add_item(shopping_list.id, milk.id, estimated_price=Decimal("4.5"))
        await manager.add_item(shopping_list.id, eggs.id, Decimal("3"), Decimal("5"))
        await manager.add_item(shopping_list.id, bread.id, estimated_price=Decimal("3"))

        recommendations = await PriceAdvisor(store, store, store).recommendations(str(shopping_list.id))

        assert [r.item.name for r in recommendations] == ["Eggs", "Milk"]
        assert [r.potential_savings for r in recommendations] == [Decimal("3"), Decimal("0.5")]

    @pytest.mark.asyncio
    async def test_missing_item_skipped(self):
        milk = make_item("Milk")
        gone = ShoppingListItem(item_id=uuid4(), estimated_price=Decimal("2"))
        kept = ShoppingListItem(item_id=milk.id, estimated_price=Decimal("4"))
        lists = AsyncMock()
        lists.fetch_shopping_list.return_value = ShoppingList(
            name="Weekend", budget_amount=Decimal("50"), items=[gone, kept]
        )
        items = AsyncMock()
        items.fetch_item.side_effect = lambda item_id: milk if item_id == milk.id else None
        prices = AsyncMock()
        prices.fetch_price_history.return_value = [entry_on(6, "4", milk.id)]

        recommendations = await PriceAdvisor(lists, items, prices).recommendations(uuid4())

        assert [r.list_item for r in recommendations] == [kept]
        prices.fetch_price_history.assert_awaited_once_with(milk.id)

    @pytest.mark.asyncio
    async def test_missing_list(self, store):
        with pytest.raises(NotFoundError):
            await PriceAdvisor(store, store, store).recommendations(uuid4())
