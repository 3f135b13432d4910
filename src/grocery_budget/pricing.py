"""Price analysis: is a shopping list's estimate a good deal or worth waiting on."""

import calendar
import logging
from collections import defaultdict
from decimal import Decimal
from uuid import UUID

from .concurrency import run_concurrently
from .errors import NotFoundError
from .models import (
    BestTimeToBuy,
    GroceryItem,
    ItemPriceRecommendation,
    PriceAnalysis,
    PriceHistoryEntry,
    ShoppingListItem,
)
from .repositories import GroceryItemRepository, PriceHistoryRepository, ShoppingListRepository

logger = logging.getLogger(__name__)

# Within this factor of the lowest price counts as the best price
BEST_PRICE_TOLERANCE = Decimal("1.05")
# Above this factor of the average counts as expensive
HIGH_PRICE_FACTOR = Decimal("1.2")
BEST_TIME_FULL_SAMPLE = 20
BEST_TIME_MAX_CONFIDENCE = 0.9


def analyze_price(current_price: Decimal, prices: list[Decimal]) -> PriceAnalysis:
    """Compare a price with previously recorded prices.

    A price is a good deal at or below the 20th percentile of the history and
    the best price within 5% of the lowest one. Without history every statistic
    is the current price and the score is neutral.
    """
    if not prices:
        return PriceAnalysis(
            current_price=current_price,
            average_price=current_price,
            median_price=current_price,
            lowest_price=current_price,
            highest_price=current_price,
            recommendation="Insufficient price history",
        )

    ordered = sorted(prices)
    count = len(ordered)
    average = sum(ordered, Decimal(0)) / count
    lowest, highest = ordered[0], ordered[-1]
    percentile_20 = ordered[count // 5]

    is_good_deal = current_price <= percentile_20
    is_best_price = current_price <= lowest * BEST_PRICE_TOLERANCE
    savings_percentage = float((average - current_price) / average * 100) if average > 0 else 0.0

    if highest == lowest:
        price_score = 1.0
    else:
        price_score = float(1 - (current_price - lowest) / (highest - lowest))
        price_score = max(0.0, min(1.0, price_score))

    if is_best_price:
        recommendation = "Excellent price! Best deal we've seen"
    elif is_good_deal:
        recommendation = f"Good deal! {int(savings_percentage)}% below average"
    elif current_price < average:
        recommendation = "Fair price, slightly below average"
    elif current_price > average * HIGH_PRICE_FACTOR:
        recommendation = "Price is high. Wait for better deal"
    else:
        recommendation = "Average price for this item"

    return PriceAnalysis(
        current_price=current_price,
        average_price=average,
        median_price=ordered[count // 2],
        lowest_price=lowest,
        highest_price=highest,
        is_good_deal=is_good_deal,
        is_best_price=is_best_price,
        savings_percentage=savings_percentage,
        price_score=price_score,
        recommendation=recommendation,
    )


def best_time_to_buy(history: list[PriceHistoryEntry]) -> BestTimeToBuy:
    """Find the weekday with the lowest average recorded price.

    Ties go to the earlier weekday. Confidence grows with the number of
    observations up to a cap.
    """
    by_weekday: dict[int, list[Decimal]] = defaultdict(list)
    for entry in history:
        by_weekday[entry.recorded_at.weekday()].append(entry.price)

    averages = {
        weekday: sum(prices, Decimal(0)) / len(prices)
        for weekday, prices in sorted(by_weekday.items())
    }
    best = min(averages, key=averages.__getitem__)
    worst = max(averages, key=averages.__getitem__)

    return BestTimeToBuy(
        weekday=calendar.day_name[best],
        expected_price=averages[best],
        highest_weekday_price=averages[worst],
        savings=averages[worst] - averages[best],
        confidence=min(BEST_TIME_MAX_CONFIDENCE, len(history) / BEST_TIME_FULL_SAMPLE),
    )


def recommend(
    entry: ShoppingListItem, item: GroceryItem, history: list[PriceHistoryEntry]
) -> ItemPriceRecommendation:
    """Advise whether to buy a list entry now or wait.

    Potential savings are what the entry costs above the average price;
    negative means the estimate is already below average.
    """
    analysis = analyze_price(entry.estimated_price, [e.price for e in history])
    best_time = best_time_to_buy(history)
    potential_savings = entry.quantity * (entry.estimated_price - analysis.average_price)

    should_buy_now = analysis.is_good_deal or potential_savings < 0
    if should_buy_now:
        recommendation = f"Good time to buy! {analysis.recommendation}"
    else:
        recommendation = f"Consider waiting. Prices are usually lowest on {best_time.weekday}s"

    return ItemPriceRecommendation(
        item=item,
        list_item=entry,
        analysis=analysis,
        best_time=best_time,
        potential_savings=potential_savings,
        should_buy_now=should_buy_now,
        recommendation=recommendation,
    )


class PriceAdvisor:
    """Price recommendations for every entry of a shopping list."""

    def __init__(
        self,
        list_repository: ShoppingListRepository,
        item_repository: GroceryItemRepository,
        price_repository: PriceHistoryRepository,
    ):
        self.list_repository = list_repository
        self.item_repository = item_repository
        self.price_repository = price_repository

    async def recommendations(self, list_id: UUID | str) -> list[ItemPriceRecommendation]:
        """Recommend buy-now-or-wait for each entry, biggest potential savings first.

        Entries are looked up concurrently. Entries whose item is gone or has no
        recorded prices are left out. Equal savings keep list order.

        Raises:
            NotFoundError: If the list does not exist
        """
        if isinstance(list_id, str):
            list_id = UUID(list_id)

        shopping_list = await self.list_repository.fetch_shopping_list(list_id)
        if shopping_list is None:
            raise NotFoundError("Shopping list", list_id)

        results = await run_concurrently(self._recommend(entry) for entry in shopping_list.items)
        found = [result for result in results if result is not None]
        found.sort(key=lambda result: result.potential_savings, reverse=True)
        return found

    async def _recommend(self, entry: ShoppingListItem) -> ItemPriceRecommendation | None:
        item = await self.item_repository.fetch_item(entry.item_id)
        if item is None:
            logger.warning("Skipping list entry %s: item %s no longer exists", entry.id, entry.item_id)
            return None

        history = await self.price_repository.fetch_price_history(item.id)
        if not history:
            logger.debug("No recorded prices for '%s'", item.name)
            return None
        return recommend(entry, item, history)
