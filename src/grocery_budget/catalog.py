"""Catalog items: relevance-ranked search, creation and price history."""

import logging
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from .errors import EmptyNameError, InvalidAmountError, NotFoundError
from .models import Category, GroceryItem, PriceHistoryEntry
from .repositories import GroceryItemRepository, PriceHistoryRepository

logger = logging.getLogger(__name__)

EXACT_MATCH_SCORE = 100
PREFIX_MATCH_SCORE = 50
CONTAINS_MATCH_SCORE = 25
BRAND_MATCH_SCORE = 10

# Recent prices averaged into an item's average_price
AVERAGE_PRICE_WINDOW = 10


def relevance_score(item: GroceryItem, query: str) -> int:
    """Score how well an item matches a search query.

    Scores are additive: an exact name match also counts as a prefix and a
    substring match.
    """
    needle = query.lower()
    name = item.name.lower()
    score = 0

    if name == needle:
        score += EXACT_MATCH_SCORE
    if name.startswith(needle):
        score += PREFIX_MATCH_SCORE
    if needle in name:
        score += CONTAINS_MATCH_SCORE
    if item.brand is not None and needle in item.brand.lower():
        score += BRAND_MATCH_SCORE

    return score


class Catalog:
    """Search and maintenance operations over the item catalog."""

    def __init__(
        self,
        item_repository: GroceryItemRepository,
        price_repository: PriceHistoryRepository,
    ):
        self.item_repository = item_repository
        self.price_repository = price_repository

    async def search(self, query: str) -> list[GroceryItem]:
        """Search the catalog, best matches first.

        An empty query returns the whole catalog in repository order. Any other
        query, whitespace included, is matched as given. Items with equal scores
        keep the repository's relative order.
        """
        if not query:
            return await self.item_repository.fetch_all_items()

        candidates = await self.item_repository.search_items(query)
        return sorted(candidates, key=lambda item: relevance_score(item, query), reverse=True)

    async def get_item(self, item_id: UUID | str) -> GroceryItem:
        """Get a catalog item by ID.

        Raises:
            NotFoundError: If no item has this ID
        """
        if isinstance(item_id, str):
            item_id = UUID(item_id)

        item = await self.item_repository.fetch_item(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)
        return item

    async def add_item(
        self,
        name: str,
        category: str | None = None,
        brand: str | None = None,
        unit: str = "each",
        barcode: str | None = None,
        average_price: Decimal | None = None,
        notes: str | None = None,
    ) -> GroceryItem:
        """Add an item to the catalog.

        Raises:
            EmptyNameError: If the name is blank
        """
        name = name.strip()
        if not name:
            raise EmptyNameError("item name")

        item = GroceryItem(
            name=name,
            category=category or Category.OTHER.value,
            brand=brand or None,
            unit=unit,
            barcode=barcode,
            average_price=average_price or Decimal(0),
            notes=notes,
        )
        return await self.item_repository.create_item(item)

    async def price_history(self, item_id: UUID | str) -> list[PriceHistoryEntry]:
        """Price history for an item, most recent first."""
        if isinstance(item_id, str):
            item_id = UUID(item_id)

        history = await self.price_repository.fetch_price_history(item_id)
        return sorted(history, key=lambda entry: entry.recorded_at, reverse=True)

    async def record_price(
        self,
        item_id: UUID | str,
        price: Decimal,
        store_name: str | None = None,
        source: str = "manual",
        recorded_at: datetime | None = None,
    ) -> PriceHistoryEntry:
        """Record an observed price and refresh the item's average price.

        The average covers the most recent prices only.

        Raises:
            InvalidAmountError: If the price is not positive
            NotFoundError: If no item has this ID
        """
        if price <= 0:
            raise InvalidAmountError(price)

        item = await self.get_item(item_id)
        entry = PriceHistoryEntry(
            item_id=item.id,
            price=price,
            recorded_at=recorded_at or datetime.now(),
            store_name=store_name,
            source=source,
        )
        await self.price_repository.add_price_history(entry)

        recent = (await self.price_history(item.id))[:AVERAGE_PRICE_WINDOW]
        average = sum((e.price for e in recent), Decimal(0)) / len(recent)
        await self.item_repository.update_item(
            item.model_copy(update={"average_price": average, "updated_at": datetime.now()})
        )
        logger.info("Recorded price %s for '%s' (average now %s)", price, item.name, average)
        return entry

