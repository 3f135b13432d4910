"""Collaborator interfaces consumed by the budget and forecasting services.

Stores in :mod:`grocery_budget.data_store` and :mod:`grocery_budget.sqlite_store`
implement every repository protocol here; the prediction, notification and
product lookup protocols have their own adapters.
"""

from datetime import date
from typing import Protocol
from uuid import UUID

from .models import (
    Budget,
    GroceryItem,
    PriceHistoryEntry,
    PriceQuote,
    ProductInfo,
    Purchase,
    PurchasePrediction,
    Reminder,
    ShoppingList,
)


class BudgetRepository(Protocol):
    """Budget persistence."""

    async def fetch_active_budgets(self) -> list[Budget]: ...
    async def fetch_all_budgets(self) -> list[Budget]: ...
    async def fetch_budget(self, budget_id: UUID) -> Budget | None: ...
    async def create_budget(self, budget: Budget) -> Budget: ...
    async def update_budget(self, budget: Budget) -> Budget: ...


class PurchaseRepository(Protocol):
    """Purchase persistence."""

    async def create_purchase(self, purchase: Purchase) -> Purchase: ...
    async def fetch_purchases_for_item(self, item_id: UUID) -> list[Purchase]: ...
    async def fetch_purchases_between(
        self, start_date: date, end_date: date
    ) -> list[Purchase]: ...
    async def fetch_all_purchases(self) -> list[Purchase]: ...


class GroceryItemRepository(Protocol):
    """Catalog item persistence."""

    async def fetch_all_items(self) -> list[GroceryItem]: ...
    async def fetch_item(self, item_id: UUID) -> GroceryItem | None: ...
    async def search_items(self, query: str) -> list[GroceryItem]: ...
    async def create_item(self, item: GroceryItem) -> GroceryItem: ...
    async def update_item(self, item: GroceryItem) -> GroceryItem: ...


class PriceHistoryRepository(Protocol):
    """Observed price persistence."""

    async def add_price_history(self, entry: PriceHistoryEntry) -> PriceHistoryEntry: ...
    async def fetch_price_history(self, item_id: UUID) -> list[PriceHistoryEntry]: ...


class ReminderRepository(Protocol):
    """Scheduled reminder persistence."""

    async def save_reminder(self, reminder: Reminder) -> Reminder: ...
    async def list_reminders(self) -> list[Reminder]: ...


class ShoppingListRepository(Protocol):
    """Shopping list persistence. Items are stored with their list."""

    async def fetch_all_shopping_lists(self) -> list[ShoppingList]: ...
    async def fetch_shopping_list(self, list_id: UUID) -> ShoppingList | None: ...
    async def create_shopping_list(self, shopping_list: ShoppingList) -> ShoppingList: ...
    async def update_shopping_list(self, shopping_list: ShoppingList) -> ShoppingList: ...


class PurchasePredictionService(Protocol):
    """Strategy that forecasts an item's next purchase from its history.

    Implementations raise :class:`~grocery_budget.errors.PredictionError` when
    they cannot produce a forecast.
    """

    def predict_next_purchase(
        self,
        item_name: str,
        category: str,
        history: list[Purchase],
        today: date | None = None,
    ) -> PurchasePrediction: ...


class NotificationScheduler(Protocol):
    """Schedules user-facing reminders. Delivery is not this package's concern."""

    async def schedule_reminder(self, item: GroceryItem, predicted_date: date) -> Reminder: ...
    async def schedule_budget_alert(self, budget: Budget, percentage_used: float) -> Reminder: ...


class ProductLookupService(Protocol):
    """External barcode lookup.

    ``fetch_product`` returns ``None`` when the barcode is unknown; errors mean
    the lookup itself failed.
    """

    async def fetch_product(self, barcode: str) -> ProductInfo | None: ...
    async def fetch_price(self, barcode: str) -> PriceQuote | None: ...


class DataStoreProtocol(
    BudgetRepository,
    PurchaseRepository,
    GroceryItemRepository,
    PriceHistoryRepository,
    ReminderRepository,
    ShoppingListRepository,
    Protocol,
):
    """Everything a storage backend provides."""
