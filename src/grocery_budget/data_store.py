"""Data persistence for Grocery Budget.

This module provides data persistence with support for JSON (default) or SQLite backends.
Use create_data_store() to get the appropriate backend based on configuration.
"""

import asyncio
import json
import logging
import threading
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from .concurrency import run_concurrently
from .errors import NotFoundError
from .models import Budget, GroceryItem, PriceHistoryEntry, Purchase, Reminder, ShoppingList
from .repositories import DataStoreProtocol

logger = logging.getLogger(__name__)


class BackendType(str, Enum):
    """Data storage backend types."""

    JSON = "json"
    SQLITE = "sqlite"


class DataStore:
    """Manages JSON file persistence for budget data.

    Every public method is a coroutine; file access runs in a worker thread and
    read-modify-write cycles are serialized with a lock so concurrent updates
    from one process do not lose writes.
    """

    def __init__(self, data_dir: Path | None = None):
        """Initialize data store.

        Args:
            data_dir: Directory for data files. Defaults to ./data
        """
        self.data_dir = data_dir or Path.cwd() / "data"
        self._lock = threading.Lock()
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, collection: str) -> Path:
        """Path to a collection file."""
        return self.data_dir / f"{collection}.json"

    # --- Raw file access (runs in worker threads) ---

    def _load_records(self, collection: str) -> list[dict[str, Any]]:
        path = self._path(collection)
        if not path.exists():
            return []

        with open(path) as f:
            return json.load(f)

    def _save_records(self, collection: str, records: list[dict[str, Any]]) -> None:
        with open(self._path(collection), "w") as f:
            json.dump(records, f, indent=2)

    def _insert(self, collection: str, record: dict[str, Any]) -> None:
        with self._lock:
            records = self._load_records(collection)
            records.append(record)
            self._save_records(collection, records)

    def _replace(self, collection: str, record: dict[str, Any], key: str = "id") -> bool:
        """Replace the record sharing ``record[key]``. Returns False if none matched."""
        with self._lock:
            records = self._load_records(collection)
            for i, existing in enumerate(records):
                if existing.get(key) == record[key]:
                    records[i] = record
                    self._save_records(collection, records)
                    return True
            return False

    def _upsert(self, collection: str, record: dict[str, Any], key: str) -> None:
        with self._lock:
            records = [r for r in self._load_records(collection) if r.get(key) != record[key]]
            records.append(record)
            self._save_records(collection, records)

    async def _read(self, collection: str) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._load_records, collection)

    @staticmethod
    def _dump(model: BaseModel, **kwargs: Any) -> dict[str, Any]:
        return model.model_dump(mode="json", **kwargs)

    # --- Budget Operations ---

    async def fetch_all_budgets(self) -> list[Budget]:
        """Load every budget, newest period first."""
        budgets = [Budget.model_validate(r) for r in await self._read("budgets")]
        return sorted(budgets, key=lambda b: b.start_date, reverse=True)

    async def fetch_active_budgets(self) -> list[Budget]:
        """Load active budgets, newest period first."""
        return [b for b in await self.fetch_all_budgets() if b.is_active]

    async def fetch_budget(self, budget_id: UUID) -> Budget | None:
        """Get a specific budget by ID.

        Returns:
            Budget if found, None otherwise
        """
        for budget in await self.fetch_all_budgets():
            if budget.id == budget_id:
                return budget
        return None

    async def create_budget(self, budget: Budget) -> Budget:
        await asyncio.to_thread(self._insert, "budgets", self._dump(budget))
        return budget

    async def update_budget(self, budget: Budget) -> Budget:
        """Persist changes to an existing budget.

        Raises:
            NotFoundError: If the budget was never created
        """
        if not await asyncio.to_thread(self._replace, "budgets", self._dump(budget)):
            raise NotFoundError("Budget", budget.id)
        return budget

    # --- Grocery Item Operations ---

    async def fetch_all_items(self) -> list[GroceryItem]:
        """Load the catalog sorted by name."""
        items = [GroceryItem.model_validate(r) for r in await self._read("items")]
        return sorted(items, key=lambda i: i.name.lower())

    async def fetch_item(self, item_id: UUID) -> GroceryItem | None:
        for item in await self.fetch_all_items():
            if item.id == item_id:
                return item
        return None

    async def search_items(self, query: str) -> list[GroceryItem]:
        """Items whose name, category or brand contains the query."""
        needle = query.lower()
        return [
            item
            for item in await self.fetch_all_items()
            if needle in item.name.lower()
            or needle in item.category.lower()
            or (item.brand is not None and needle in item.brand.lower())
        ]

    async def create_item(self, item: GroceryItem) -> GroceryItem:
        await asyncio.to_thread(self._insert, "items", self._dump(item))
        return item

    async def update_item(self, item: GroceryItem) -> GroceryItem:
        if not await asyncio.to_thread(self._replace, "items", self._dump(item)):
            raise NotFoundError("Item", item.id)
        return item

    # --- Purchase Operations ---

    async def create_purchase(self, purchase: Purchase) -> Purchase:
        """Save a purchase; only the item's ID is stored."""
        record = self._dump(purchase, exclude={"item"})
        record["item_id"] = str(purchase.item_id)
        await asyncio.to_thread(self._insert, "purchases", record)
        return purchase

    async def fetch_all_purchases(self) -> list[Purchase]:
        """Load purchases joined with their items, most recent first."""
        records, items = await run_concurrently([self._read("purchases"), self.fetch_all_items()])
        items_by_id = {str(item.id): item for item in items}

        purchases = []
        for record in records:
            item = items_by_id.get(record["item_id"])
            if item is None:
                logger.warning(
                    "Skipping purchase %s: item %s no longer exists",
                    record.get("id"),
                    record["item_id"],
                )
                continue
            purchases.append(Purchase.model_validate({**record, "item": item}))

        return sorted(purchases, key=lambda p: p.purchase_date, reverse=True)

    async def fetch_purchases_for_item(self, item_id: UUID) -> list[Purchase]:
        return [p for p in await self.fetch_all_purchases() if p.item_id == item_id]

    async def fetch_purchases_between(self, start_date: date, end_date: date) -> list[Purchase]:
        """Purchases made on any day from start_date to end_date inclusive."""
        return [
            p
            for p in await self.fetch_all_purchases()
            if start_date <= p.purchase_date.date() <= end_date
        ]

    # --- Price History Operations ---

    async def add_price_history(self, entry: PriceHistoryEntry) -> PriceHistoryEntry:
        await asyncio.to_thread(self._insert, "price_history", self._dump(entry))
        return entry

    async def fetch_price_history(self, item_id: UUID) -> list[PriceHistoryEntry]:
        return [
            entry
            for entry in (PriceHistoryEntry.model_validate(r) for r in await self._read("price_history"))
            if entry.item_id == item_id
        ]

    # --- Reminder Operations ---

    async def save_reminder(self, reminder: Reminder) -> Reminder:
        """Save a reminder, replacing any with the same identifier."""
        await asyncio.to_thread(self._upsert, "reminders", self._dump(reminder), "identifier")
        return reminder

    async def list_reminders(self) -> list[Reminder]:
        reminders = [Reminder.model_validate(r) for r in await self._read("reminders")]
        return sorted(reminders, key=lambda r: (r.trigger_date, r.identifier))

    # --- Shopping List Operations ---

    async def fetch_all_shopping_lists(self) -> list[ShoppingList]:
        """Load shopping lists, most recently created first."""
        lists = [ShoppingList.model_validate(r) for r in await self._read("shopping_lists")]
        return sorted(lists, key=lambda s: s.created_at, reverse=True)

    async def fetch_shopping_list(self, list_id: UUID) -> ShoppingList | None:
        for shopping_list in await self.fetch_all_shopping_lists():
            if shopping_list.id == list_id:
                return shopping_list
        return None

    async def create_shopping_list(self, shopping_list: ShoppingList) -> ShoppingList:
        await asyncio.to_thread(self._insert, "shopping_lists", self._dump(shopping_list))
        return shopping_list

    async def update_shopping_list(self, shopping_list: ShoppingList) -> ShoppingList:
        """Persist a shopping list together with its items."""
        if not await asyncio.to_thread(self._replace, "shopping_lists", self._dump(shopping_list)):
            raise NotFoundError("Shopping list", shopping_list.id)
        return shopping_list


def create_data_store(
    backend: BackendType = BackendType.JSON,
    data_dir: Path | None = None,
    db_path: Path | None = None,
) -> DataStoreProtocol:
    """Create a data store with the specified backend.

    Args:
        backend: Which backend to use (json or sqlite)
        data_dir: Directory for data files (used by JSON backend, also used
                  as base path for SQLite if db_path not specified)
        db_path: Path to SQLite database file (only used by SQLite backend)

    Returns:
        A DataStore or SQLiteStore instance
    """
    if backend == BackendType.SQLITE:
        from .sqlite_store import SQLiteStore

        if db_path is None and data_dir is not None:
            db_path = data_dir / "grocery_budget.db"

        return SQLiteStore(db_path=db_path)
    else:
        return DataStore(data_dir=data_dir)
