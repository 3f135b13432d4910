"""SQLite-based data persistence for Grocery Budget.

This module provides SQLite database storage as an alternative to JSON files.
It implements the same interface as DataStore for seamless switching.
"""

import asyncio
import json
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any
from uuid import UUID

from .errors import NotFoundError
from .models import (
    Budget,
    GroceryItem,
    PriceHistoryEntry,
    Purchase,
    Reminder,
    ShoppingList,
    ShoppingListItem,
)


def adapt_uuid(uuid_val: UUID) -> str:
    """Adapt UUID to string for SQLite."""
    return str(uuid_val)


def convert_uuid(value: bytes) -> UUID:
    """Convert string back to UUID from SQLite."""
    return UUID(value.decode())


def adapt_datetime(dt: datetime) -> str:
    """Adapt datetime to ISO string for SQLite."""
    return dt.isoformat()


def convert_datetime(value: bytes) -> datetime:
    """Convert ISO string back to datetime from SQLite."""
    return datetime.fromisoformat(value.decode())


def adapt_date(d: date) -> str:
    """Adapt date to ISO string for SQLite."""
    return d.isoformat()


def convert_date(value: bytes) -> date:
    """Convert ISO string back to date from SQLite."""
    return date.fromisoformat(value.decode())


def adapt_decimal(d: Decimal) -> str:
    """Adapt Decimal to its exact string form for SQLite."""
    return str(d)


def convert_decimal(value: bytes) -> Decimal:
    """Convert string back to Decimal from SQLite."""
    return Decimal(value.decode())


# Register adapters and converters
sqlite3.register_adapter(UUID, adapt_uuid)
sqlite3.register_converter("UUID", convert_uuid)
sqlite3.register_adapter(datetime, adapt_datetime)
sqlite3.register_converter("DATETIME", convert_datetime)
sqlite3.register_adapter(date, adapt_date)
sqlite3.register_converter("DATE", convert_date)
# DECIMAL_TEXT columns have TEXT affinity, so amounts are stored as exact strings
sqlite3.register_adapter(Decimal, adapt_decimal)
sqlite3.register_converter("DECIMAL_TEXT", convert_decimal)


_PURCHASE_SELECT = """
    SELECT p.id, p.quantity, p.unit_price, p.total_cost, p.purchase_date, p.store_name,
           i.id AS item_id, i.name, i.category, i.brand, i.unit, i.notes, i.barcode,
           i.average_price, i.created_at, i.updated_at
    FROM purchases p
    JOIN grocery_items i ON i.id = p.item_id
"""


class SQLiteStore:
    """Manages SQLite database persistence for budget data."""

    SCHEMA_VERSION = 1

    def __init__(self, db_path: Path | None = None):
        """Initialize SQLite store.

        Args:
            db_path: Path to the SQLite database file. Defaults to ./data/grocery_budget.db
        """
        if db_path is None:
            db_path = Path.cwd() / "data" / "grocery_budget.db"
        self.db_path = db_path
        self._ensure_directories()
        self._init_database()

    def _ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def _get_connection(self):
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(
            self.db_path,
            detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self) -> None:
        """Initialize database schema if not exists."""
        with self._get_connection() as conn:
            conn.executescript("""
                -- Schema version tracking
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                );

                CREATE TABLE IF NOT EXISTS budgets (
                    id UUID PRIMARY KEY,
                    name TEXT NOT NULL,
                    amount DECIMAL_TEXT NOT NULL,
                    start_date DATE NOT NULL,
                    end_date DATE NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    category_budgets TEXT NOT NULL DEFAULT '{}'
                );

                CREATE TABLE IF NOT EXISTS grocery_items (
                    id UUID PRIMARY KEY,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL,
                    brand TEXT,
                    unit TEXT NOT NULL,
                    notes TEXT,
                    barcode TEXT,
                    average_price DECIMAL_TEXT NOT NULL DEFAULT '0',
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL
                );

                CREATE TABLE IF NOT EXISTS purchases (
                    id UUID PRIMARY KEY,
                    item_id UUID NOT NULL REFERENCES grocery_items(id),
                    quantity DECIMAL_TEXT NOT NULL,
                    unit_price DECIMAL_TEXT NOT NULL,
                    total_cost DECIMAL_TEXT NOT NULL,
                    purchase_date DATETIME NOT NULL,
                    store_name TEXT
                );

                CREATE TABLE IF NOT EXISTS price_history (
                    id UUID PRIMARY KEY,
                    item_id UUID NOT NULL REFERENCES grocery_items(id),
                    price DECIMAL_TEXT NOT NULL,
                    recorded_at DATETIME NOT NULL,
                    store_name TEXT,
                    source TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS reminders (
                    identifier TEXT PRIMARY KEY,
                    id UUID NOT NULL,
                    kind TEXT NOT NULL,
                    title TEXT NOT NULL,
                    body TEXT NOT NULL,
                    trigger_date DATE NOT NULL,
                    item_id UUID,
                    created_at DATETIME NOT NULL
                );

                CREATE TABLE IF NOT EXISTS shopping_lists (
                    id UUID PRIMARY KEY,
                    name TEXT NOT NULL,
                    budget_amount DECIMAL_TEXT NOT NULL,
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL
                );

                CREATE TABLE IF NOT EXISTS shopping_list_items (
                    id UUID PRIMARY KEY,
                    list_id UUID NOT NULL REFERENCES shopping_lists(id) ON DELETE CASCADE,
                    item_id UUID NOT NULL REFERENCES grocery_items(id),
                    position INTEGER NOT NULL,
                    quantity DECIMAL_TEXT NOT NULL,
                    estimated_price DECIMAL_TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_budgets_active ON budgets(is_active);
                CREATE INDEX IF NOT EXISTS idx_purchases_item ON purchases(item_id);
                CREATE INDEX IF NOT EXISTS idx_purchases_date ON purchases(purchase_date);
                CREATE INDEX IF NOT EXISTS idx_price_history_item ON price_history(item_id);
                CREATE INDEX IF NOT EXISTS idx_shopping_list_items_list
                    ON shopping_list_items(list_id);
            """)
            conn.execute(
                "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    # --- Row mapping ---

    @staticmethod
    def _row_to_budget(row: sqlite3.Row) -> Budget:
        data = dict(row)
        data["is_active"] = bool(data["is_active"])
        data["category_budgets"] = json.loads(data["category_budgets"])
        return Budget.model_validate(data)

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> GroceryItem:
        return GroceryItem.model_validate(dict(row))

    @staticmethod
    def _row_to_purchase(row: sqlite3.Row) -> Purchase:
        data = dict(row)
        item = GroceryItem(
            id=data["item_id"],
            name=data["name"],
            category=data["category"],
            brand=data["brand"],
            unit=data["unit"],
            notes=data["notes"],
            barcode=data["barcode"],
            average_price=data["average_price"],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
        return Purchase(
            id=data["id"],
            item=item,
            quantity=data["quantity"],
            unit_price=data["unit_price"],
            total_cost=data["total_cost"],
            purchase_date=data["purchase_date"],
            store_name=data["store_name"],
        )

    # --- Synchronous queries (run in worker threads) ---

    def _query(self, sql: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        with self._get_connection() as conn:
            return conn.execute(sql, params).fetchall()

    def _execute(self, sql: str, params: tuple[Any, ...] = ()) -> int:
        """Run a write statement and return the affected row count."""
        with self._get_connection() as conn:
            return conn.execute(sql, params).rowcount

    async def _fetch(self, sql: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        return await asyncio.to_thread(self._query, sql, params)

    async def _write(self, sql: str, params: tuple[Any, ...] = ()) -> int:
        return await asyncio.to_thread(self._execute, sql, params)

    def _load_shopping_lists(self, where: str = "", params: tuple[Any, ...] = ()) -> list[ShoppingList]:
        """Load lists matching ``where`` (on alias ``s``) with their items in one connection."""
        with self._get_connection() as conn:
            list_rows = conn.execute(
                f"SELECT * FROM shopping_lists s {where} ORDER BY s.created_at DESC", params
            ).fetchall()
            item_rows = conn.execute(
                f"""SELECT si.* FROM shopping_list_items si
                    JOIN shopping_lists s ON s.id = si.list_id {where}
                    ORDER BY si.position""",
                params,
            ).fetchall()

        items_by_list: dict[UUID, list[ShoppingListItem]] = {}
        for row in item_rows:
            items_by_list.setdefault(row["list_id"], []).append(
                ShoppingListItem(
                    id=row["id"],
                    item_id=row["item_id"],
                    quantity=row["quantity"],
                    estimated_price=row["estimated_price"],
                )
            )
        return [
            ShoppingList.model_validate({**dict(row), "items": items_by_list.get(row["id"], [])})
            for row in list_rows
        ]

    @staticmethod
    def _insert_list_items(conn: sqlite3.Connection, shopping_list: ShoppingList) -> None:
        conn.executemany(
            """INSERT INTO shopping_list_items
               (id, list_id, item_id, position, quantity, estimated_price)
               VALUES (?, ?, ?, ?, ?, ?)""",
            [
                (
                    entry.id,
                    shopping_list.id,
                    entry.item_id,
                    position,
                    entry.quantity,
                    entry.estimated_price,
                )
                for position, entry in enumerate(shopping_list.items)
            ],
        )

    def _insert_shopping_list(self, shopping_list: ShoppingList) -> None:
        with self._get_connection() as conn:
            conn.execute(
                """INSERT INTO shopping_lists (id, name, budget_amount, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    shopping_list.id,
                    shopping_list.name,
                    shopping_list.budget_amount,
                    shopping_list.created_at,
                    shopping_list.updated_at,
                ),
            )
            self._insert_list_items(conn, shopping_list)

    def _replace_shopping_list(self, shopping_list: ShoppingList) -> int:
        """Rewrite a list and its items in one transaction. Returns the updated row count."""
        with self._get_connection() as conn:
            updated = conn.execute(
                """UPDATE shopping_lists SET name = ?, budget_amount = ?, updated_at = ?
                   WHERE id = ?""",
                (
                    shopping_list.name,
                    shopping_list.budget_amount,
                    shopping_list.updated_at,
                    shopping_list.id,
                ),
            ).rowcount
            if updated:
                conn.execute("DELETE FROM shopping_list_items WHERE list_id = ?", (shopping_list.id,))
                self._insert_list_items(conn, shopping_list)
            return updated

    # --- Budget Operations ---

    async def fetch_all_budgets(self) -> list[Budget]:
        rows = await self._fetch("SELECT * FROM budgets ORDER BY start_date DESC")
        return [self._row_to_budget(row) for row in rows]

    async def fetch_active_budgets(self) -> list[Budget]:
        rows = await self._fetch(
            "SELECT * FROM budgets WHERE is_active = 1 ORDER BY start_date DESC"
        )
        return [self._row_to_budget(row) for row in rows]

    async def fetch_budget(self, budget_id: UUID) -> Budget | None:
        rows = await self._fetch("SELECT * FROM budgets WHERE id = ?", (budget_id,))
        return self._row_to_budget(rows[0]) if rows else None

    async def create_budget(self, budget: Budget) -> Budget:
        await self._write(
            """INSERT INTO budgets
               (id, name, amount, start_date, end_date, is_active, category_budgets)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                budget.id,
                budget.name,
                budget.amount,
                budget.start_date,
                budget.end_date,
                int(budget.is_active),
                json.dumps({k: str(v) for k, v in budget.category_budgets.items()}),
            ),
        )
        return budget

    async def update_budget(self, budget: Budget) -> Budget:
        """Persist changes to an existing budget.

        Raises:
            NotFoundError: If the budget was never created
        """
        updated = await self._write(
            """UPDATE budgets
               SET name = ?, amount = ?, start_date = ?, end_date = ?,
                   is_active = ?, category_budgets = ?
               WHERE id = ?""",
            (
                budget.name,
                budget.amount,
                budget.start_date,
                budget.end_date,
                int(budget.is_active),
                json.dumps({k: str(v) for k, v in budget.category_budgets.items()}),
                budget.id,
            ),
        )
        if updated == 0:
            raise NotFoundError("Budget", budget.id)
        return budget

    # --- Grocery Item Operations ---

    async def fetch_all_items(self) -> list[GroceryItem]:
        rows = await self._fetch("SELECT * FROM grocery_items ORDER BY name COLLATE NOCASE")
        return [self._row_to_item(row) for row in rows]

    async def fetch_item(self, item_id: UUID) -> GroceryItem | None:
        rows = await self._fetch("SELECT * FROM grocery_items WHERE id = ?", (item_id,))
        return self._row_to_item(rows[0]) if rows else None

    async def search_items(self, query: str) -> list[GroceryItem]:
        """Items whose name, category or brand contains the query."""
        pattern = f"%{query.lower()}%"
        rows = await self._fetch(
            """SELECT * FROM grocery_items
               WHERE lower(name) LIKE ? OR lower(category) LIKE ? OR lower(brand) LIKE ?
               ORDER BY name COLLATE NOCASE""",
            (pattern, pattern, pattern),
        )
        return [self._row_to_item(row) for row in rows]

    async def create_item(self, item: GroceryItem) -> GroceryItem:
        await self._write(
            """INSERT INTO grocery_items
               (id, name, category, brand, unit, notes, barcode, average_price,
                created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                item.id,
                item.name,
                item.category,
                item.brand,
                item.unit,
                item.notes,
                item.barcode,
                item.average_price,
                item.created_at,
                item.updated_at,
            ),
        )
        return item

    async def update_item(self, item: GroceryItem) -> GroceryItem:
        updated = await self._write(
            """UPDATE grocery_items
               SET name = ?, category = ?, brand = ?, unit = ?, notes = ?, barcode = ?,
                   average_price = ?, updated_at = ?
               WHERE id = ?""",
            (
                item.name,
                item.category,
                item.brand,
                item.unit,
                item.notes,
                item.barcode,
                item.average_price,
                item.updated_at,
                item.id,
            ),
        )
        if updated == 0:
            raise NotFoundError("Item", item.id)
        return item

    # --- Purchase Operations ---

    async def create_purchase(self, purchase: Purchase) -> Purchase:
        await self._write(
            """INSERT INTO purchases
               (id, item_id, quantity, unit_price, total_cost, purchase_date, store_name)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                purchase.id,
                purchase.item_id,
                purchase.quantity,
                purchase.unit_price,
                purchase.total_cost,
                purchase.purchase_date,
                purchase.store_name,
            ),
        )
        return purchase

    async def fetch_all_purchases(self) -> list[Purchase]:
        rows = await self._fetch(_PURCHASE_SELECT + " ORDER BY p.purchase_date DESC")
        return [self._row_to_purchase(row) for row in rows]

    async def fetch_purchases_for_item(self, item_id: UUID) -> list[Purchase]:
        rows = await self._fetch(
            _PURCHASE_SELECT + " WHERE p.item_id = ? ORDER BY p.purchase_date DESC",
            (item_id,),
        )
        return [self._row_to_purchase(row) for row in rows]

    async def fetch_purchases_between(self, start_date: date, end_date: date) -> list[Purchase]:
        """Purchases made on any day from start_date to end_date inclusive."""
        rows = await self._fetch(
            _PURCHASE_SELECT
            + " WHERE date(p.purchase_date) BETWEEN ? AND ? ORDER BY p.purchase_date DESC",
            (start_date, end_date),
        )
        return [self._row_to_purchase(row) for row in rows]

    # --- Price History Operations ---

    async def add_price_history(self, entry: PriceHistoryEntry) -> PriceHistoryEntry:
        await self._write(
            """INSERT INTO price_history
               (id, item_id, price, recorded_at, store_name, source)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                entry.id,
                entry.item_id,
                entry.price,
                entry.recorded_at,
                entry.store_name,
                entry.source,
            ),
        )
        return entry

    async def fetch_price_history(self, item_id: UUID) -> list[PriceHistoryEntry]:
        rows = await self._fetch("SELECT * FROM price_history WHERE item_id = ?", (item_id,))
        return [PriceHistoryEntry.model_validate(dict(row)) for row in rows]

    # --- Reminder Operations ---

    async def save_reminder(self, reminder: Reminder) -> Reminder:
        """Save a reminder, replacing any with the same identifier."""
        await self._write(
            """INSERT OR REPLACE INTO reminders
               (identifier, id, kind, title, body, trigger_date, item_id, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                reminder.identifier,
                reminder.id,
                reminder.kind.value,
                reminder.title,
                reminder.body,
                reminder.trigger_date,
                reminder.item_id,
                reminder.created_at,
            ),
        )
        return reminder

    async def list_reminders(self) -> list[Reminder]:
        rows = await self._fetch("SELECT * FROM reminders ORDER BY trigger_date, identifier")
        return [Reminder.model_validate(dict(row)) for row in rows]

    # --- Shopping List Operations ---

    async def fetch_all_shopping_lists(self) -> list[ShoppingList]:
        return await asyncio.to_thread(self._load_shopping_lists)

    async def fetch_shopping_list(self, list_id: UUID) -> ShoppingList | None:
        lists = await asyncio.to_thread(self._load_shopping_lists, "WHERE s.id = ?", (list_id,))
        return lists[0] if lists else None

    async def create_shopping_list(self, shopping_list: ShoppingList) -> ShoppingList:
        await asyncio.to_thread(self._insert_shopping_list, shopping_list)
        return shopping_list

    async def update_shopping_list(self, shopping_list: ShoppingList) -> ShoppingList:
        """Persist a shopping list together with its items."""
        if await asyncio.to_thread(self._replace_shopping_list, shopping_list) == 0:
            raise NotFoundError("Shopping list", shopping_list.id)
        return shopping_list
