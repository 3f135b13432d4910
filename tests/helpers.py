"""Model builders shared by the test modules."""

from datetime import date, datetime
from decimal import Decimal

from grocery_budget.models import Budget, GroceryItem, Purchase


def make_budget(
    name: str = "October",
    amount: str = "500",
    start: date = date(2025, 10, 1),
    end: date = date(2025, 10, 31),
    **kwargs,
) -> Budget:
    """Helper to create a Budget for testing."""
    return Budget(name=name, amount=Decimal(amount), start_date=start, end_date=end, **kwargs)


def make_item(name: str = "Milk", category: str = "Dairy", brand: str | None = None, **kwargs) -> GroceryItem:
    """Helper to create a GroceryItem for testing."""
    return GroceryItem(name=name, category=category, brand=brand, **kwargs)


def make_purchase(
    item: GroceryItem,
    when: datetime,
    total: str = "4.00",
    quantity: str = "1",
) -> Purchase:
    """Helper to create a Purchase for testing."""
    return Purchase(
        item=item,
        quantity=Decimal(quantity),
        unit_price=Decimal(total) / Decimal(quantity),
        total_cost=Decimal(total),
        purchase_date=when,
    )
