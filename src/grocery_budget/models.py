"""Core data models for Grocery Budget."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from .errors import InvalidInputError


def to_decimal(value: str | int | float | Decimal) -> Decimal:
    """Convert user input to an exact Decimal amount."""
    if isinstance(value, Decimal):
        return value
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidInputError(f"'{value}' is not a valid amount") from None
    if not amount.is_finite():
        raise InvalidInputError(f"'{value}' is not a valid amount")
    return amount


class Category(str, Enum):
    """Default catalog categories."""

    PRODUCE = "Produce"
    DAIRY = "Dairy"
    MEAT = "Meat & Seafood"
    BAKERY = "Bakery"
    FROZEN = "Frozen"
    PANTRY = "Pantry"
    BEVERAGES = "Beverages"
    SNACKS = "Snacks"
    PERSONAL_CARE = "Personal Care"
    HOUSEHOLD = "Household"
    OTHER = "Other"


class Budget(BaseModel):
    """A time-boxed grocery budget."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    amount: Decimal
    start_date: date
    end_date: date
    is_active: bool = True
    category_budgets: dict[str, Decimal] = Field(default_factory=dict)

    @property
    def is_expired(self) -> bool:
        """Check if the budget period has ended."""
        return self.end_date < date.today()

    @property
    def remaining_days(self) -> int:
        """Days until the budget period ends."""
        return (self.end_date - date.today()).days

    @property
    def total_category_budgets(self) -> Decimal:
        return sum(self.category_budgets.values(), Decimal(0))

    @property
    def has_unallocated_budget(self) -> bool:
        return self.total_category_budgets < self.amount

    @property
    def unallocated_amount(self) -> Decimal:
        return self.amount - self.total_category_budgets


class GroceryItem(BaseModel):
    """A catalog item that can be purchased."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    category: str = Category.OTHER.value
    brand: str | None = None
    unit: str = "each"
    notes: str | None = None
    barcode: str | None = None
    average_price: Decimal = Decimal(0)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def display_name(self) -> str:
        """Name prefixed with the brand when one is known."""
        if self.brand:
            return f"{self.brand} {self.name}"
        return self.name


class Purchase(BaseModel):
    """A recorded purchase of a catalog item."""

    id: UUID = Field(default_factory=uuid4)
    item: GroceryItem
    quantity: Decimal = Decimal(1)
    unit_price: Decimal = Decimal(0)
    total_cost: Decimal
    purchase_date: datetime = Field(default_factory=datetime.now)
    store_name: str | None = None

    @property
    def item_id(self) -> UUID:
        return self.item.id


class PriceHistoryEntry(BaseModel):
    """A single observed price for a catalog item."""

    id: UUID = Field(default_factory=uuid4)
    item_id: UUID
    price: Decimal
    recorded_at: datetime = Field(default_factory=datetime.now)
    store_name: str | None = None
    source: str = "manual"  # "manual", "receipt_scan", "purchase"


class BudgetSummary(BaseModel):
    """Spending position of a budget at a point in time."""

    budget: Budget
    total_spent: Decimal
    remaining_amount: Decimal
    percentage_used: float
    spending_by_category: dict[str, Decimal] = Field(default_factory=dict)
    daily_average: Decimal
    projected_total: Decimal
    is_on_track: bool
    days_passed: int
    total_days: int
    days_remaining: int


class PurchaseUrgency(str, Enum):
    """How soon a predicted purchase is due."""

    OVERDUE = "overdue"
    URGENT = "urgent"
    SOON = "soon"
    PLANNED = "planned"
    FUTURE = "future"

    @property
    def priority(self) -> int:
        return {
            PurchaseUrgency.OVERDUE: 5,
            PurchaseUrgency.URGENT: 4,
            PurchaseUrgency.SOON: 3,
            PurchaseUrgency.PLANNED: 2,
            PurchaseUrgency.FUTURE: 1,
        }[self]

    @classmethod
    def from_days(cls, days_until: int) -> "PurchaseUrgency":
        """Classify a days-until-purchase count."""
        if days_until < 0:
            return cls.OVERDUE
        elif days_until <= 1:
            return cls.URGENT
        elif days_until <= 7:
            return cls.SOON
        elif days_until <= 14:
            return cls.PLANNED
        return cls.FUTURE


class PurchasePrediction(BaseModel):
    """Forecast of an item's next purchase."""

    item_name: str
    category: str = Category.OTHER.value
    predicted_date: date
    days_until_purchase: int
    confidence: float = Field(ge=0.0, le=1.0)
    recommended_quantity: Decimal = Decimal(1)
    urgency: PurchaseUrgency = PurchaseUrgency.FUTURE

    @property
    def is_overdue(self) -> bool:
        return self.days_until_purchase < 0


class ItemPurchasePrediction(BaseModel):
    """A catalog item paired with its purchase forecast."""

    item: GroceryItem
    prediction: PurchasePrediction


class ShoppingListItem(BaseModel):
    """A catalog item planned for a shopping trip."""

    id: UUID = Field(default_factory=uuid4)
    item_id: UUID
    quantity: Decimal = Decimal(1)
    estimated_price: Decimal = Decimal(0)

    @property
    def total_estimated_cost(self) -> Decimal:
        return self.quantity * self.estimated_price


class ShoppingList(BaseModel):
    """A planned shopping trip with its own spending cap."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    budget_amount: Decimal
    items: list[ShoppingListItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def total_estimated_cost(self) -> Decimal:
        return sum((entry.total_estimated_cost for entry in self.items), Decimal(0))

    @property
    def remaining_budget(self) -> Decimal:
        return self.budget_amount - self.total_estimated_cost

    @property
    def is_over_budget(self) -> bool:
        return self.total_estimated_cost > self.budget_amount


class PriceAnalysis(BaseModel):
    """How a price compares with an item's recorded prices."""

    current_price: Decimal
    average_price: Decimal
    median_price: Decimal
    lowest_price: Decimal
    highest_price: Decimal
    is_good_deal: bool = False
    is_best_price: bool = False
    savings_percentage: float = 0.0
    price_score: float = Field(default=0.5, ge=0.0, le=1.0)  # 1.0 is the cheapest seen
    recommendation: str


class BestTimeToBuy(BaseModel):
    """Cheapest weekday in an item's price history."""

    weekday: str
    expected_price: Decimal
    highest_weekday_price: Decimal
    savings: Decimal
    confidence: float = Field(ge=0.0, le=1.0)


class ItemPriceRecommendation(BaseModel):
    """Buy-now-or-wait advice for one shopping list entry."""

    item: GroceryItem
    list_item: ShoppingListItem
    analysis: PriceAnalysis
    best_time: BestTimeToBuy
    potential_savings: Decimal
    should_buy_now: bool
    recommendation: str


class PriceSource(str, Enum):
    """Where a scanned product's price came from."""

    REAL = "real"
    UNAVAILABLE = "unavailable"


class ProductInfo(BaseModel):
    """Product metadata resolved from a barcode."""

    barcode: str
    name: str
    brand: str | None = None
    category: str = Category.OTHER.value
    unit: str = "1 unit"
    image_url: str | None = None
    nutritional_info: str | None = None


class PriceQuote(BaseModel):
    """Aggregated observed prices for a barcode."""

    barcode: str
    average_price: Decimal
    min_price: Decimal
    max_price: Decimal
    currency: str
    sample_count: int
    last_updated: date | None = None
    location_country: str | None = None


class ScannedProductInfo(BaseModel):
    """Result of scanning a barcode: metadata plus resolved price."""

    barcode: str
    name: str
    brand: str | None = None
    category: str = Category.OTHER.value
    unit: str = "1 unit"
    image_url: str | None = None
    nutritional_info: str | None = None
    average_price: Decimal | None = None
    price_source: PriceSource = PriceSource.UNAVAILABLE
    price_sample_count: int | None = None
    currency: str | None = None

    def to_grocery_item(self) -> GroceryItem:
        """Build a catalog item from the scanned product."""
        return GroceryItem(
            name=self.name,
            category=map_product_category(self.category),
            brand=self.brand,
            unit=self.unit,
            barcode=self.barcode,
            average_price=self.average_price or Decimal(0),
        )


def map_product_category(product_category: str) -> str:
    """Map a free-text lookup category onto a catalog category."""
    lowered = product_category.lower()

    if "fruit" in lowered or "vegetable" in lowered:
        return Category.PRODUCE.value
    elif "dairy" in lowered or "milk" in lowered or "cheese" in lowered:
        return Category.DAIRY.value
    elif "meat" in lowered or "fish" in lowered or "seafood" in lowered:
        return Category.MEAT.value
    elif "beverage" in lowered or "drink" in lowered:
        return Category.BEVERAGES.value
    elif "frozen" in lowered:
        return Category.FROZEN.value
    elif "bread" in lowered or "bakery" in lowered:
        return Category.BAKERY.value
    return Category.PANTRY.value


class ReminderKind(str, Enum):
    """Types of scheduled reminders."""

    PURCHASE = "purchase"
    BUDGET_ALERT = "budget_alert"


class Reminder(BaseModel):
    """A scheduled user reminder."""

    id: UUID = Field(default_factory=uuid4)
    identifier: str
    kind: ReminderKind
    title: str
    body: str
    trigger_date: date
    item_id: UUID | None = None
    created_at: datetime = Field(default_factory=datetime.now)
