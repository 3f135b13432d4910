"""Grocery Budget - Grocery budgets, replenishment forecasts and barcode lookup."""

from .budget_manager import BudgetManager
from .budget_summary import BudgetSummaryEngine
from .catalog import Catalog
from .config import ConfigManager
from .data_store import BackendType, create_data_store, DataStore
from .errors import (
    BudgetExceededError,
    EmptyNameError,
    GroceryBudgetError,
    InvalidAmountError,
    InvalidBudgetError,
    InvalidDateRangeError,
    InvalidInputError,
    NotFoundError,
    PredictionError,
    ProductLookupError,
)
from .forecaster import ReplenishmentForecaster
from .lookup import ProductLookupPipeline
from .models import (
    BestTimeToBuy,
    Budget,
    BudgetSummary,
    Category,
    GroceryItem,
    ItemPriceRecommendation,
    ItemPurchasePrediction,
    PriceAnalysis,
    PriceHistoryEntry,
    PriceQuote,
    PriceSource,
    ProductInfo,
    Purchase,
    PurchasePrediction,
    PurchaseUrgency,
    Reminder,
    ReminderKind,
    ScannedProductInfo,
    ShoppingList,
    ShoppingListItem,
)
from .notifications import ReminderScheduler
from .openfoodfacts import OpenFoodFactsClient
from .output_formatter import OutputFormatter
from .prediction import IntervalPredictionStrategy
from .pricing import PriceAdvisor
from .purchases import PurchaseLog
from .shopping_lists import ShoppingListManager
from .sqlite_store import SQLiteStore

__version__ = "0.1.0"

__all__ = [
    "BackendType",
    "BestTimeToBuy",
    "Budget",
    "BudgetExceededError",
    "BudgetManager",
    "BudgetSummary",
    "BudgetSummaryEngine",
    "Catalog",
    "Category",
    "ConfigManager",
    "create_data_store",
    "DataStore",
    "EmptyNameError",
    "GroceryBudgetError",
    "GroceryItem",
    "IntervalPredictionStrategy",
    "InvalidAmountError",
    "InvalidBudgetError",
    "InvalidDateRangeError",
    "InvalidInputError",
    "ItemPriceRecommendation",
    "ItemPurchasePrediction",
    "NotFoundError",
    "OpenFoodFactsClient",
    "OutputFormatter",
    "PredictionError",
    "PriceAdvisor",
    "PriceAnalysis",
    "PriceHistoryEntry",
    "PriceQuote",
    "PriceSource",
    "ProductInfo",
    "ProductLookupError",
    "ProductLookupPipeline",
    "Purchase",
    "PurchaseLog",
    "PurchasePrediction",
    "PurchaseUrgency",
    "Reminder",
    "ReminderKind",
    "ReminderScheduler",
    "ReplenishmentForecaster",
    "ScannedProductInfo",
    "ShoppingList",
    "ShoppingListItem",
    "ShoppingListManager",
    "SQLiteStore",
]
