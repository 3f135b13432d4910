"""CLI entry point for Grocery Budget."""

import asyncio
import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Annotated

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from .budget_manager import BudgetManager
from .budget_summary import BudgetSummaryEngine
from .catalog import Catalog
from .config import ConfigManager
from .data_store import BackendType, create_data_store
from .errors import BudgetExceededError, InvalidInputError, NotFoundError, ProductLookupError
from .forecaster import ReplenishmentForecaster
from .lookup import ProductLookupPipeline
from .models import (
    Budget,
    GroceryItem,
    ItemPriceRecommendation,
    ItemPurchasePrediction,
    ShoppingList,
    to_decimal,
)
from .notifications import ReminderScheduler
from .openfoodfacts import OpenFoodFactsClient
from .output_formatter import OutputFormatter, format_money
from .prediction import IntervalPredictionStrategy
from .pricing import PriceAdvisor
from .purchases import PurchaseLog
from .repositories import DataStoreProtocol
from .shopping_lists import AUTO_ADD_MAX_DAYS, ShoppingListManager

app = typer.Typer(
    name="grocery-budget",
    help="Grocery budgets, restock forecasts and barcode lookup",
    no_args_is_help=True,
)

# Global state for formatter and config (set by callback)
formatter: OutputFormatter = OutputFormatter()
config: ConfigManager | None = None
data_store: DataStoreProtocol | None = None


def get_config() -> ConfigManager:
    """Get or create ConfigManager instance."""
    global config
    if config is None:
        config = ConfigManager()
    return config


def get_data_store() -> DataStoreProtocol:
    """Get or create the data store using config values."""
    global data_store
    if data_store is None:
        cfg = get_config()
        backend = BackendType(cfg.data.backend)
        data_store = create_data_store(backend=backend, data_dir=cfg.data.storage_dir)
    return data_store


def get_catalog() -> Catalog:
    store = get_data_store()
    return Catalog(store, store)


def get_list_manager() -> ShoppingListManager:
    store = get_data_store()
    return ShoppingListManager(store, store)


def _money(amount: Decimal) -> str:
    return format_money(amount, get_config().defaults.currency)


def configure_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def parse_allocations(values: list[str] | None) -> dict[str, Decimal]:
    """Parse ``CATEGORY=AMOUNT`` pairs into category allocations."""
    allocations: dict[str, Decimal] = {}
    for value in values or []:
        category, sep, amount = value.partition("=")
        if not sep or not category.strip():
            raise InvalidInputError(f"Category allocation '{value}' must look like CATEGORY=AMOUNT")
        allocations[category.strip()] = to_decimal(amount)
    return allocations


def _budget_data(budget: Budget) -> dict:
    """Budget fields plus its period status and unallocated remainder."""
    data = budget.model_dump(mode="json")
    data["is_expired"] = budget.is_expired
    data["remaining_days"] = budget.remaining_days
    if budget.category_budgets and budget.has_unallocated_budget:
        data["unallocated_amount"] = str(budget.unallocated_amount)
    return data


def _item_data(item: GroceryItem) -> dict:
    data = item.model_dump(mode="json")
    data["display_name"] = item.display_name
    return data


def _prediction_data(entry: ItemPurchasePrediction) -> dict:
    data = entry.model_dump(mode="json")
    data["item"] = _item_data(entry.item)
    data["prediction"]["is_overdue"] = entry.prediction.is_overdue
    return data


def _shopping_list_data(shopping_list: ShoppingList, names: dict | None = None) -> dict:
    """Shopping list fields plus cost totals; ``names`` maps item IDs to display names."""
    names = names or {}
    data = shopping_list.model_dump(mode="json")
    data["total_estimated_cost"] = str(shopping_list.total_estimated_cost)
    data["remaining_budget"] = str(shopping_list.remaining_budget)
    data["is_over_budget"] = shopping_list.is_over_budget
    for entry, entry_data in zip(shopping_list.items, data["items"]):
        entry_data["name"] = names.get(entry.item_id)
        entry_data["total_estimated_cost"] = str(entry.total_estimated_cost)
    return data


def _recommendation_data(recommendation: ItemPriceRecommendation) -> dict:
    data = recommendation.model_dump(mode="json")
    data["item"] = _item_data(recommendation.item)
    return data


@app.callback()
def main(
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON for programmatic use")
    ] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
) -> None:
    """Grocery Budget CLI - Track grocery spending and know what to buy next."""
    global formatter, config, data_store

    # Load config early
    config = ConfigManager()
    formatter = OutputFormatter(json_mode=json_output, currency=config.defaults.currency)
    configure_logging("DEBUG" if verbose else config.logging.level)

    # CLI --data-dir overrides config, which overrides default
    effective_data_dir = data_dir if data_dir else config.data.storage_dir
    backend = BackendType(config.data.backend)

    data_store = create_data_store(backend=backend, data_dir=effective_data_dir)


# Budget subcommand group
budget_app = typer.Typer(help="Budget management")
app.add_typer(budget_app, name="budget")


@budget_app.command("create")
def budget_create(
    name: Annotated[str, typer.Argument(help="Budget name")],
    amount: Annotated[str, typer.Argument(help="Budget amount")],
    end: Annotated[
        datetime, typer.Option("--end", "-e", formats=["%Y-%m-%d"], help="Last day of the period")
    ],
    start: Annotated[
        datetime | None,
        typer.Option("--start", "-s", formats=["%Y-%m-%d"], help="First day (default: today)"),
    ] = None,
    category: Annotated[
        list[str] | None,
        typer.Option("--category", "-c", help="Category allocation as CATEGORY=AMOUNT"),
    ] = None,
) -> None:
    """Create a budget, deactivating any active budget it overlaps."""
    try:
        budget = Budget(
            name=name,
            amount=to_decimal(amount),
            start_date=start.date() if start else date.today(),
            end_date=end.date(),
            category_budgets=parse_allocations(category),
        )
        created = asyncio.run(BudgetManager(get_data_store()).create_budget(budget))

        output_data = {
            "success": True,
            "message": f"Created budget {created.name}",
            "data": {"budget": _budget_data(created)},
        }
        formatter.output(output_data, output_data["message"])
    except InvalidInputError as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@budget_app.command("list")
def budget_list(
    active: Annotated[bool, typer.Option("--active", help="Only active budgets")] = False,
) -> None:
    """List budgets, newest first."""
    try:
        budgets = asyncio.run(BudgetManager(get_data_store()).list_budgets(active_only=active))

        output_data = {
            "success": True,
            "data": {"budgets": [_budget_data(b) for b in budgets]},
        }
        formatter.output(output_data)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@budget_app.command("show")
def budget_show(
    budget_id: Annotated[str, typer.Argument(help="Budget ID")],
) -> None:
    """Show one budget with its period status."""
    try:
        budget = asyncio.run(BudgetManager(get_data_store()).get_budget(budget_id))

        output_data = {"success": True, "data": {"budget": _budget_data(budget)}}
        formatter.output(output_data)
    except NotFoundError as e:
        formatter.error(str(e), error_code="NOT_FOUND")
        raise typer.Exit(code=1)
    except ValueError as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


async def _summarize(budget_id: str | None) -> tuple[dict, bool]:
    store = get_data_store()
    cfg = get_config()

    if budget_id is None:
        active = await BudgetManager(store).list_budgets(active_only=True)
        if not active:
            raise NotFoundError("Active budget", "any")
        budget_id = str(active[0].id)

    engine = BudgetSummaryEngine(
        store,
        store,
        notifier=ReminderScheduler(store),
        alert_threshold=cfg.budget.alert_threshold,
    )
    summary = await engine.summarize(budget_id)
    alerted = await engine.check_alert(summary)
    return summary.model_dump(mode="json"), alerted


@budget_app.command("summary")
def budget_summary(
    budget_id: Annotated[
        str | None, typer.Argument(help="Budget ID (default: newest active budget)")
    ] = None,
) -> None:
    """Show spending against a budget."""
    try:
        summary, alerted = asyncio.run(_summarize(budget_id))

        output_data = {
            "success": True,
            "data": {"summary": summary, "alert_scheduled": alerted},
        }
        formatter.output(output_data)
        if alerted and not formatter.json_mode:
            formatter.warning(
                f"You've used {int(summary['percentage_used'])}% of this budget"
            )
    except NotFoundError as e:
        formatter.error(str(e), error_code="NOT_FOUND")
        raise typer.Exit(code=1)
    except (InvalidInputError, ValueError) as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


# Catalog item subcommand group
item_app = typer.Typer(help="Catalog items and prices")
app.add_typer(item_app, name="item")


@item_app.command("add")
def item_add(
    name: Annotated[str, typer.Argument(help="Item name")],
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="Product category")
    ] = None,
    brand: Annotated[str | None, typer.Option("--brand", "-b", help="Brand")] = None,
    unit: Annotated[str | None, typer.Option("--unit", "-u", help="Unit of measurement")] = None,
    barcode: Annotated[str | None, typer.Option("--barcode", help="Product barcode")] = None,
    price: Annotated[str | None, typer.Option("--price", "-p", help="Typical price")] = None,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Additional notes")] = None,
) -> None:
    """Add an item to the catalog."""
    try:
        cfg = get_config()
        item = asyncio.run(
            get_catalog().add_item(
                name,
                category=category or cfg.defaults.category,
                brand=brand,
                unit=unit or cfg.defaults.unit,
                barcode=barcode,
                average_price=to_decimal(price) if price is not None else None,
                notes=notes,
            )
        )

        output_data = {
            "success": True,
            "message": f"Added {item.name} to the catalog",
            "data": {"item": _item_data(item)},
        }
        formatter.output(output_data, output_data["message"])
    except InvalidInputError as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@item_app.command("search")
def item_search(
    query: Annotated[str, typer.Argument(help="Search text (empty lists everything)")] = "",
) -> None:
    """Search the catalog, best matches first."""
    try:
        items = asyncio.run(get_catalog().search(query))

        output_data = {
            "success": True,
            "data": {"query": query, "items": [_item_data(i) for i in items]},
        }
        formatter.output(output_data)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


async def _price_history(item_id: str) -> dict:
    catalog = get_catalog()
    item = await catalog.get_item(item_id)
    history = await catalog.price_history(item.id)
    return {
        "item": _item_data(item),
        "price_history": [entry.model_dump(mode="json") for entry in history],
    }


@item_app.command("prices")
def item_prices(
    item_id: Annotated[str, typer.Argument(help="Item ID")],
) -> None:
    """Show recorded prices for an item."""
    try:
        output_data = {"success": True, "data": asyncio.run(_price_history(item_id))}
        formatter.output(output_data)
    except NotFoundError as e:
        formatter.error(str(e), error_code="NOT_FOUND")
        raise typer.Exit(code=1)
    except ValueError as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@item_app.command("record-price")
def item_record_price(
    item_id: Annotated[str, typer.Argument(help="Item ID")],
    price: Annotated[str, typer.Argument(help="Observed price")],
    store: Annotated[str | None, typer.Option("--store", "-s", help="Store name")] = None,
) -> None:
    """Record an observed price for an item."""
    try:
        entry = asyncio.run(get_catalog().record_price(item_id, to_decimal(price), store_name=store))

        output_data = {
            "success": True,
            "message": f"Recorded price {_money(entry.price)}",
            "data": {"price_entry": entry.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except NotFoundError as e:
        formatter.error(str(e), error_code="NOT_FOUND")
        raise typer.Exit(code=1)
    except (InvalidInputError, ValueError) as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


# Purchase subcommand group
purchase_app = typer.Typer(help="Purchase log")
app.add_typer(purchase_app, name="purchase")


@purchase_app.command("add")
def purchase_add(
    item_id: Annotated[str, typer.Argument(help="Item ID")],
    quantity: Annotated[str, typer.Option("--quantity", "-q", help="Quantity bought")] = "1",
    price: Annotated[str | None, typer.Option("--price", "-p", help="Unit price paid")] = None,
    total: Annotated[str | None, typer.Option("--total", "-t", help="Total paid")] = None,
    on: Annotated[
        datetime | None,
        typer.Option("--date", "-d", formats=["%Y-%m-%d"], help="Purchase date (default: now)"),
    ] = None,
    store: Annotated[str | None, typer.Option("--store", "-s", help="Store name")] = None,
) -> None:
    """Record a purchase."""
    try:
        log = PurchaseLog(get_data_store(), get_catalog())
        purchase = asyncio.run(
            log.record_purchase(
                item_id,
                quantity=to_decimal(quantity),
                unit_price=to_decimal(price) if price is not None else None,
                total_cost=to_decimal(total) if total is not None else None,
                purchase_date=on,
                store_name=store,
            )
        )

        output_data = {
            "success": True,
            "message": f"Recorded {purchase.item.name} for {_money(purchase.total_cost)}",
            "data": {"purchase": purchase.model_dump(mode="json")},
        }
        formatter.output(output_data, output_data["message"])
    except NotFoundError as e:
        formatter.error(str(e), error_code="NOT_FOUND")
        raise typer.Exit(code=1)
    except (InvalidInputError, ValueError) as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@purchase_app.command("list")
def purchase_list(
    since: Annotated[
        datetime | None, typer.Option("--since", formats=["%Y-%m-%d"], help="First day")
    ] = None,
    until: Annotated[
        datetime | None, typer.Option("--until", formats=["%Y-%m-%d"], help="Last day")
    ] = None,
) -> None:
    """List purchases, most recent first."""
    try:
        store = get_data_store()
        purchases = asyncio.run(
            PurchaseLog(store, get_catalog()).list_purchases(
                since.date() if since else None,
                until.date() if until else None,
            )
        )

        output_data = {
            "success": True,
            "data": {"purchases": [p.model_dump(mode="json") for p in purchases]},
        }
        formatter.output(output_data)
    except InvalidInputError as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


# Shopping list subcommand group
list_app = typer.Typer(help="Shopping lists and price advice")
app.add_typer(list_app, name="list")


async def _list_view(shopping_list: ShoppingList) -> dict:
    items = await get_data_store().fetch_all_items()
    return _shopping_list_data(shopping_list, {item.id: item.display_name for item in items})


@list_app.command("create")
def list_create(
    name: Annotated[str, typer.Argument(help="List name")],
    budget: Annotated[str, typer.Argument(help="Spending cap for this trip")],
) -> None:
    """Create an empty shopping list."""
    try:
        created = asyncio.run(get_list_manager().create_list(name, to_decimal(budget)))

        output_data = {
            "success": True,
            "message": f"Created shopping list {created.name}",
            "data": {"shopping_list": _shopping_list_data(created)},
        }
        formatter.output(output_data, output_data["message"])
    except InvalidInputError as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


async def _show_lists(list_id: str | None) -> dict:
    manager = get_list_manager()
    if list_id is None:
        return {"shopping_lists": [_shopping_list_data(s) for s in await manager.list_lists()]}
    return {"shopping_list": await _list_view(await manager.get_list(list_id))}


@list_app.command("show")
def list_show(
    list_id: Annotated[str | None, typer.Argument(help="List ID (default: all lists)")] = None,
) -> None:
    """Show a shopping list, or every list."""
    try:
        output_data = {"success": True, "data": asyncio.run(_show_lists(list_id))}
        formatter.output(output_data)
    except NotFoundError as e:
        formatter.error(str(e), error_code="NOT_FOUND")
        raise typer.Exit(code=1)
    except ValueError as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


async def _add_to_list(
    list_id: str, item_id: str, quantity: Decimal, price: Decimal | None
) -> dict:
    updated = await get_list_manager().add_item(list_id, item_id, quantity, price)
    return await _list_view(updated)


@list_app.command("add")
def list_add(
    list_id: Annotated[str, typer.Argument(help="List ID")],
    item_id: Annotated[str, typer.Argument(help="Item ID")],
    quantity: Annotated[str, typer.Option("--quantity", "-q", help="Quantity to buy")] = "1",
    price: Annotated[
        str | None, typer.Option("--price", "-p", help="Estimated unit price (default: average)")
    ] = None,
) -> None:
    """Add a catalog item to a shopping list."""
    try:
        shopping_list = asyncio.run(
            _add_to_list(
                list_id,
                item_id,
                to_decimal(quantity),
                to_decimal(price) if price is not None else None,
            )
        )

        output_data = {
            "success": True,
            "message": f"Updated {shopping_list['name']}",
            "data": {"shopping_list": shopping_list},
        }
        formatter.output(output_data, output_data["message"])
    except BudgetExceededError as e:
        formatter.error(str(e), error_code="BUDGET_EXCEEDED")
        raise typer.Exit(code=1)
    except NotFoundError as e:
        formatter.error(str(e), error_code="NOT_FOUND")
        raise typer.Exit(code=1)
    except (InvalidInputError, ValueError) as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


async def _auto_add(list_id: str) -> tuple[dict, list[str]]:
    store = get_data_store()
    manager = get_list_manager()
    await manager.get_list(list_id)

    forecaster = ReplenishmentForecaster(
        store,
        store,
        IntervalPredictionStrategy(),
        horizon_days=AUTO_ADD_MAX_DAYS,
        min_history=get_config().forecast.min_history,
    )
    predictions = await forecaster.forecast_upcoming()
    shopping_list, added = await manager.add_predicted_items(list_id, predictions)
    return await _list_view(shopping_list), [entry.item.display_name for entry in added]


@list_app.command("auto-add")
def list_auto_add(
    list_id: Annotated[str, typer.Argument(help="List ID")],
) -> None:
    """Add the items the forecast says are due within a few days."""
    try:
        shopping_list, added = asyncio.run(_auto_add(list_id))
    except NotFoundError as e:
        formatter.error(str(e), error_code="NOT_FOUND")
        raise typer.Exit(code=1)
    except ValueError as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    if not added:
        formatter.success(f"Nothing is due within {AUTO_ADD_MAX_DAYS} days")
        return

    output_data = {
        "success": True,
        "message": f"Added {', '.join(added)} to {shopping_list['name']}",
        "data": {"shopping_list": shopping_list, "added": added},
    }
    formatter.output(output_data, output_data["message"])


@list_app.command("prices")
def list_prices(
    list_id: Annotated[str, typer.Argument(help="List ID")],
) -> None:
    """Advise whether to buy each list item now or wait for a better price."""
    try:
        store = get_data_store()
        recommendations = asyncio.run(PriceAdvisor(store, store, store).recommendations(list_id))

        output_data = {
            "success": True,
            "data": {"recommendations": [_recommendation_data(r) for r in recommendations]},
        }
        formatter.output(output_data)
    except NotFoundError as e:
        formatter.error(str(e), error_code="NOT_FOUND")
        raise typer.Exit(code=1)
    except ValueError as e:
        formatter.error(str(e), error_code="INVALID_INPUT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def forecast(
    no_reminders: Annotated[
        bool, typer.Option("--no-reminders", help="Do not schedule purchase reminders")
    ] = False,
) -> None:
    """Forecast which items need buying in the coming days."""
    try:
        store = get_data_store()
        cfg = get_config()
        forecaster = ReplenishmentForecaster(
            store,
            store,
            IntervalPredictionStrategy(),
            notifier=None if no_reminders else ReminderScheduler(store),
            horizon_days=cfg.forecast.horizon_days,
            reminder_days=cfg.forecast.reminder_days,
            min_history=cfg.forecast.min_history,
        )
        upcoming = asyncio.run(forecaster.forecast_upcoming())

        output_data = {
            "success": True,
            "data": {
                "horizon_days": cfg.forecast.horizon_days,
                "predictions": [_prediction_data(p) for p in upcoming],
            },
        }
        message = ""
        if upcoming:
            message = f"{len(upcoming)} item(s) due within {cfg.forecast.horizon_days} days"
            overdue = sum(1 for p in upcoming if p.prediction.is_overdue)
            if overdue:
                message += f", {overdue} overdue"
        formatter.output(output_data, message)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def reminders() -> None:
    """List scheduled reminders."""
    try:
        scheduled = asyncio.run(ReminderScheduler(get_data_store()).list_reminders())

        output_data = {
            "success": True,
            "data": {"reminders": [r.model_dump(mode="json") for r in scheduled]},
        }
        formatter.output(output_data)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


async def _scan(barcode: str, save: bool) -> tuple[dict | None, dict | None]:
    cfg = get_config()
    lookup = cfg.lookup

    async with httpx.AsyncClient(
        timeout=lookup.timeout, headers={"User-Agent": lookup.user_agent}
    ) as client:
        service = OpenFoodFactsClient(
            client,
            product_url=lookup.product_url,
            prices_url=lookup.prices_url,
            country_code=lookup.country_code,
        )
        scanned = await ProductLookupPipeline(service).scan(barcode)

    if scanned is None:
        return None, None

    saved = None
    if save:
        item = scanned.to_grocery_item()
        saved = await get_data_store().create_item(item)
    return scanned.model_dump(mode="json"), _item_data(saved) if saved else None


@app.command()
def scan(
    barcode: Annotated[str, typer.Argument(help="Product barcode (EAN/UPC)")],
    save: Annotated[bool, typer.Option("--save", help="Add the product to the catalog")] = False,
) -> None:
    """Look up a product and its price by barcode."""
    try:
        product, saved = asyncio.run(_scan(barcode.strip(), save))
    except ProductLookupError as e:
        formatter.error(str(e), error_code="LOOKUP_FAILED")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    if product is None:
        formatter.error(f"No product found for barcode {barcode}", error_code="NOT_FOUND")
        raise typer.Exit(code=1)

    data: dict = {"product": product}
    message = ""
    if saved is not None:
        data["item"] = saved
        message = f"Added {saved['name']} to the catalog"
    formatter.output({"success": True, "message": message, "data": data}, message)


if __name__ == "__main__":
    app()
