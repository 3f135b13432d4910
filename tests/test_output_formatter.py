"""Tests for output formatting."""

import json
import re
from datetime import date, datetime
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest
from rich.console import Console

from grocery_budget.budget_summary import build_summary
from grocery_budget.models import ItemPurchasePrediction, PurchasePrediction, PurchaseUrgency
from grocery_budget.output_formatter import JSONEncoder, OutputFormatter, format_money

from helpers import make_budget, make_item, make_purchase


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    ansi_escape = re.compile(r"\x1b\[[0-9;]*m")
    return ansi_escape.sub("", text)


@pytest.fixture
def rich_formatter():
    """Formatter writing Rich output to a buffer."""
    formatter = OutputFormatter(json_mode=False)
    formatter.console = Console(file=StringIO(), force_terminal=True, width=120)
    return formatter


def rendered(formatter: OutputFormatter) -> str:
    return strip_ansi(formatter.console.file.getvalue())


class TestJSONEncoder:
    """Tests for JSONEncoder."""

    def test_encode_uuid(self):
        test_id = uuid4()
        assert str(test_id) in json.dumps({"id": test_id}, cls=JSONEncoder)

    def test_encode_dates(self):
        result = json.dumps(
            {"at": datetime(2025, 10, 1, 9, 30), "on": date(2025, 10, 1)}, cls=JSONEncoder
        )
        assert "2025-10-01T09:30:00" in result
        assert '"2025-10-01"' in result

    def test_encode_decimal_as_string(self):
        assert json.dumps({"amount": Decimal("4.10")}, cls=JSONEncoder) == '{"amount": "4.10"}'

    def test_encode_fallback(self):
        with pytest.raises(TypeError):
            json.dumps({"bad": object()}, cls=JSONEncoder)


class TestMoney:
    """Tests for money formatting."""

    def test_string_amount(self):
        assert format_money("1234.5") == "$1,234.50"

    def test_other_currency(self):
        assert format_money(Decimal("6.9"), "ILS") == "6.90 ILS"

    def test_formatter_uses_configured_currency(self):
        formatter = OutputFormatter(currency="EUR")
        formatter.console = Console(file=StringIO(), force_terminal=True, width=120)

        formatter.output({"data": {"budgets": [make_budget().model_dump(mode="json")]}})

        output = rendered(formatter)
        assert "500.00 EUR" in output
        assert "$" not in output


class TestOutputFormatterJSON:
    """Tests for JSON output mode."""

    def test_json_mode_output(self, capsys):
        formatter = OutputFormatter(json_mode=True)
        formatter.output({"success": True, "data": {"test": "value"}})
        data = json.loads(capsys.readouterr().out)
        assert data["data"]["test"] == "value"

    def test_json_error(self, capsys):
        formatter = OutputFormatter(json_mode=True)
        formatter.error("Something went wrong", error_code="NOT_FOUND")
        data = json.loads(capsys.readouterr().out)
        assert data == {"success": False, "error": "Something went wrong", "error_code": "NOT_FOUND"}

    def test_json_success(self, capsys):
        formatter = OutputFormatter(json_mode=True)
        formatter.success("Done", data={"count": 2})
        data = json.loads(capsys.readouterr().out)
        assert data == {"success": True, "message": "Done", "data": {"count": 2}}

    def test_json_warning(self, capsys):
        formatter = OutputFormatter(json_mode=True)
        formatter.warning("Careful")
        assert json.loads(capsys.readouterr().out) == {"warning": "Careful"}


class TestOutputFormatterRich:
    """Tests for Rich renderers."""

    def test_message(self, rich_formatter):
        rich_formatter.output({"data": {}}, "All good")
        assert "All good" in rendered(rich_formatter)

    def test_budget_summary(self, rich_formatter):
        budget = make_budget(category_budgets={"Dairy": Decimal("100")})
        milk = make_item("Milk", "Dairy")
        summary = build_summary(
            budget, [make_purchase(milk, datetime(2025, 10, 2), total="40")], date(2025, 10, 11)
        )

        rich_formatter.output({"data": {"summary": summary.model_dump(mode="json")}})

        output = rendered(rich_formatter)
        assert "October" in output
        assert "$40.00" in output
        assert "$460.00" in output
        assert "Dairy" in output
        assert "$100.00" in output

    def test_budgets_table(self, rich_formatter):
        budgets = [make_budget(name="October").model_dump(mode="json")]
        rich_formatter.output({"data": {"budgets": budgets}})
        output = rendered(rich_formatter)
        assert "October" in output
        assert "$500.00" in output

    def test_budget_period_status(self, rich_formatter):
        budget = make_budget(category_budgets={"Dairy": Decimal("100")}).model_dump(mode="json")
        budget.update(is_expired=False, remaining_days=12, unallocated_amount="400")

        rich_formatter.output({"data": {"budget": budget}})

        output = rendered(rich_formatter)
        assert "Days left: 12" in output
        assert "Unallocated: $400.00" in output

    def test_expired_budget(self, rich_formatter):
        budget = make_budget().model_dump(mode="json")
        budget.update(is_expired=True, remaining_days=-3)

        rich_formatter.output({"data": {"budgets": [budget]}})

        assert "ended" in rendered(rich_formatter)

    def test_empty_budgets(self, rich_formatter):
        rich_formatter.output({"data": {"budgets": []}})
        assert "No budgets" in rendered(rich_formatter)

    def test_predictions(self, rich_formatter):
        milk = make_item("Milk", "Dairy")
        prediction = ItemPurchasePrediction(
            item=milk,
            prediction=PurchasePrediction(
                item_name="Milk",
                category="Dairy",
                predicted_date=date(2025, 10, 22),
                days_until_purchase=2,
                confidence=0.85,
                urgency=PurchaseUrgency.SOON,
            ),
        )
        rich_formatter.output({"data": {"predictions": [prediction.model_dump(mode="json")]}})

        output = rendered(rich_formatter)
        assert "Milk" in output
        assert "2025-10-22" in output
        assert "85%" in output
        assert "soon" in output

    def test_item_uses_display_name(self, rich_formatter):
        item = make_item("Milk", "Dairy", brand="Tnuva").model_dump(mode="json")
        item["display_name"] = "Tnuva Milk"

        rich_formatter.output({"data": {"item": item}})

        assert "Tnuva Milk" in rendered(rich_formatter)

    def test_items(self, rich_formatter):
        items = [make_item("Milk", "Dairy", brand="Tnuva").model_dump(mode="json")]
        rich_formatter.output({"data": {"items": items}})
        output = rendered(rich_formatter)
        assert "Milk" in output
        assert "Tnuva" in output
        assert "Total items: 1" in output

    def test_scanned_product_without_price(self, rich_formatter):
        product = {
            "barcode": "123",
            "name": "Hummus",
            "brand": None,
            "category": "Spreads",
            "unit": "400 g",
            "nutritional_info": "Calories: 250 kcal/100g",
            "price_source": "unavailable",
            "average_price": None,
            "price_sample_count": None,
            "currency": None,
        }
        rich_formatter.output({"data": {"product": product}})
        output = rendered(rich_formatter)
        assert "Hummus" in output
        assert "unavailable" in output
        assert "Calories: 250 kcal/100g" in output

    def test_reminders(self, rich_formatter):
        reminders = [
            {
                "kind": "purchase",
                "trigger_date": "2025-10-22",
                "title": "Time to Buy",
                "body": "You usually buy Milk around this time.",
            }
        ]
        rich_formatter.output({"data": {"reminders": reminders}})
        assert "Time to Buy" in rendered(rich_formatter)

    def test_error(self, rich_formatter):
        rich_formatter.error("Broken")
        assert "Error: Broken" in rendered(rich_formatter)


class TestShoppingListRendering:
    """Tests for shopping list and price advice renderers."""

    def test_shopping_list(self, rich_formatter):
        shopping_list = {
            "id": str(uuid4()),
            "name": "Weekend",
            "budget_amount": "50",
            "items": [
                {
                    "item_id": str(uuid4()),
                    "name": "Tnuva Milk",
                    "quantity": "2",
                    "estimated_price": "4.50",
                    "total_estimated_cost": "9.00",
                }
            ],
            "total_estimated_cost": "9.00",
            "remaining_budget": "41.00",
            "is_over_budget": False,
        }

        rich_formatter.output({"data": {"shopping_list": shopping_list}})

        output = rendered(rich_formatter)
        assert "Tnuva Milk" in output
        assert "Estimated: $9.00 of $50.00" in output
        assert "Remaining: $41.00" in output

    def test_empty_shopping_list(self, rich_formatter):
        shopping_list = {
            "id": str(uuid4()),
            "name": "Weekend",
            "budget_amount": "50",
            "items": [],
            "total_estimated_cost": "0",
            "remaining_budget": "50",
            "is_over_budget": False,
        }

        rich_formatter.output({"data": {"shopping_list": shopping_list}})

        assert "Weekend (empty)" in rendered(rich_formatter)

    def test_recommendations(self, rich_formatter):
        recommendations = [
            {
                "item": {"name": "Milk", "display_name": "Tnuva Milk"},
                "analysis": {
                    "current_price": "5.00",
                    "average_price": "4.00",
                    "price_score": 0.0,
                },
                "potential_savings": "2.00",
                "should_buy_now": False,
                "recommendation": "Wait for Tuesdays",
            }
        ]

        rich_formatter.output({"data": {"recommendations": recommendations}})

        output = rendered(rich_formatter)
        assert "Tnuva Milk" in output
        assert "$2.00" in output
        assert "Tuesdays" in output

    def test_no_recommendations(self, rich_formatter):
        rich_formatter.output({"data": {"recommendations": []}})
        assert "No recorded prices" in rendered(rich_formatter)
