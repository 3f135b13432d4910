"""Output formatting for CLI and programmatic use."""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from rich.console import Console
from rich.panel import Panel
from rich.table import Table


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for output."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return str(obj)
        return super().default(obj)


def format_money(value: Any, currency: str = "USD") -> str:
    """Format an amount (Decimal, number or JSON string) to two places."""
    amount = Decimal(str(value))
    if currency != "USD":
        return f"{amount:,.2f} {currency}"
    return f"${amount:,.2f}"


class OutputFormatter:
    """Formats output for both Rich terminal and JSON modes."""

    def __init__(self, json_mode: bool = False, currency: str = "USD"):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
            currency: ISO code used for amounts that carry no currency of their own
        """
        self.json_mode = json_mode
        self.currency = currency
        self.console = Console()

    def _money(self, value: Any, currency: str | None = None) -> str:
        return format_money(value, currency or self.currency)

    def output(self, data: dict[str, Any], message: str = "") -> None:
        """Output data in appropriate format.

        Args:
            data: Data to output
            message: Optional message for Rich mode
        """
        if self.json_mode:
            self._output_json(data)
        else:
            self._output_rich(data, message)

    def _output_json(self, data: dict[str, Any]) -> None:
        """Output as JSON to stdout."""
        print(json.dumps(data, cls=JSONEncoder, indent=2))

    def _output_rich(self, data: dict[str, Any], message: str) -> None:
        """Output with Rich formatting."""
        if message:
            self.console.print(f"[green]✓[/green] {message}")

        payload = data.get("data", {})
        if "summary" in payload:
            self._render_summary(payload["summary"])
        elif "budgets" in payload:
            self._render_budgets(payload["budgets"])
        elif "budget" in payload:
            self._render_budget(payload["budget"])
        elif "predictions" in payload:
            self._render_predictions(payload["predictions"])
        elif "price_history" in payload:
            self._render_price_history(payload)
        elif "product" in payload:
            self._render_product(payload["product"])
        elif "items" in payload:
            self._render_items(payload["items"])
        elif "item" in payload:
            self._render_item(payload["item"])
        elif "purchases" in payload:
            self._render_purchases(payload["purchases"])
        elif "reminders" in payload:
            self._render_reminders(payload["reminders"])
        elif "shopping_list" in payload:
            self._render_shopping_list(payload["shopping_list"])
        elif "shopping_lists" in payload:
            self._render_shopping_lists(payload["shopping_lists"])
        elif "recommendations" in payload:
            self._render_recommendations(payload["recommendations"])

    def _render_budget(self, budget: dict) -> None:
        """Render a single budget."""
        lines = [
            f"[bold]{budget['name']}[/bold]",
            f"Amount: {self._money(budget['amount'])}",
            f"Period: {budget['start_date']} to {budget['end_date']}",
            f"Status: {'active' if budget['is_active'] else 'inactive'}",
        ]
        if budget.get("is_expired"):
            lines.append("[red]Period has ended[/red]")
        elif "remaining_days" in budget:
            lines.append(f"Days left: {budget['remaining_days']}")
        for category, amount in budget.get("category_budgets", {}).items():
            lines.append(f"  {category}: {self._money(amount)}")
        if "unallocated_amount" in budget:
            lines.append(f"  [dim]Unallocated: {self._money(budget['unallocated_amount'])}[/dim]")
        lines.append(f"[dim]ID: {budget['id']}[/dim]")
        self.console.print(Panel("\n".join(lines), title="Budget", border_style="green"))

    def _render_budgets(self, budgets: list[dict]) -> None:
        """Render budget table."""
        if not budgets:
            self.console.print("[dim]No budgets[/dim]")
            return

        table = Table(title="Budgets", show_header=True, header_style="bold cyan")
        table.add_column("Name", style="cyan")
        table.add_column("Amount", justify="right", style="green")
        table.add_column("Start")
        table.add_column("End")
        table.add_column("Active", justify="center")
        table.add_column("ID", style="dim")

        for budget in budgets:
            if budget.get("is_expired"):
                status = "[dim]ended[/dim]"
            else:
                status = "[green]✓[/green]" if budget["is_active"] else "-"
            table.add_row(
                budget["name"],
                self._money(budget["amount"]),
                budget["start_date"],
                budget["end_date"],
                status,
                budget["id"][:8],
            )
        self.console.print(table)

    def _render_summary(self, summary: dict) -> None:
        """Render budget summary with category breakdown."""
        budget = summary["budget"]
        remaining = Decimal(str(summary["remaining_amount"]))
        color = "green" if remaining >= 0 else "red"
        track = "[green]on track[/green]" if summary["is_on_track"] else "[red]over pace[/red]"

        self.console.print(f"\n[bold]Budget Summary: {budget['name']}[/bold]")
        self.console.print(f"Budget: {self._money(budget['amount'])}")
        self.console.print(f"Spent: {self._money(summary['total_spent'])} ({summary['percentage_used']:.1f}%)")
        self.console.print(f"Remaining: [{color}]{self._money(remaining)}[/{color}]")
        self.console.print(f"Daily average: {self._money(summary['daily_average'])}")
        self.console.print(f"Projected total: {self._money(summary['projected_total'])} ({track})")
        self.console.print(
            f"Day {summary['days_passed']} of {summary['total_days']}, "
            f"{summary['days_remaining']} remaining"
        )

        if summary.get("spending_by_category"):
            self.console.print("\n[dim]By category:[/dim]")
            table = Table(show_header=True, header_style="bold")
            table.add_column("Category")
            table.add_column("Spent", justify="right")
            table.add_column("Allocated", justify="right")

            allocations = budget.get("category_budgets", {})
            for category, spent in summary["spending_by_category"].items():
                allocated = allocations.get(category)
                table.add_row(
                    category,
                    self._money(spent),
                    self._money(allocated) if allocated is not None else "-",
                )
            self.console.print(table)

    def _render_predictions(self, predictions: list[dict]) -> None:
        """Render upcoming purchase forecast."""
        if not predictions:
            self.console.print("[dim]Nothing to restock in the coming days[/dim]")
            return

        table = Table(title="Upcoming Purchases", show_header=True, header_style="bold cyan")
        table.add_column("Item", style="cyan")
        table.add_column("Category", style="yellow")
        table.add_column("Expected", justify="right")
        table.add_column("Days", justify="right")
        table.add_column("Qty", justify="right", style="magenta")
        table.add_column("Confidence", justify="right")
        table.add_column("Urgency")

        urgency_style = {
            "overdue": "bold red",
            "urgent": "red",
            "soon": "yellow",
            "planned": "blue",
            "future": "dim",
        }
        for entry in predictions:
            prediction = entry["prediction"]
            urgency = prediction["urgency"]
            style = urgency_style.get(urgency, "white")
            table.add_row(
                entry["item"].get("display_name", entry["item"]["name"]),
                prediction["category"],
                prediction["predicted_date"],
                str(prediction["days_until_purchase"]),
                f"{Decimal(str(prediction['recommended_quantity'])):.1f}",
                f"{prediction['confidence']:.0%}",
                f"[{style}]{urgency}[/{style}]",
            )
        self.console.print(table)

    def _render_items(self, items: list[dict]) -> None:
        """Render catalog items."""
        if not items:
            self.console.print("[dim]No matching items[/dim]")
            return

        table = Table(title="Catalog", show_header=True, header_style="bold cyan")
        table.add_column("Item", style="cyan")
        table.add_column("Brand")
        table.add_column("Category", style="yellow")
        table.add_column("Unit")
        table.add_column("Avg Price", justify="right", style="green")
        table.add_column("ID", style="dim")

        for item in items:
            table.add_row(
                item["name"],
                item.get("brand") or "-",
                item["category"],
                item["unit"],
                self._money(item["average_price"]),
                item["id"][:8],
            )
        self.console.print(table)
        self.console.print(f"\nTotal items: {len(items)}")

    def _render_item(self, item: dict) -> None:
        """Render a single item with Rich."""
        panel_content = f"[bold]{item.get('display_name', item['name'])}[/bold]\n"
        if item.get("brand"):
            panel_content += f"Brand: {item['brand']}\n"
        panel_content += f"Category: {item['category']}\n"
        panel_content += f"Unit: {item['unit']}\n"
        panel_content += f"Average price: {self._money(item['average_price'])}\n"
        if item.get("barcode"):
            panel_content += f"Barcode: {item['barcode']}\n"
        panel_content += f"[dim]ID: {item['id']}[/dim]"

        self.console.print(Panel(panel_content, title="Item Details", border_style="green"))

    def _render_price_history(self, data: dict) -> None:
        """Render price history for an item."""
        history = data["price_history"]
        name = data.get("item", {}).get("name", "item")

        if not history:
            self.console.print(f"[dim]No prices recorded for {name}[/dim]")
            return

        table = Table(title=f"Price History: {name}", show_header=True, header_style="bold")
        table.add_column("Date")
        table.add_column("Price", justify="right", style="green")
        table.add_column("Store")
        table.add_column("Source", style="dim")

        for entry in history:
            table.add_row(
                entry["recorded_at"][:10],
                self._money(entry["price"]),
                entry.get("store_name") or "-",
                entry["source"],
            )
        self.console.print(table)

    def _render_purchases(self, purchases: list[dict]) -> None:
        """Render purchase log."""
        if not purchases:
            self.console.print("[dim]No purchases recorded[/dim]")
            return

        table = Table(title="Purchases", show_header=True, header_style="bold cyan")
        table.add_column("Date")
        table.add_column("Item", style="cyan")
        table.add_column("Qty", justify="right", style="magenta")
        table.add_column("Total", justify="right", style="green")
        table.add_column("Store")

        total = Decimal(0)
        for purchase in purchases:
            cost = Decimal(str(purchase["total_cost"]))
            total += cost
            table.add_row(
                purchase["purchase_date"][:10],
                purchase["item"]["name"],
                str(purchase["quantity"]),
                self._money(cost),
                purchase.get("store_name") or "-",
            )
        self.console.print(table)
        self.console.print(f"\nTotal spent: {self._money(total)}")

    def _render_reminders(self, reminders: list[dict]) -> None:
        """Render scheduled reminders."""
        if not reminders:
            self.console.print("[dim]No reminders scheduled[/dim]")
            return

        for reminder in reminders:
            icon = "\U0001f6d2" if reminder["kind"] == "purchase" else "⚠"
            self.console.print(
                f"{icon} [bold]{reminder['trigger_date']}[/bold] {reminder['title']}: "
                f"{reminder['body']}"
            )

    def _render_shopping_list(self, shopping_list: dict) -> None:
        """Render a shopping list against its budget."""
        if shopping_list["items"]:
            table = Table(title=shopping_list["name"], show_header=True, header_style="bold cyan")
            table.add_column("Item", style="cyan")
            table.add_column("Qty", justify="right", style="magenta")
            table.add_column("Est. Price", justify="right")
            table.add_column("Est. Total", justify="right", style="green")

            for entry in shopping_list["items"]:
                table.add_row(
                    entry.get("name") or entry["item_id"][:8],
                    str(entry["quantity"]),
                    self._money(entry["estimated_price"]),
                    self._money(entry["total_estimated_cost"]),
                )
            self.console.print(table)
        else:
            self.console.print(f"[bold]{shopping_list['name']}[/bold] [dim](empty)[/dim]")

        color = "red" if shopping_list["is_over_budget"] else "green"
        self.console.print(
            f"Estimated: {self._money(shopping_list['total_estimated_cost'])} "
            f"of {self._money(shopping_list['budget_amount'])}"
        )
        self.console.print(
            f"Remaining: [{color}]{self._money(shopping_list['remaining_budget'])}[/{color}]"
        )
        self.console.print(f"[dim]ID: {shopping_list['id']}[/dim]")

    def _render_shopping_lists(self, shopping_lists: list[dict]) -> None:
        if not shopping_lists:
            self.console.print("[dim]No shopping lists[/dim]")
            return

        table = Table(title="Shopping Lists", show_header=True, header_style="bold cyan")
        table.add_column("Name", style="cyan")
        table.add_column("Items", justify="right")
        table.add_column("Estimated", justify="right")
        table.add_column("Budget", justify="right", style="green")
        table.add_column("ID", style="dim")

        for shopping_list in shopping_lists:
            estimated = self._money(shopping_list["total_estimated_cost"])
            if shopping_list["is_over_budget"]:
                estimated = f"[red]{estimated}[/red]"
            table.add_row(
                shopping_list["name"],
                str(len(shopping_list["items"])),
                estimated,
                self._money(shopping_list["budget_amount"]),
                shopping_list["id"][:8],
            )
        self.console.print(table)

    def _render_recommendations(self, recommendations: list[dict]) -> None:
        """Render buy-now-or-wait advice."""
        if not recommendations:
            self.console.print("[dim]No recorded prices for anything on this list[/dim]")
            return

        table = Table(title="Price Advice", show_header=True, header_style="bold cyan")
        table.add_column("Item", style="cyan")
        table.add_column("Est. Price", justify="right")
        table.add_column("Average", justify="right")
        table.add_column("Score", justify="right")
        table.add_column("Savings", justify="right", style="green")
        table.add_column("Advice")

        for recommendation in recommendations:
            analysis = recommendation["analysis"]
            style = "green" if recommendation["should_buy_now"] else "yellow"
            table.add_row(
                recommendation["item"].get("display_name", recommendation["item"]["name"]),
                self._money(analysis["current_price"]),
                self._money(analysis["average_price"]),
                f"{analysis['price_score']:.0%}",
                self._money(recommendation["potential_savings"]),
                f"[{style}]{recommendation['recommendation']}[/{style}]",
            )
        self.console.print(table)

    def _render_product(self, product: dict) -> None:
        """Render a scanned product."""
        lines = [f"[bold]{product['name']}[/bold]"]
        if product.get("brand"):
            lines.append(f"Brand: {product['brand']}")
        lines.append(f"Category: {product['category']}")
        lines.append(f"Unit: {product['unit']}")

        if product["price_source"] == "real":
            lines.append(
                f"Price: {self._money(product['average_price'], product.get('currency'))} "
                f"[dim](average of {product['price_sample_count']} reports)[/dim]"
            )
        else:
            lines.append("Price: [dim]unavailable[/dim]")

        if product.get("nutritional_info"):
            lines.append("")
            lines.append(product["nutritional_info"])
        lines.append(f"[dim]Barcode: {product['barcode']}[/dim]")

        self.console.print(Panel("\n".join(lines), title="Scanned Product", border_style="green"))

    def error(self, message: str, error_code: str | None = None) -> None:
        """Output error message.

        Args:
            message: Error message
            error_code: Optional error code
        """
        if self.json_mode:
            output = {"success": False, "error": message}
            if error_code:
                output["error_code"] = error_code
            print(json.dumps(output))
        else:
            self.console.print(f"[red]✗ Error:[/red] {message}")

    def success(self, message: str, data: dict | None = None) -> None:
        """Output success message.

        Args:
            message: Success message
            data: Optional data to include
        """
        if self.json_mode:
            output: dict[str, Any] = {"success": True, "message": message}
            if data:
                output["data"] = data
            print(json.dumps(output, cls=JSONEncoder))
        else:
            self.console.print(f"[green]✓[/green] {message}")

    def warning(self, message: str) -> None:
        """Output warning message.

        Args:
            message: Warning message
        """
        if self.json_mode:
            print(json.dumps({"warning": message}))
        else:
            self.console.print(f"[yellow]⚠[/yellow] {message}")
