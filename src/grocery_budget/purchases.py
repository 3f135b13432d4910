"""Recording and listing purchases."""

import logging
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from .catalog import Catalog
from .errors import InvalidAmountError, InvalidDateRangeError
from .models import Purchase
from .repositories import PurchaseRepository

logger = logging.getLogger(__name__)


class PurchaseLog:
    """Records purchases of catalog items and feeds their prices back into the catalog."""

    def __init__(self, purchase_repository: PurchaseRepository, catalog: Catalog):
        self.purchase_repository = purchase_repository
        self.catalog = catalog

    async def record_purchase(
        self,
        item_id: UUID | str,
        quantity: Decimal = Decimal(1),
        unit_price: Decimal | None = None,
        total_cost: Decimal | None = None,
        purchase_date: datetime | None = None,
        store_name: str | None = None,
    ) -> Purchase:
        """Record a purchase of a catalog item.

        The unit price defaults to the item's average price and the total to
        quantity times unit price. An explicit unit price is also added to the
        item's price history.

        Raises:
            InvalidAmountError: If the quantity or resulting total is not positive
            NotFoundError: If no item has this ID
        """
        if quantity <= 0:
            raise InvalidAmountError(quantity)

        item = await self.catalog.get_item(item_id)
        price = unit_price if unit_price is not None else item.average_price
        if total_cost is None:
            total_cost = price * quantity
        if total_cost <= 0:
            raise InvalidAmountError(total_cost)

        purchase = Purchase(
            item=item,
            quantity=quantity,
            unit_price=price,
            total_cost=total_cost,
            purchase_date=purchase_date or datetime.now(),
            store_name=store_name,
        )
        await self.purchase_repository.create_purchase(purchase)
        logger.info("Recorded purchase of %s x '%s' for %s", quantity, item.name, total_cost)

        if unit_price is not None and unit_price > 0:
            await self.catalog.record_price(
                item.id,
                unit_price,
                store_name=store_name,
                source="purchase",
                recorded_at=purchase.purchase_date,
            )
        return purchase

    async def list_purchases(
        self, start_date: date | None = None, end_date: date | None = None
    ) -> list[Purchase]:
        """List purchases, most recent first, optionally within a date range.

        Raises:
            InvalidDateRangeError: If both dates are given and start is after end
        """
        if start_date is None and end_date is None:
            return await self.purchase_repository.fetch_all_purchases()

        start_date = start_date or date.min
        end_date = end_date or date.max
        if start_date > end_date:
            raise InvalidDateRangeError(start_date, end_date)
        return await self.purchase_repository.fetch_purchases_between(start_date, end_date)
