"""Shopping lists: planned trips capped by their own budget."""

import logging
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from .errors import (
    BudgetExceededError,
    EmptyNameError,
    InvalidAmountError,
    InvalidInputError,
    NotFoundError,
)
from .models import GroceryItem, ItemPurchasePrediction, ShoppingList, ShoppingListItem
from .repositories import GroceryItemRepository, ShoppingListRepository

logger = logging.getLogger(__name__)

# A prediction is added automatically when it is due this soon and this certain
AUTO_ADD_MAX_DAYS = 3
AUTO_ADD_MIN_CONFIDENCE = 0.7


def with_item(
    shopping_list: ShoppingList,
    item_id: UUID,
    quantity: Decimal,
    estimated_price: Decimal,
) -> ShoppingList:
    """Copy of the list with an item added.

    An item already on the list gets the quantity added to its entry and keeps
    its first estimated price.
    """
    items = list(shopping_list.items)
    for index, entry in enumerate(items):
        if entry.item_id == item_id:
            items[index] = entry.model_copy(update={"quantity": entry.quantity + quantity})
            break
    else:
        items.append(
            ShoppingListItem(item_id=item_id, quantity=quantity, estimated_price=estimated_price)
        )
    return shopping_list.model_copy(update={"items": items, "updated_at": datetime.now()})


def qualifies_for_auto_add(entry: ItemPurchasePrediction) -> bool:
    prediction = entry.prediction
    return (
        prediction.days_until_purchase <= AUTO_ADD_MAX_DAYS
        and prediction.confidence >= AUTO_ADD_MIN_CONFIDENCE
    )


class ShoppingListManager:
    """Creates shopping lists and keeps their estimated cost within budget."""

    def __init__(
        self,
        list_repository: ShoppingListRepository,
        item_repository: GroceryItemRepository,
    ):
        self.list_repository = list_repository
        self.item_repository = item_repository

    async def create_list(self, name: str, budget_amount: Decimal) -> ShoppingList:
        """Create an empty shopping list.

        Raises:
            EmptyNameError: If the name is blank
            InvalidAmountError: If the budget is not positive
        """
        name = name.strip()
        if not name:
            raise EmptyNameError("list name")
        if budget_amount <= 0:
            raise InvalidAmountError(budget_amount)

        created = await self.list_repository.create_shopping_list(
            ShoppingList(name=name, budget_amount=budget_amount)
        )
        logger.info("Created shopping list '%s' (%s)", created.name, created.id)
        return created

    async def get_list(self, list_id: UUID | str) -> ShoppingList:
        """Get a shopping list by ID.

        Raises:
            NotFoundError: If no list has this ID
        """
        if isinstance(list_id, str):
            list_id = UUID(list_id)

        shopping_list = await self.list_repository.fetch_shopping_list(list_id)
        if shopping_list is None:
            raise NotFoundError("Shopping list", list_id)
        return shopping_list

    async def list_lists(self) -> list[ShoppingList]:
        """All shopping lists, most recently created first."""
        return await self.list_repository.fetch_all_shopping_lists()

    async def _get_item(self, item_id: UUID | str) -> GroceryItem:
        if isinstance(item_id, str):
            item_id = UUID(item_id)

        item = await self.item_repository.fetch_item(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)
        return item

    async def add_item(
        self,
        list_id: UUID | str,
        item_id: UUID | str,
        quantity: Decimal = Decimal(1),
        estimated_price: Decimal | None = None,
    ) -> ShoppingList:
        """Add a catalog item to a list.

        The estimated price defaults to the item's average price.

        Raises:
            InvalidAmountError: If the quantity is not positive
            InvalidInputError: If the estimated price is negative
            NotFoundError: If the list or the item does not exist
            BudgetExceededError: If the list would cost more than its budget
        """
        if quantity <= 0:
            raise InvalidAmountError(quantity)
        if estimated_price is not None and estimated_price < 0:
            raise InvalidInputError(f"Estimated price must not be negative (got {estimated_price})")

        shopping_list = await self.get_list(list_id)
        item = await self._get_item(item_id)
        price = item.average_price if estimated_price is None else estimated_price

        updated = with_item(shopping_list, item.id, quantity, price)
        if updated.is_over_budget:
            raise BudgetExceededError(
                updated.name, updated.total_estimated_cost, updated.budget_amount
            )

        await self.list_repository.update_shopping_list(updated)
        logger.info("Added %s x '%s' to '%s'", quantity, item.name, updated.name)
        return updated

    async def add_predicted_items(
        self,
        list_id: UUID | str,
        predictions: list[ItemPurchasePrediction],
    ) -> tuple[ShoppingList, list[ItemPurchasePrediction]]:
        """Add the items a forecast says are due soon.

        Predictions due within ``AUTO_ADD_MAX_DAYS`` days with a confidence of
        at least ``AUTO_ADD_MIN_CONFIDENCE`` qualify. The most urgent go first,
        each with its recommended quantity at the item's average price. One that
        would put the list over budget is skipped and the rest are still tried.
        The list is saved once, and only when something was added.

        Returns:
            The list and the predictions that were added to it

        Raises:
            NotFoundError: If the list does not exist
        """
        shopping_list = await self.get_list(list_id)

        due = [entry for entry in predictions if qualifies_for_auto_add(entry)]
        due.sort(
            key=lambda entry: (
                -entry.prediction.urgency.priority,
                entry.prediction.days_until_purchase,
            )
        )

        added: list[ItemPurchasePrediction] = []
        for entry in due:
            candidate = with_item(
                shopping_list,
                entry.item.id,
                entry.prediction.recommended_quantity,
                entry.item.average_price,
            )
            if candidate.is_over_budget:
                logger.warning(
                    "Skipping '%s': it would put '%s' over its budget",
                    entry.item.name,
                    shopping_list.name,
                )
                continue
            shopping_list = candidate
            added.append(entry)

        if added:
            await self.list_repository.update_shopping_list(shopping_list)
            logger.info("Added %d predicted item(s) to '%s'", len(added), shopping_list.name)
        return shopping_list, added
