"""Replenishment forecasting across the whole catalog."""

import asyncio
import logging
from datetime import date, datetime

from .concurrency import run_concurrently
from .dates import as_date
from .models import GroceryItem, ItemPurchasePrediction
from .repositories import (
    GroceryItemRepository,
    NotificationScheduler,
    PurchasePredictionService,
    PurchaseRepository,
)

logger = logging.getLogger(__name__)


class ReplenishmentForecaster:
    """Turns per-item purchase history into a ranked "buy again soon" list."""

    def __init__(
        self,
        item_repository: GroceryItemRepository,
        purchase_repository: PurchaseRepository,
        strategy: PurchasePredictionService,
        notifier: NotificationScheduler | None = None,
        horizon_days: int = 7,
        reminder_days: int = 2,
        min_history: int = 2,
    ):
        self.item_repository = item_repository
        self.purchase_repository = purchase_repository
        self.strategy = strategy
        self.notifier = notifier
        self.horizon_days = horizon_days
        self.reminder_days = reminder_days
        self.min_history = min_history

    async def forecast_upcoming(
        self, now: date | datetime | None = None
    ) -> list[ItemPurchasePrediction]:
        """Forecast which catalog items need buying within the horizon.

        Every item is fetched and predicted concurrently. Items with too little
        history, or whose prediction fails, are left out. The joined results are
        filtered to ``days_until_purchase <= horizon_days`` and sorted soonest
        first; ties keep catalog order. Reminders are scheduled for predictions
        due within ``reminder_days``.

        Args:
            now: Reference date. Defaults to today.

        Returns:
            Upcoming predictions, soonest first
        """
        today = as_date(now)
        items = await self.item_repository.fetch_all_items()

        results = await run_concurrently(self._predict_for_item(item, today) for item in items)

        upcoming = [
            result
            for result in results
            if result is not None and result.prediction.days_until_purchase <= self.horizon_days
        ]
        upcoming.sort(key=lambda result: result.prediction.days_until_purchase)

        await self._schedule_reminders(upcoming)
        return upcoming

    async def _predict_for_item(
        self, item: GroceryItem, today: date
    ) -> ItemPurchasePrediction | None:
        purchases = await self.purchase_repository.fetch_purchases_for_item(item.id)
        if len(purchases) < self.min_history:
            return None

        history = sorted(purchases, key=lambda p: p.purchase_date)
        try:
            prediction = self.strategy.predict_next_purchase(
                item.name, item.category, history, today=today
            )
        except Exception:
            logger.warning("Skipping forecast for '%s'", item.name, exc_info=True)
            return None

        return ItemPurchasePrediction(item=item, prediction=prediction)

    async def _schedule_reminders(self, upcoming: list[ItemPurchasePrediction]) -> None:
        if self.notifier is None:
            return

        due = [p for p in upcoming if p.prediction.days_until_purchase <= self.reminder_days]
        outcomes = await asyncio.gather(
            *(
                self.notifier.schedule_reminder(p.item, p.prediction.predicted_date)
                for p in due
            ),
            return_exceptions=True,
        )
        for prediction, outcome in zip(due, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(
                    "Could not schedule reminder for '%s'",
                    prediction.item.name,
                    exc_info=outcome,
                )
