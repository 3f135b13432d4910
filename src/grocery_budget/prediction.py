"""Rule-based purchase prediction from purchase intervals."""

import statistics
from datetime import date, timedelta
from decimal import Decimal

from .dates import as_date, days_between
from .errors import PredictionError
from .models import Purchase, PurchasePrediction, PurchaseUrgency


class IntervalPredictionStrategy:
    """Predicts the next purchase from the average gap between past purchases.

    Confidence falls as the gaps become less regular: it is one minus the
    coefficient of variation of the intervals, clamped to [0.1, 1.0].
    """

    min_history = 2

    def predict_next_purchase(
        self,
        item_name: str,
        category: str,
        history: list[Purchase],
        today: date | None = None,
    ) -> PurchasePrediction:
        """Forecast when ``item_name`` will next be bought.

        Args:
            item_name: Item being forecast
            category: Item category
            history: Past purchases of the item, in any order
            today: Reference date for days-until-purchase. Defaults to today.

        Raises:
            PredictionError: With fewer than two purchases, or when every
                purchase happened at the same moment
        """
        if len(history) < self.min_history:
            raise PredictionError(item_name, "at least two purchases are required")

        ordered = sorted(history, key=lambda p: p.purchase_date)
        intervals = [
            (later.purchase_date - earlier.purchase_date).total_seconds()
            for earlier, later in zip(ordered, ordered[1:])
        ]

        mean_interval = statistics.fmean(intervals)
        if mean_interval <= 0:
            raise PredictionError(item_name, "purchases have no time between them")

        predicted_at = ordered[-1].purchase_date + timedelta(seconds=mean_interval)
        days_until = days_between(as_date(today), predicted_at)

        return PurchasePrediction(
            item_name=item_name,
            category=category,
            predicted_date=predicted_at.date(),
            days_until_purchase=days_until,
            confidence=self._confidence(intervals, mean_interval),
            recommended_quantity=sum((p.quantity for p in ordered), Decimal(0)) / len(ordered),
            urgency=PurchaseUrgency.from_days(days_until),
        )

    @staticmethod
    def _confidence(intervals: list[float], mean_interval: float) -> float:
        variation = statistics.pstdev(intervals) / mean_interval
        return max(0.1, min(1.0, 1.0 - variation))

