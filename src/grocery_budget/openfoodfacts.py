"""Barcode lookup against Open Food Facts and Open Prices."""

import logging
from datetime import date
from decimal import Decimal

import httpx
from pydantic import BaseModel, Field

from .config import DEFAULT_PRICES_URL, DEFAULT_PRODUCT_URL
from .errors import ProductLookupError
from .models import Category, PriceQuote, ProductInfo

logger = logging.getLogger(__name__)

PRICE_SAMPLE_SIZE = 50


class Nutriments(BaseModel):
    energy_kcal_100g: float | None = Field(default=None, alias="energy-kcal_100g")
    fat_100g: float | None = None
    carbohydrates_100g: float | None = None
    proteins_100g: float | None = None


class ProductPayload(BaseModel):
    product_name: str | None = None
    brands: str | None = None
    categories: str | None = None
    quantity: str | None = None
    image_url: str | None = None
    nutriments: Nutriments | None = None


class ProductResponse(BaseModel):
    code: str | None = None
    status: int = 0
    product: ProductPayload | None = None


class PriceLocation(BaseModel):
    osm_address_country_code: str | None = None


class PriceItem(BaseModel):
    price: Decimal
    currency: str
    price_date: date | None = Field(default=None, alias="date")
    location: PriceLocation | None = None


class PricesResponse(BaseModel):
    items: list[PriceItem] = Field(default_factory=list)


def _first_value(field: str | None) -> str | None:
    """First entry of a comma-separated Open Food Facts field."""
    if not field:
        return None
    first = field.split(",")[0].strip()
    return first or None


def format_nutrition(nutriments: Nutriments | None) -> str | None:
    """Render per-100g nutrition facts, one per line."""
    if nutriments is None:
        return None

    lines = []
    if nutriments.energy_kcal_100g is not None:
        lines.append(f"Calories: {int(nutriments.energy_kcal_100g)} kcal/100g")
    if nutriments.fat_100g is not None:
        lines.append(f"Fat: {nutriments.fat_100g:.1f}g/100g")
    if nutriments.carbohydrates_100g is not None:
        lines.append(f"Carbs: {nutriments.carbohydrates_100g:.1f}g/100g")
    if nutriments.proteins_100g is not None:
        lines.append(f"Protein: {nutriments.proteins_100g:.1f}g/100g")

    return "\n".join(lines) if lines else None


def build_price_quote(barcode: str, items: list[PriceItem]) -> PriceQuote:
    """Aggregate price records, most recent first, into a quote."""
    prices = [item.price for item in items]
    latest = items[0]
    return PriceQuote(
        barcode=barcode,
        average_price=(sum(prices, Decimal(0)) / len(prices)).quantize(Decimal("0.01")),
        min_price=min(prices),
        max_price=max(prices),
        currency=latest.currency,
        sample_count=len(prices),
        last_updated=latest.price_date,
        location_country=latest.location.osm_address_country_code if latest.location else None,
    )


class OpenFoodFactsClient:
    """Product metadata from Open Food Facts, prices from Open Prices.

    The HTTP client is injected so callers own its lifetime, timeouts and
    headers.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        product_url: str = DEFAULT_PRODUCT_URL,
        prices_url: str = DEFAULT_PRICES_URL,
        country_code: str | None = None,
    ):
        self.client = client
        self.product_url = product_url.rstrip("/")
        self.prices_url = prices_url.rstrip("/")
        self.country_code = country_code

    async def fetch_product(self, barcode: str) -> ProductInfo | None:
        """Look up product metadata for a barcode.

        Returns:
            ProductInfo, or None if the barcode is unknown

        Raises:
            ProductLookupError: If the request or response decoding fails
        """
        try:
            response = await self.client.get(f"{self.product_url}/{barcode}.json")
            if response.status_code == 404:
                return None
            response.raise_for_status()
            payload = ProductResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            raise ProductLookupError(f"Product lookup for {barcode} failed: {e}") from e

        product = payload.product
        if payload.status != 1 or product is None or not (product.product_name or "").strip():
            logger.debug("No product data for barcode %s", barcode)
            return None

        return ProductInfo(
            barcode=payload.code or barcode,
            name=product.product_name.strip(),
            brand=_first_value(product.brands),
            category=_first_value(product.categories) or Category.OTHER.value,
            unit=product.quantity or "1 unit",
            image_url=product.image_url,
            nutritional_info=format_nutrition(product.nutriments),
        )

    async def fetch_price(self, barcode: str) -> PriceQuote | None:
        """Aggregate recent observed prices for a barcode.

        Returns:
            PriceQuote, or None if no prices have been reported

        Raises:
            ProductLookupError: If the request or response decoding fails
        """
        params = {"product_code": barcode, "order_by": "-date", "size": PRICE_SAMPLE_SIZE}
        if self.country_code:
            params["location_osm_address_country_code"] = self.country_code.upper()

        try:
            response = await self.client.get(f"{self.prices_url}/prices", params=params)
            response.raise_for_status()
            payload = PricesResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            raise ProductLookupError(f"Price lookup for {barcode} failed: {e}") from e

        if not payload.items:
            logger.debug("No prices reported for barcode %s", barcode)
            return None

        return build_price_quote(barcode, payload.items)
