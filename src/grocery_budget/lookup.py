"""Barcode scan pipeline: product metadata enriched with a price."""

import logging

from .models import PriceSource, ScannedProductInfo
from .repositories import ProductLookupService

logger = logging.getLogger(__name__)


class ProductLookupPipeline:
    """Resolves a scanned barcode into product details and a price."""

    def __init__(self, service: ProductLookupService):
        self.service = service

    async def scan(self, barcode: str) -> ScannedProductInfo | None:
        """Look up a barcode.

        A missing product yields None. A failed or empty price lookup does not
        fail the scan: the product comes back with an unavailable price.

        Raises:
            ProductLookupError: If the product metadata lookup itself fails
        """
        product = await self.service.fetch_product(barcode)
        if product is None:
            logger.info("No product found for barcode %s", barcode)
            return None

        try:
            quote = await self.service.fetch_price(barcode)
        except Exception:
            logger.warning("Price lookup failed for barcode %s", barcode, exc_info=True)
            quote = None

        scanned = ScannedProductInfo(**product.model_dump())
        if quote is not None and quote.average_price > 0:
            scanned.average_price = quote.average_price
            scanned.price_source = PriceSource.REAL
            scanned.price_sample_count = quote.sample_count
            scanned.currency = quote.currency

        logger.info("Scanned %s: %s (%s price)", barcode, scanned.name, scanned.price_source.value)
        return scanned
