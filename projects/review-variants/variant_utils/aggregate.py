"""
Fold resolved order line items into a SKU -> review ids mapping.
"""
import logging
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


class VariantAggregator:
    """
    Accumulates the variant report for one product.

    Not safe for concurrent mutation: one owner calls ``ingest``.
    """

    def __init__(self, product_id: str):
        self.product_id = str(product_id)
        self.report: Dict[str, List[str]] = {}
        self.unmatched: List[str] = []
        self.no_sku: List[str] = []

    def matching_items(self, line_items: Iterable) -> list:
        """Line items that belong to the reviewed product, in order."""
        return [item for item in line_items if item.product_id == self.product_id]

    def ingest(self, review_id: str, line_items: Iterable) -> Optional[str]:
        """
        Attribute a review to the SKU of the first line item of the product.

        Returns the SKU, or None when nothing in the order matches (recorded
        in ``unmatched``) or the matching item has no SKU (``no_sku``).
        """
        matches = self.matching_items(line_items)
        if not matches:
            logger.info(f"Review {review_id}: no line item for product {self.product_id}")
            self.unmatched.append(review_id)
            return None

        if len(matches) > 1:
            logger.debug(
                f"Review {review_id}: {len(matches)} line items for product "
                f"{self.product_id}, using the first"
            )

        sku = matches[0].sku
        if not sku:
            logger.warning(f"Review {review_id}: matching line item has no SKU")
            self.no_sku.append(review_id)
            return None

        self.report.setdefault(sku, []).append(review_id)
        return sku
