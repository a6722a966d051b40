"""
Group product reviews by the variant (SKU) the customer actually bought.

Flow: read the review export -> look up each review's order in Shopify ->
keep the order's line item for the reviewed product -> bucket the review
under that line item's SKU.
"""
import concurrent.futures
import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pandas as pd

from connections.errors import ResolutionError
from connections.local.reviews import get_reviews
from connections.shopify import get_client
from connections.shopify.orders import get_line_items_for_order

from .aggregate import VariantAggregator
from .config import MAX_WORKERS, RESOLVE_TIMEOUT

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    DONE = "done"


@dataclass
class PipelineResult:
    product_id: Optional[str]
    report: Dict[str, List[str]] = field(default_factory=dict)
    failures: List[ResolutionError] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)    # no order number
    unmatched: List[str] = field(default_factory=list)  # order has no item for the product
    no_sku: List[str] = field(default_factory=list)     # matching item carries no SKU
    cancelled: bool = False


class _Lookup:
    """One order lookup. Its timeout clock starts when a worker picks it up."""

    def __init__(self, review, resolver, client):
        self.review = review
        self.resolver = resolver
        self.client = client
        self.started = threading.Event()
        self.started_at = None

    def __call__(self):
        self.started_at = time.monotonic()
        self.started.set()
        return self.resolver(self.review.order_number, self.review.id, self.client)

    def remaining(self, timeout: float) -> float:
        """Seconds left of ``timeout``, waiting first for the call to start."""
        self.started.wait()
        return max(timeout - (time.monotonic() - self.started_at), 0)


class PipelineOrchestrator:
    """
    Runs one review export through order resolution and aggregation.

    Lookups go to a bounded thread pool (``max_workers=1`` is strictly
    sequential). Results are collected on the calling thread in review
    order, so the aggregator has a single owner and the report does not
    depend on which lookup finishes first. ``timeout`` counts from when a
    lookup starts running, not from when it was queued.
    """

    def __init__(
        self,
        client=None,
        max_workers: int = MAX_WORKERS,
        timeout: Optional[float] = RESOLVE_TIMEOUT,
        resolver: Callable = get_line_items_for_order,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.client = client
        self.max_workers = max_workers
        self.timeout = timeout
        self.resolver = resolver
        self.state = PipelineState.IDLE

    def run(self, file_path) -> PipelineResult:
        """
        Raises:
            FormatError: the export can't be read
            ConfigError: Shopify credentials are missing
        """
        product_id, reviews = get_reviews(file_path)
        client = self.client or get_client()

        self.state = PipelineState.RESOLVING
        result = PipelineResult(product_id=product_id)
        aggregator = VariantAggregator(product_id)
        result.report = aggregator.report
        result.unmatched = aggregator.unmatched
        result.no_sku = aggregator.no_sku

        resolvable = []
        for review in reviews:
            if review.order_number is None:
                result.skipped.append(review.id)
            else:
                resolvable.append(review)

        logger.info(
            f"Resolving {len(resolvable)} of {len(reviews)} reviews "
            f"({self.max_workers} worker(s))"
        )

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            pending = []
            for review in resolvable:
                lookup = _Lookup(review, self.resolver, client)
                pending.append((lookup, executor.submit(lookup)))
            try:
                for lookup, future in pending:
                    self._collect(lookup, future, aggregator, result)
            except KeyboardInterrupt:
                logger.warning("Interrupted, returning partial report")
                result.cancelled = True
                executor.shutdown(wait=False, cancel_futures=True)

        self.state = PipelineState.DONE
        return result

    def _collect(self, lookup, future, aggregator, result):
        review = lookup.review
        try:
            if self.timeout is None:
                line_items = future.result()
            else:
                line_items = future.result(timeout=lookup.remaining(self.timeout))
        except concurrent.futures.TimeoutError:
            error = ResolutionError(
                review.order_number, review.id, f"no response within {self.timeout}s"
            )
            self._record_failure(error, result)
            return
        except ResolutionError as e:
            self._record_failure(e, result)
            return

        aggregator.ingest(review.id, line_items)

    @staticmethod
    def _record_failure(error, result):
        logger.error(str(error))
        result.failures.append(error)


def run_pipeline(file_path, client=None, max_workers=MAX_WORKERS, timeout=RESOLVE_TIMEOUT):
    """Run the group-by-variant pipeline on a review export."""
    orchestrator = PipelineOrchestrator(client=client, max_workers=max_workers, timeout=timeout)
    return orchestrator.run(file_path)


# ============================================================
# OUTPUT
# ============================================================

def format_report(result: PipelineResult) -> str:
    """Render the report and run summary as plain text."""
    lines = [f"Reviews grouped by variant (product {result.product_id}):", ""]

    if not result.report:
        lines.append("  (no reviews could be attributed to a variant)")
    for sku, review_ids in result.report.items():
        lines.append(f"  {sku} ({len(review_ids)})")
        lines.extend(f"    {review_id}" for review_id in review_ids)

    grouped = sum(len(ids) for ids in result.report.values())
    lines += [
        "",
        f"Grouped: {grouped} review(s) into {len(result.report)} variant(s)",
        f"No order number: {len(result.skipped)}",
        f"No line item for product: {len(result.unmatched)}",
        f"Matching line item without SKU: {len(result.no_sku)}",
        f"Failed lookups: {len(result.failures)}",
    ]
    for error in result.failures:
        lines.append(f"  review {error.review_id}, order {error.order_number}: {error.cause}")

    if result.cancelled:
        lines += ["", "Run interrupted - report is partial."]

    return "\n".join(lines)


def write_report_csv(report: Dict[str, List[str]], path) -> Path:
    """Write one sku,review_id row per grouped review."""
    path = Path(path)
    rows = [
        {"sku": sku, "review_id": review_id}
        for sku, review_ids in report.items()
        for review_id in review_ids
    ]
    df = pd.DataFrame(rows, columns=["sku", "review_id"])
    df.to_csv(path, index=False)
    logger.info(f"Saved {len(df)} rows to {path}")
    return path
