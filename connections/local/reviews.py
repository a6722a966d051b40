"""
Review platform export reader.

The export records the reviewed (parent) product and, when the customer
bought through the store, the order number. It never records the variant.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd

from ..errors import FormatError
from ..processing import process_table, select_positional
from ..schemas import REVIEW_EXPORT_COLUMNS

logger = logging.getLogger(__name__)

ENCODING_CANDIDATES = (
    "utf-8",
    "utf-8-sig",
    "cp1252",
    "latin1",
)

REQUIRED_COLUMNS = max(REVIEW_EXPORT_COLUMNS.values()) + 1


@dataclass(frozen=True)
class ProductReview:
    id: str
    order_number: Optional[str]
    title: str
    content: str


def read_export(path: Path) -> pd.DataFrame:
    """
    Read the raw export with every cell as a string, trying multiple
    encodings until one succeeds.

    Empty cells stay empty strings; cells missing from a short row are NaN.
    """
    last_err = None
    for enc in ENCODING_CANDIDATES:
        try:
            return pd.read_csv(
                path,
                encoding=enc,
                dtype=str,
                keep_default_na=False,
                index_col=False,
            )
        except UnicodeDecodeError as e:
            last_err = e
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise FormatError(path, f"could not read file: {e}") from e
    raise FormatError(
        path,
        f"could not decode with tried encodings {', '.join(ENCODING_CANDIDATES)}",
    ) from last_err


def get_reviews(path) -> Tuple[Optional[str], List[ProductReview]]:
    """
    Parse a review export into (product_id, reviews).

    The product id is taken from the first row that carries one and held
    for the rest of the file. Reviews keep file order and are neither
    filtered nor deduplicated; an empty order number becomes None.

    Raises:
        FormatError: unreadable file, too few columns, or a short row
    """
    path = Path(path)
    raw = read_export(path)

    if raw.shape[1] < REQUIRED_COLUMNS:
        raise FormatError(
            path,
            f"expected at least {REQUIRED_COLUMNS} columns, found {raw.shape[1]}",
        )

    df = select_positional(raw, REVIEW_EXPORT_COLUMNS)

    short_rows = df.isna().any(axis=1)
    if short_rows.any():
        # +2: header line and 1-based numbering
        line = int(df.index[short_rows][0]) + 2
        raise FormatError(path, f"line {line} has fewer than {REQUIRED_COLUMNS} columns")

    df = process_table(df, "review_export")

    product_id = None
    reviews = []
    for row in df.itertuples(index=False):
        if product_id is None and row.product_id:
            product_id = row.product_id
        if not row.review_id:
            logger.warning(f"Skipping row without a review id (order {row.order_number})")
            continue
        reviews.append(ProductReview(
            id=row.review_id,
            order_number=row.order_number or None,
            title=row.title or "",
            content=row.content or "",
        ))

    if reviews and product_id is None:
        raise FormatError(path, "no row carries a product id")

    logger.info(f"Read {len(reviews)} reviews for product {product_id} from {path}")
    return product_id, reviews
