"""
Shopify order lookups: recover the purchased line items behind an order number.

The review export stores the plain order number, while Shopify order names
carry a store-specific suffix (e.g. 1001 -> "1001-QDO"), so orders are
searched by name rather than fetched by id.
"""
import logging
import os
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from ..errors import ResolutionError
from . import get_client, safe_get

logger = logging.getLogger(__name__)

ORDER_NAME_SUFFIX = os.getenv("SHOP_ORDER_NAME_SUFFIX", "-QDO")

# A single page is enough for the order sizes we see. Orders with more line
# items than this are truncated.
LINE_ITEMS_PAGE_SIZE = 100

# ============================================================
# QUERIES
# ============================================================

ORDER_LINE_ITEMS_QUERY = """
query ($order_name_query: String) {
  orders(first: 1, query: $order_name_query) {
    edges {
      node {
        lineItems(first: %d) {
          edges {
            node {
              sku
              product {
                legacyResourceId
              }
            }
          }
        }
      }
    }
  }
}
""" % LINE_ITEMS_PAGE_SIZE


# ============================================================
# RESPONSE CONTRACT
# ============================================================

class Product(BaseModel):
    legacy_resource_id: str = Field(alias="legacyResourceId")


class LineItem(BaseModel):
    sku: Optional[str] = None
    product: Optional[Product] = None


class LineItemEdge(BaseModel):
    node: LineItem


class LineItemConnection(BaseModel):
    edges: List[LineItemEdge]


class Order(BaseModel):
    line_items: LineItemConnection = Field(alias="lineItems")


class OrderEdge(BaseModel):
    node: Order


class OrderConnection(BaseModel):
    edges: List[OrderEdge]


class OrdersData(BaseModel):
    orders: OrderConnection


class OrdersResponse(BaseModel):
    data: OrdersData


class OrderLineItem(BaseModel):
    """A purchased line item, flattened to what variant grouping needs."""
    sku: Optional[str] = None
    product_id: Optional[str] = None


# ============================================================
# PUBLIC FUNCTIONS
# ============================================================

def order_name_query(order_number: str) -> str:
    """Build the orders search string for an order number."""
    return f"name:{str(order_number).strip()}{ORDER_NAME_SUFFIX}"


def get_line_items_for_order(
    order_number: str,
    review_id: Optional[str] = None,
    client=None,
) -> List[OrderLineItem]:
    """
    Return the line items of the order behind a review.

    An order that can't be found, or has no line items, gives an empty list.

    Raises:
        ResolutionError: the query failed or the response didn't have the
            expected shape
    """
    client = client or get_client()
    variables = {"order_name_query": order_name_query(order_number)}

    try:
        response = client.execute(ORDER_LINE_ITEMS_QUERY, variables)
    except Exception as e:
        raise ResolutionError(order_number, review_id, e) from e

    errors = safe_get(response, "errors")
    if errors:
        raise ResolutionError(order_number, review_id, f"GraphQL error: {errors}")

    try:
        parsed = OrdersResponse.model_validate(response)
    except ValidationError as e:
        raise ResolutionError(order_number, review_id, f"unexpected response shape: {e}") from e

    if not parsed.data.orders.edges:
        logger.info(f"No order found for {variables['order_name_query']} (review {review_id})")
        return []

    order = parsed.data.orders.edges[0].node
    line_items = [
        OrderLineItem(
            sku=edge.node.sku,
            product_id=edge.node.product.legacy_resource_id if edge.node.product else None,
        )
        for edge in order.line_items.edges
    ]

    logger.debug(f"Order {order_number}: {len(line_items)} line item(s)")
    return line_items
