"""
Shared pytest fixtures: review exports on disk and a fake Shopify client.
"""
import sys
from pathlib import Path

import pandas as pd
import pytest

project_dir = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_dir.parents[1]))
sys.path.insert(0, str(project_dir))

from connections.schemas import REVIEW_EXPORT_COLUMNS

EXPORT_WIDTH = 32


def export_row(review_id, order_number="", product_id="", title="", content=""):
    row = [""] * EXPORT_WIDTH
    row[0] = "published"
    row[REVIEW_EXPORT_COLUMNS["review_id"]] = review_id
    row[REVIEW_EXPORT_COLUMNS["title"]] = title
    row[REVIEW_EXPORT_COLUMNS["content"]] = content
    row[REVIEW_EXPORT_COLUMNS["order_number"]] = order_number
    row[REVIEW_EXPORT_COLUMNS["product_id"]] = product_id
    return row


def orders_response(*line_items):
    """GraphQL body for one order holding (sku, legacy product id) line items."""
    return {
        "data": {
            "orders": {
                "edges": [{
                    "node": {
                        "lineItems": {
                            "edges": [
                                {"node": {"sku": sku, "product": {"legacyResourceId": pid}}}
                                for sku, pid in line_items
                            ]
                        }
                    }
                }]
            }
        }
    }


class FakeClient:
    """Answers order lookups from a dict of order name query -> body or exception."""

    def __init__(self, responses):
        self.responses = responses
        self.queries = []

    def execute(self, query, variables=None):
        name_query = variables["order_name_query"]
        self.queries.append(name_query)
        response = self.responses.get(name_query, {"data": {"orders": {"edges": []}}})
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def write_export(tmp_path):
    """Write rows built with export_row() to a CSV and return its path."""
    def _write(rows, name="reviews.csv"):
        path = tmp_path / name
        columns = [f"column_{i}" for i in range(EXPORT_WIDTH)]
        pd.DataFrame(rows, columns=columns).to_csv(path, index=False)
        return path
    return _write


@pytest.fixture
def scenario_export(write_export):
    return write_export([
        export_row("r1", "1001", "PID", "Great fit", "Runs true to size"),
        export_row("r2", "", "PID", "Lovely", "No order on file"),
        export_row("r3", "1002", "PID", "Nice color", "Brighter than expected"),
    ])


@pytest.fixture
def scenario_client():
    return FakeClient({
        "name:1001-QDO": orders_response(("A", "PID")),
        "name:1002-QDO": orders_response(("B", "OTHER"), ("C", "PID")),
    })
