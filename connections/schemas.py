# Column layouts and cell types for the tables read by the connectors.

# Review platform export. Positions are 0-based, header row excluded.
REVIEW_EXPORT_COLUMNS = {
    "review_id": 1,
    "title": 2,
    "content": 3,
    "order_number": 22,
    "product_id": 30,
}

SCHEMAS = {
    "review_export": {
        "review_id": "text",
        "title": "text",
        "content": "text",
        "order_number": "text",
        "product_id": "string",
    },
}
