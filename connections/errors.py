"""
Error types shared by the connectors and the report pipelines.
"""


class FormatError(Exception):
    """Input file is missing, unreadable, or not in the expected layout."""

    def __init__(self, path, message):
        self.path = str(path)
        self.message = message
        super().__init__(f"{message} (file `{self.path}`)")


class ConfigError(Exception):
    """A required environment variable is not set."""

    def __init__(self, variable):
        self.variable = variable
        super().__init__(f"Missing required environment variable: {variable}")


class ResolutionError(Exception):
    """A single order lookup failed. Recoverable: the run carries on."""

    def __init__(self, order_number, review_id=None, cause=None):
        self.order_number = order_number
        self.review_id = review_id
        self.cause = cause
        super().__init__(
            f"Fetching the line items for order {order_number} "
            f"(review {review_id}) failed: {cause}"
        )
