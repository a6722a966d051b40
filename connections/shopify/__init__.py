"""
Shopify Admin GraphQL client.
"""
import logging
import json
import os
import urllib.error

import shopify
from dotenv import load_dotenv
from tenacity import (
    retry,
    stop_after_attempt,
    wait_fixed,
    retry_if_exception_type,
    before_sleep_log
)

from ..errors import ConfigError

load_dotenv()

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2025-01"


class ShopifyClient:
    """Client for the Shopify GraphQL Admin API."""

    def __init__(self, shop_name=None, token=None, api_version=None):
        self.shop_name = shop_name or os.environ.get("SHOP_NAME")
        self.token = token or os.environ.get("API_KEY")
        if not self.shop_name:
            raise ConfigError("SHOP_NAME")
        if not self.token:
            raise ConfigError("API_KEY")
        self.shop_url = shop_domain(self.shop_name)
        self.api_version = api_version or os.environ.get("SHOP_API_VERSION", DEFAULT_API_VERSION)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(2),
        retry=retry_if_exception_type((urllib.error.URLError, TimeoutError)),
        before_sleep=before_sleep_log(logger, logging.INFO),
        reraise=True
    )
    def execute(self, query, variables=None):
        """Execute a Shopify GraphQL query and return the parsed JSON body."""
        session = shopify.Session(self.shop_url, self.api_version, self.token)
        shopify.ShopifyResource.activate_session(session)
        try:
            response = shopify.GraphQL().execute(query, variables or {})
        except Exception as e:
            logger.error(f"Failed to execute GraphQL: {e}")
            raise
        finally:
            shopify.ShopifyResource.clear_session()

        logger.debug(f"Executed GraphQL: {query.strip()[:50]}...")
        return response if isinstance(response, dict) else json.loads(response)


def get_client() -> ShopifyClient:
    """Get a ShopifyClient configured from the environment."""
    return ShopifyClient()


def shop_domain(shop_name: str) -> str:
    """Expand a bare store name to its myshopify.com domain."""
    shop_name = shop_name.strip()
    for prefix in ("https://", "http://"):
        if shop_name.startswith(prefix):
            shop_name = shop_name[len(prefix):]
    shop_name = shop_name.rstrip("/")
    if "." not in shop_name:
        shop_name = f"{shop_name}.myshopify.com"
    return shop_name


def safe_get(data, *keys, default=None):
    """Safely extract nested values from a dictionary."""
    current = data
    for key in keys:
        try:
            if current is None or key not in current:
                return default
            current = current[key]
        except (TypeError, KeyError, AttributeError):
            return default
    return current if current is not None else default
