import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

# 1 = resolve one order at a time. Raise carefully: Shopify rate limits
# GraphQL by query cost per store.
MAX_WORKERS = int(os.getenv("REVIEW_VARIANTS_MAX_WORKERS", "1"))

# Seconds to wait for each order lookup; unset waits as long as Shopify does.
_timeout = os.getenv("REVIEW_VARIANTS_TIMEOUT")
RESOLVE_TIMEOUT = float(_timeout) if _timeout else None
