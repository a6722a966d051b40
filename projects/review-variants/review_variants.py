#!/usr/bin/env python3
"""
review_variants.py

Group a product's reviews by purchased variant, or generate a story stub.
Run from the repo root:
    python projects/review-variants/review_variants.py group-by-variant exports/reviews.csv
"""

import sys
from pathlib import Path

project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from variant_utils.cli import main


if __name__ == "__main__":
    sys.exit(main())
