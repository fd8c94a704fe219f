"""Shared constants for products and reviews"""

from enum import IntEnum

# Every size a product can be stocked in
SIZES = tuple(range(32, 49))

Size = IntEnum("Size", {f"EU_{size}": size for size in SIZES})

MAX_STOCK_PER_SIZE = 9999

# Cloud upload limit: images are sent to the media host at most this many at a time
IMAGE_UPLOAD_CHUNK_SIZE = 3

RESULTS_PER_PAGE = 6

MIN_REVIEW_RATING = 1
MAX_REVIEW_RATING = 5
