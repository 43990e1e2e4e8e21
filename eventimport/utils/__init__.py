"""Utility modules for the event importer.

Provides shared utilities for:
- Text cleaning and name comparison
- Date/time parsing
- URL validation and platform detection
- Plain-text event summaries
"""

# Text utilities
from eventimport.utils.text import clean_html, name_similarity, normalize_name, normalize_whitespace

# Date utilities
from eventimport.utils.date_parser import parse_datetime, parse_or_now, utc_now

# URL utilities
from eventimport.utils.urls import (
    extract_domain,
    extract_source_id,
    infer_source,
    is_valid_url,
    match_blocked_platform,
)

__all__ = [
    # Text
    "clean_html",
    "name_similarity",
    "normalize_name",
    "normalize_whitespace",
    # Dates
    "parse_datetime",
    "parse_or_now",
    "utc_now",
    # URLs
    "extract_domain",
    "extract_source_id",
    "infer_source",
    "is_valid_url",
    "match_blocked_platform",
]
