"""Extraction strategies: scraped HTML or operator-pasted text."""

from eventimport.extractors.free_text import parse_event_text
from eventimport.extractors.structured import extract_jsonld_event, extract_structured_data

__all__ = ["extract_jsonld_event", "extract_structured_data", "parse_event_text"]
