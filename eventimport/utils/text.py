"""Text cleaning and comparison utilities."""

import html
import re
import unicodedata
from difflib import SequenceMatcher


def normalize_whitespace(text: str, preserve_newlines: bool = True) -> str:
    """Normalize whitespace in text.

    Args:
        text: Input text
        preserve_newlines: If True, preserve newlines (normalized to max 2)

    Returns:
        Text with normalized whitespace
    """
    if not text:
        return text

    if preserve_newlines:
        # Multiple spaces/tabs to single space (preserve newlines)
        text = re.sub(r"[ \t]+", " ", text)
        text = re.sub(r" *\n *", "\n", text)
        # Max 2 consecutive newlines
        text = re.sub(r"\n{3,}", "\n\n", text)
    else:
        text = re.sub(r"\s+", " ", text)

    return text.strip()


def clean_html(text: str | None) -> str | None:
    """Convert HTML to plain text preserving paragraph structure.

    Args:
        text: HTML text

    Returns:
        Plain text or None if input was None/empty
    """
    if not text:
        return None

    result = text

    # Block elements become line breaks before tags are stripped
    result = re.sub(r"</p>\s*", "\n\n", result, flags=re.IGNORECASE)
    result = re.sub(r"<p[^>]*>", "", result, flags=re.IGNORECASE)
    result = re.sub(r"</div>\s*", "\n", result, flags=re.IGNORECASE)
    result = re.sub(r"<div[^>]*>", "", result, flags=re.IGNORECASE)
    result = re.sub(r"<br\s*/?>", "\n", result, flags=re.IGNORECASE)
    result = re.sub(r"<li[^>]*>", "\n• ", result, flags=re.IGNORECASE)
    result = re.sub(r"</li>", "", result, flags=re.IGNORECASE)
    result = re.sub(r"</?[ou]l[^>]*>", "\n", result, flags=re.IGNORECASE)

    result = re.sub(r"<[^>]+>", "", result)
    result = html.unescape(result)

    result = normalize_whitespace(result)
    return result if result else None


def normalize_name(text: str | None) -> str:
    """Normalize a venue/host name for comparison.

    - Lowercase
    - Strip accents
    - Remove punctuation
    - Collapse whitespace
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFKD", text)
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = text.lower()
    text = re.sub(r"[^\w\s]", " ", text)
    return " ".join(text.split())


def name_similarity(first: str, second: str) -> float:
    """Similarity ratio (0.0 to 1.0) between two names after normalization."""
    norm1 = normalize_name(first)
    norm2 = normalize_name(second)

    if not norm1 or not norm2:
        return 0.0

    return SequenceMatcher(None, norm1, norm2).ratio()
