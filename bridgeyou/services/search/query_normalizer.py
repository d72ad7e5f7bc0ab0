"""
Query normalizer - turns raw search text into keyword terms.
"""

from typing import List, Optional


MIN_KEYWORD_LENGTH = 3


def split_keywords(query: Optional[str]) -> List[str]:
    """
    Split a raw query on single spaces and keep terms longer than 2 characters.

    Args:
        query: Raw search text (may be None or blank)

    Returns:
        Keyword terms in query order
    """
    if not query:
        return []
    return [term for term in query.split(" ") if len(term) >= MIN_KEYWORD_LENGTH]


def normalize_query(query: Optional[str], is_natural_language: bool) -> Optional[str]:
    """
    Return the text to hand to the interpreter, or None for keyword mode.

    Natural language mode passes the query through untouched apart from
    surrounding whitespace; blank queries never reach the interpreter.
    """
    if not is_natural_language or not query or not query.strip():
        return None
    return query.strip()
