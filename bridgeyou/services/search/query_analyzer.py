"""
Natural language query analyzer - Uses the completion service to turn a free
text query into structured search parameters.

Falls back to a plain keyword split whenever the service is not configured or
answers with something that cannot be parsed. analyze() never raises.
"""

import json
import logging
import math
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from bridgeyou.error_handling import CompletionError
from bridgeyou.models import DateRange, PostCategory, PostType, SearchAnalysis, SortMode
from bridgeyou.services.llm import CompletionClient, extract_json_block
from bridgeyou.services.llm.prompts import ANALYZER_SYSTEM_PROMPT, build_analysis_prompt
from .query_normalizer import split_keywords
from .vocabulary import CATEGORY_VALUES, KNOWN_BANKS, SORT_VALUES, TYPE_VALUES

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 0.5
DEFAULT_CONFIDENCE = 0.7


class QueryAnalyzer:
    """Interpret natural language search queries (French)"""

    def __init__(
        self,
        client: Optional[CompletionClient] = None,
        temperature: float = 0.3,
        bank_names: Optional[Iterable[str]] = None
    ):
        self.client = client
        self.temperature = temperature
        self.bank_names = list(bank_names) if bank_names is not None else list(KNOWN_BANKS)

    def is_available(self) -> bool:
        """Whether a completion service is configured."""
        return self.client is not None

    async def analyze(self, query: str) -> SearchAnalysis:
        """
        Analyze a query into a validated SearchAnalysis.

        Args:
            query: Raw natural language query

        Returns:
            SearchAnalysis from the completion service, or the keyword
            fallback with confidence 0.5
        """
        if self.client is None:
            logger.warning("Completion service not configured, falling back to keyword search")
            return fallback_analysis(query)

        try:
            prompt = build_analysis_prompt(query, self.bank_names)
            raw = await self.client.complete(
                system=ANALYZER_SYSTEM_PROMPT,
                prompt=prompt,
                temperature=self.temperature
            )
            logger.debug(f"Raw analysis response: {raw}")
            analysis = validate_analysis(parse_analysis_payload(raw), query)
        except Exception as e:
            logger.error(f"Natural language analysis failed, using keyword fallback: {e}")
            return fallback_analysis(query)

        logger.info(
            f"Analyzed query '{query}': terms={analysis.search_terms} "
            f"categories={[c.value for c in analysis.categories]} banks={analysis.banks} "
            f"confidence={analysis.confidence:.2f}"
        )
        return analysis


def fallback_analysis(query: str) -> SearchAnalysis:
    """Keyword-only analysis used when interpretation is unavailable."""
    return SearchAnalysis(
        search_terms=split_keywords(query),
        sort_by=SortMode.RECENT,
        confidence=FALLBACK_CONFIDENCE,
    )


def parse_analysis_payload(text: str) -> Dict[str, Any]:
    """
    Parse the completion text into a JSON object.

    Raises:
        CompletionError: if the text is not a JSON object
    """
    try:
        payload = json.loads(extract_json_block(text))
    except json.JSONDecodeError as e:
        raise CompletionError(f"Analysis response is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise CompletionError(f"Analysis response is a {type(payload).__name__}, expected an object")
    return payload


def validate_analysis(payload: Dict[str, Any], query: str) -> SearchAnalysis:
    """
    Coerce an untrusted analysis payload into a SearchAnalysis.

    Unknown enum values are dropped, list fields that are not lists become
    empty, sortBy defaults to "recent" and confidence is clamped to [0, 1]
    (0.7 when not a number).
    """
    raw_terms = payload.get("searchTerms")
    if isinstance(raw_terms, list):
        search_terms = [t for t in raw_terms if isinstance(t, str) and len(t) > 1]
    else:
        search_terms = split_keywords(query)

    categories = [PostCategory(c) for c in _closed_set(payload.get("categories"), CATEGORY_VALUES)]
    types = [PostType(t) for t in _closed_set(payload.get("types"), TYPE_VALUES)]

    sort_by = payload.get("sortBy")
    if not isinstance(sort_by, str) or sort_by not in SORT_VALUES:
        sort_by = SortMode.RECENT.value

    return SearchAnalysis(
        search_terms=search_terms,
        categories=categories,
        types=types,
        tags=_string_list(payload.get("tags")),
        cities=_string_list(payload.get("cities")),
        banks=_string_list(payload.get("banks")),
        date_range=_date_range(payload.get("dateRange")),
        sort_by=SortMode(sort_by),
        confidence=_confidence(payload.get("confidence")),
    )


def _closed_set(value: Any, allowed: Iterable[str]) -> List[str]:
    if not isinstance(value, list):
        return []
    allowed = set(allowed)
    kept: List[str] = []
    for item in value:
        if isinstance(item, str) and item in allowed and item not in kept:
            kept.append(item)
    return kept


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    kept: List[str] = []
    for item in value:
        if isinstance(item, str) and item.strip() and item.strip() not in kept:
            kept.append(item.strip())
    return kept


def _iso_date(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        date.fromisoformat(value.strip()[:10])
    except ValueError:
        logger.warning(f"Ignoring malformed date in analysis: {value!r}")
        return None
    return value.strip()


def _date_range(value: Any) -> Optional[DateRange]:
    if not isinstance(value, dict):
        return None
    date_from = _iso_date(value.get("from"))
    date_to = _iso_date(value.get("to"))
    if date_from is None and date_to is None:
        return None
    return DateRange(date_from=date_from, date_to=date_to)


def _confidence(value: Any) -> float:
    # bool is an int subclass but not a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_CONFIDENCE
    try:
        score = float(value)
    except OverflowError:
        # integer beyond float range
        return 1.0 if value > 0 else 0.0
    if math.isnan(score):
        return DEFAULT_CONFIDENCE
    return max(0.0, min(1.0, score))
