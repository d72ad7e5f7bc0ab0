"""
Filter merger - combines explicit filters with the analyzer's output.

Explicit values always win. A resolved bank is treated as a strong intent
signal: analyzer tags are dropped and a generic request ("infos", "prep"...)
about a bank defaults to the interview category.

Pure functions only; no I/O.
"""

from typing import List, Optional, Sequence

from bridgeyou.models import EffectiveFilters, SearchAnalysis, SearchFilters
from .bank_resolver import apply_alias
from .vocabulary import BANK_ALIASES, INTERVIEW_CATEGORY, is_filler_term, normalize


def _dedupe(values: Sequence[str]) -> List[str]:
    kept: List[str] = []
    for value in values:
        if value and value not in kept:
            kept.append(value)
    return kept


def _bank_vocabulary(bank_names: Sequence[str]) -> List[str]:
    """Normalized spellings (as written, canonical, aliases) of the given banks."""
    spellings = set()
    for name in bank_names:
        canonical = apply_alias(name)
        spellings.add(normalize(name))
        spellings.add(normalize(canonical))
        spellings.update(alias for alias, target in BANK_ALIASES.items() if target == canonical)
    return [s for s in spellings if s]


def strip_bank_terms(search_terms: Sequence[str], bank_names: Sequence[str]) -> List[str]:
    """
    Drop search terms that only name one of the given banks.

    "Goldman" is dropped for bank "Goldman Sachs", as is "SocGen" for
    "Société Générale".
    """
    spellings = _bank_vocabulary(bank_names)
    if not spellings:
        return list(search_terms)

    kept = []
    for term in search_terms:
        normalized = normalize(term)
        names_bank = False
        for spelling in spellings:
            if normalized in (spelling, spelling.replace(" ", "")):
                names_bank = True
            elif len(normalized) > 2 and normalized in spelling.split():
                names_bank = True
        if not names_bank:
            kept.append(term)
    return kept


def has_generic_terms(search_terms: Sequence[str]) -> bool:
    """Whether any term is a generic filler word."""
    return any(is_filler_term(term) for term in search_terms)


def only_generic_terms(search_terms: Sequence[str]) -> bool:
    """Whether there is at least one term and every term is a filler word."""
    return bool(search_terms) and all(is_filler_term(term) for term in search_terms)


def explicit_cities(filters: SearchFilters) -> List[str]:
    cities = list(filters.cities)
    if filters.city:
        cities.append(filters.city)
    return _dedupe([c.strip() for c in cities])


def merge_filters(
    filters: Optional[SearchFilters],
    analysis: Optional[SearchAnalysis],
    resolved_bank_ids: Sequence[str] = ()
) -> EffectiveFilters:
    """
    Merge explicit filters with analyzer-derived filters.

    Args:
        filters: Filters supplied by the caller (may be None)
        analysis: Analyzer output, None in keyword mode
        resolved_bank_ids: Bank ids resolved from analysis.banks

    Returns:
        EffectiveFilters for the posts query
    """
    filters = filters or SearchFilters()

    if analysis is None:
        return EffectiveFilters(
            category=filters.category,
            type=filters.type,
            banks=_dedupe(filters.banks),
            tags=_dedupe(filters.tags),
            cities=explicit_cities(filters),
            date_from=filters.date_from,
            date_to=filters.date_to,
            sort_by=filters.sort_by or EffectiveFilters().sort_by,
        )

    banks_explicit = bool(filters.banks)
    banks = _dedupe(filters.banks) if banks_explicit else _dedupe(resolved_bank_ids)

    # Category: explicit, else the analyzer's only category
    category = filters.category
    if category is None and len(analysis.categories) == 1:
        category = analysis.categories[0]

    # Generic request about a bank -> interview content
    if filters.category is None and banks:
        content_terms = strip_bank_terms(analysis.search_terms, analysis.banks)
        if has_generic_terms(content_terms):
            category = INTERVIEW_CATEGORY

    post_type = filters.type
    if post_type is None and len(analysis.types) == 1:
        post_type = analysis.types[0]

    if filters.tags:
        tags = _dedupe(filters.tags)
    elif banks and not banks_explicit:
        tags = []
    else:
        tags = _dedupe(analysis.tags)

    cities = explicit_cities(filters) or _dedupe(analysis.cities)

    date_range = analysis.date_range
    date_from = filters.date_from or (date_range.date_from if date_range else None)
    date_to = filters.date_to or (date_range.date_to if date_range else None)

    return EffectiveFilters(
        category=category,
        type=post_type,
        banks=banks,
        tags=tags,
        cities=cities,
        date_from=date_from,
        date_to=date_to,
        sort_by=filters.sort_by or analysis.sort_by,
    )
