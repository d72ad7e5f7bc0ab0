"""
Domain vocabulary shared by the query analyzer, bank resolver and filter merger.

The forum is French, so labels, filler words and city names are French.
"""

import unicodedata
from typing import Dict, FrozenSet, List

from bridgeyou.models import PostCategory, PostType, SortMode


CATEGORY_LABELS: Dict[PostCategory, str] = {
    PostCategory.ENTRETIEN_SALES_TRADING: "Entretien Sales & Trading",
    PostCategory.CONSEILS_ECOLE: "Conseils par école",
    PostCategory.STAGE_SUMMER_GRADUATE: "Stage / Summer / Graduate",
    PostCategory.QUANT_HEDGE_FUNDS: "Quant & Hedge Funds",
}

TYPE_LABELS: Dict[PostType, str] = {
    PostType.QUESTION: "Questions",
    PostType.RETOUR_EXPERIENCE: "Retours d'expérience",
    PostType.TRANSCRIPT_ENTRETIEN: "Transcripts d'entretien",
    PostType.FICHIER_ATTACHE: "Fichiers attachés",
}

CATEGORY_VALUES: FrozenSet[str] = frozenset(c.value for c in PostCategory)
TYPE_VALUES: FrozenSet[str] = frozenset(t.value for t in PostType)
SORT_VALUES: FrozenSet[str] = frozenset(s.value for s in SortMode)

# Generic requests about a named bank are read as interview content
INTERVIEW_CATEGORY = PostCategory.ENTRETIEN_SALES_TRADING

KNOWN_BANKS: List[str] = [
    "Goldman Sachs",
    "JP Morgan",
    "Morgan Stanley",
    "BNP Paribas",
    "Société Générale",
    "Crédit Agricole CIB",
    "Natixis",
    "Barclays",
    "Deutsche Bank",
    "Citi",
    "HSBC",
    "UBS",
    "Bank of America",
    "Nomura",
    "Lazard",
    "Rothschild & Co",
]

# Short forms -> canonical directory name (keys are normalized)
BANK_ALIASES: Dict[str, str] = {
    "gs": "Goldman Sachs",
    "goldman": "Goldman Sachs",
    "jpm": "JP Morgan",
    "jp": "JP Morgan",
    "jpmorgan": "JP Morgan",
    "j.p. morgan": "JP Morgan",
    "ms": "Morgan Stanley",
    "bnp": "BNP Paribas",
    "bnpp": "BNP Paribas",
    "sg": "Société Générale",
    "socgen": "Société Générale",
    "soc gen": "Société Générale",
    "societe generale": "Société Générale",
    "ca": "Crédit Agricole CIB",
    "cacib": "Crédit Agricole CIB",
    "credit agricole": "Crédit Agricole CIB",
    "db": "Deutsche Bank",
    "deutsche": "Deutsche Bank",
    "citigroup": "Citi",
    "citibank": "Citi",
    "bofa": "Bank of America",
    "baml": "Bank of America",
    "rothschild": "Rothschild & Co",
}

COMMON_CITIES: List[str] = [
    "Paris",
    "Londres",
    "New York",
    "Hong Kong",
    "Singapour",
    "Genève",
    "Zurich",
    "Francfort",
    "Luxembourg",
    "Milan",
    "Madrid",
    "Dubaï",
]

# Terms that say nothing beyond "tell me about this bank". Normalized form.
GENERIC_FILLER_TERMS: FrozenSet[str] = frozenset({
    "trucs",
    "truc",
    "infos",
    "info",
    "informations",
    "conseils",
    "conseil",
    "tips",
    "prep",
    "preparation",
    "preparer",
    "entretien",
    "entretiens",
    "interview",
    "interviews",
    "questions",
    "question",
    "experience",
    "experiences",
    "retour",
    "retours",
})


def normalize(text: str) -> str:
    """Lower-case and strip accents for comparisons."""
    decomposed = unicodedata.normalize("NFKD", text.strip().casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def is_filler_term(term: str) -> bool:
    return normalize(term) in GENERIC_FILLER_TERMS


# Display names (French or English) -> stored city slug. Normalized keys.
CITY_SLUGS: Dict[str, str] = {
    "londres": "london",
    "new york": "new_york",
    "hong kong": "hong_kong",
    "singapour": "singapore",
    "geneve": "geneva",
    "francfort": "frankfurt",
    "dubai": "dubai",
    "tokyo": "tokyo",
}


def city_slug(name: str) -> str:
    """Stored form of a city name: "Londres" -> "london", "New York" -> "new_york"."""
    normalized = normalize(name)
    return CITY_SLUGS.get(normalized, normalized.replace(" ", "_"))
