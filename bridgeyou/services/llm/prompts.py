"""
Prompts for the search query analyzer and the tag generator.

Both prompts embed the forum vocabulary so the model answers with the
platform's own category and type keys.
"""

from typing import Iterable, Optional

from bridgeyou.services.search.vocabulary import (
    BANK_ALIASES,
    CATEGORY_LABELS,
    COMMON_CITIES,
    TYPE_LABELS,
)


ANALYZER_SYSTEM_PROMPT = (
    "You are a search query analyzer for a French finance and trading careers forum. "
    "Return only valid JSON."
)

TAGGER_SYSTEM_PROMPT = (
    "You are a tag generator for a French finance forum. "
    "Return only a JSON array of relevant tags."
)


def _format_aliases(bank_names: Iterable[str]) -> str:
    lines = []
    for name in bank_names:
        aliases = sorted(alias for alias, target in BANK_ALIASES.items() if target == name)
        if aliases:
            lines.append(f"- {name} (aliases: {', '.join(aliases)})")
        else:
            lines.append(f"- {name}")
    return "\n".join(lines)


def build_analysis_prompt(query: str, bank_names: Iterable[str]) -> str:
    """Build the user prompt asking for structured search parameters."""

    categories = "\n".join(f"- {c.value}: {label}" for c, label in CATEGORY_LABELS.items())
    types = "\n".join(f"- {t.value}: {label}" for t, label in TYPE_LABELS.items())
    cities = ", ".join(COMMON_CITIES)

    return f"""Analyze this search query for a French derivatives/trading forum and extract search parameters:

Query: "{query}"

Context: This is a forum about finance, trading, internships, and careers in:
- Sales & Trading interviews
- School advice
- Internships/Summer/Graduate programs
- Quantitative finance & Hedge funds

Available categories:
{categories}

Available post types:
{types}

Known banks:
{_format_aliases(bank_names)}

Common cities: {cities}

Extract and return ONLY a JSON object with these fields:
{{
  "searchTerms": ["array", "of", "relevant", "keywords"],
  "categories": ["array_of_matching_category_keys"],
  "types": ["array_of_matching_type_keys"],
  "tags": ["array", "of", "relevant", "tags"],
  "cities": ["array", "of", "city", "names"],
  "banks": ["array", "of", "bank", "names"],
  "dateRange": {{"from": "YYYY-MM-DD", "to": "YYYY-MM-DD"}} or null,
  "sortBy": "recent|popular|comments",
  "confidence": 0.0-1.0
}}

Rules:
- Only include categories/types that match the query
- Put bank names in "banks" (use the canonical name when you recognise an alias), not in "searchTerms"
- Put city names in "cities", not in "searchTerms"
- Extract meaningful search terms in both French and English
- Set sortBy based on query intent (popular for "best", recent for "latest", comments for "discussion")
- Return confidence score based on how well you understand the query
- If no specific date mentioned, leave dateRange null"""


def build_tag_prompt(
    title: str,
    category_label: str,
    bank_name: Optional[str] = None,
    type_label: Optional[str] = None
) -> str:
    """Build the user prompt asking for 3-5 French tags for a post."""

    bank_line = f"Bank: {bank_name}\n" if bank_name else ""
    type_line = f"Type: {type_label}\n" if type_label else ""

    return f"""Generate relevant tags for a French finance forum post with these details:

Title: "{title}"
Category: {category_label}
{bank_line}{type_line}
Context: This is a forum about finance interviews, trading, internships, and banking careers.

Generate 3-5 relevant tags that would help users find this content. Tags should be:
- In French
- Relevant to finance/banking/interviews
- Specific but searchable
- Lower-case words joined by hyphens

Common tag categories:
- Interview types: "entretien-technique", "entretien-comportemental", "case-study", "assessment-center"
- Job types: "stage", "graduate-program", "cdi", "summer-internship", "off-cycle"
- Skills: "finance-corporate", "sales-trading", "quantitative", "risk-management", "m-a"
- Preparation: "preparation-entretien", "cv-optimisation", "motivation", "networking"
- Banks: use the bank name if relevant like "goldman-sachs", "bnp-paribas"

Return ONLY a JSON array of 3-5 tag strings. No explanations.

Example: ["entretien-sales-trading", "goldman-sachs", "preparation", "case-study", "stage-ete"]"""
