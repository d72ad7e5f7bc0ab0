"""
Tag suggestions for new posts.

Uses the completion service when configured and falls back to rule based
tags otherwise, or when the model answers with something unusable.
"""

import json
import logging
import re
from typing import List, Optional

from bridgeyou.error_handling import CompletionError
from bridgeyou.models import PostCategory, PostType
from bridgeyou.services.llm import CompletionClient, extract_json_block
from bridgeyou.services.llm.prompts import TAGGER_SYSTEM_PROMPT, build_tag_prompt
from bridgeyou.services.search.vocabulary import CATEGORY_LABELS, TYPE_LABELS

logger = logging.getLogger(__name__)

MAX_AI_TAGS = 5
MAX_FALLBACK_TAGS = 4
TAGGER_MAX_TOKENS = 150

CATEGORY_TAGS = {
    PostCategory.ENTRETIEN_SALES_TRADING: "entretien-sales-trading",
    PostCategory.CONSEILS_ECOLE: "conseils-ecole",
    PostCategory.STAGE_SUMMER_GRADUATE: "stage",
    PostCategory.QUANT_HEDGE_FUNDS: "quantitative",
}

TYPE_TAGS = {
    PostType.TRANSCRIPT_ENTRETIEN: "transcript",
    PostType.RETOUR_EXPERIENCE: "experience",
    PostType.QUESTION: "question",
}

# (substring of the title, tag)
TITLE_KEYWORD_TAGS = [
    ("entretien", "entretien"),
    ("stage", "stage"),
    ("conseil", "conseils"),
    ("prep", "preparation"),
]


def slugify_bank(name: str) -> str:
    slug = re.sub(r"\s+", "-", name.lower())
    return re.sub(r"[^a-z0-9-]", "", slug)


def fallback_tags(
    title: str,
    category: PostCategory,
    bank_name: Optional[str] = None,
    post_type: Optional[PostType] = None
) -> List[str]:
    """
    Rule based tags: category, bank, type and title keywords.

    Pads with generic tags when fewer than two were found and never
    returns more than four.
    """
    tags: List[str] = []

    if category in CATEGORY_TAGS:
        tags.append(CATEGORY_TAGS[category])
    if bank_name:
        tags.append(slugify_bank(bank_name))
    if post_type in TYPE_TAGS:
        tags.append(TYPE_TAGS[post_type])

    title_lower = title.lower()
    for keyword, tag in TITLE_KEYWORD_TAGS:
        if keyword in title_lower:
            tags.append(tag)

    if len(tags) < 2:
        tags.extend(["finance", "carriere"])

    return tags[:MAX_FALLBACK_TAGS]


class TagGenerator:
    """Suggest tags for a post being written"""

    def __init__(self, client: Optional[CompletionClient] = None, temperature: float = 0.7):
        self.client = client
        self.temperature = temperature

    def is_available(self) -> bool:
        return self.client is not None

    async def generate(
        self,
        title: str,
        category: PostCategory,
        bank_name: Optional[str] = None,
        post_type: Optional[PostType] = None
    ) -> List[str]:
        """
        Generate up to five lower-case tags.

        Never raises: any completion failure yields the rule based tags.
        """
        if self.client is None:
            logger.warning("Completion service not configured, using fallback tags")
            return fallback_tags(title, category, bank_name, post_type)

        prompt = build_tag_prompt(
            title,
            CATEGORY_LABELS.get(category, category.value),
            bank_name=bank_name,
            type_label=TYPE_LABELS.get(post_type) if post_type else None
        )

        try:
            raw = await self.client.complete(
                system=TAGGER_SYSTEM_PROMPT,
                prompt=prompt,
                temperature=self.temperature,
                max_tokens=TAGGER_MAX_TOKENS
            )
            tags = parse_tags(raw)
        except Exception as e:
            logger.error(f"Tag generation failed, using fallback tags: {e}")
            return fallback_tags(title, category, bank_name, post_type)

        logger.info(f"Generated tags for '{title}': {tags}")
        return tags


def parse_tags(text: str) -> List[str]:
    """
    Parse a JSON array of tags.

    Raises:
        CompletionError: if the text is not a JSON array
    """
    try:
        payload = json.loads(extract_json_block(text))
    except json.JSONDecodeError as e:
        raise CompletionError(f"Tag response is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise CompletionError("Tag response is not a JSON array")

    tags = [
        tag.lower().strip()
        for tag in payload
        if isinstance(tag, str) and len(tag) > 1
    ]
    return tags[:MAX_AI_TAGS]
