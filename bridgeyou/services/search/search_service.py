"""
Search service - coordinates analysis, bank resolution, filter merging and the
paginated posts read.

Two failure paths: interpretation problems are absorbed by the analyzer,
while data store errors from the repository propagate to the caller.
"""

import logging
from typing import List, Optional

from bridgeyou.models import SearchAnalysis, SearchFilters, SearchResponse
from .bank_resolver import BankResolver
from .filter_merger import merge_filters, strip_bank_terms
from .query_analyzer import QueryAnalyzer
from .query_builder import PAGE_SIZE, next_page
from .query_normalizer import normalize_query, split_keywords

logger = logging.getLogger(__name__)

MIN_SUGGESTION_LENGTH = 2
MAX_SUGGESTIONS = 10
SUGGESTION_SOURCE_LIMIT = 5
MIN_SUGGESTED_WORD_LENGTH = 3


class SearchService:
    """Run searches over approved posts"""

    def __init__(
        self,
        repository,
        analyzer: QueryAnalyzer,
        resolver: BankResolver,
        page_size: int = PAGE_SIZE
    ):
        """
        Args:
            repository: PostRepository (search, find_title_matches,
                find_tag_matches, popular_tags)
            analyzer: Natural language query analyzer
            resolver: Bank name resolver
            page_size: Rows per page; must match the repository's builder
        """
        self.repository = repository
        self.analyzer = analyzer
        self.resolver = resolver
        self.page_size = page_size

    async def enhanced_search(
        self,
        query: Optional[str] = None,
        filters: Optional[SearchFilters] = None,
        page_param: int = 0,
        is_authenticated: bool = False,
        is_natural_language: bool = False
    ) -> SearchResponse:
        """
        Search approved posts.

        In natural language mode the query is analyzed first and the
        analysis is merged with the explicit filters; otherwise the query is
        split into keywords and only explicit filters apply.

        Args:
            query: Free text query
            filters: Explicit filters (always win over analyzed ones)
            page_param: Zero-based page index
            is_authenticated: Anonymous callers only see public posts
            is_natural_language: Whether to run the analyzer

        Returns:
            SearchResponse with data, count, nextPage and searchAnalysis

        Raises:
            DatabaseQueryError: if the posts read fails
        """
        analysis: Optional[SearchAnalysis] = None
        resolved_bank_ids: List[str] = []

        nl_query = normalize_query(query, is_natural_language)
        if nl_query is not None:
            analysis = await self.analyzer.analyze(nl_query)
            resolved_bank_ids = await self.resolver.resolve(analysis.banks)
            search_terms = list(analysis.search_terms)
        else:
            search_terms = split_keywords(query)

        effective = merge_filters(filters, analysis, resolved_bank_ids)

        if analysis is not None and effective.banks:
            # The bank filter already covers bank names typed in the query
            search_terms = strip_bank_terms(search_terms, analysis.banks)

        logger.info(
            f"Searching posts: terms={search_terms} category={effective.category} "
            f"type={effective.type} banks={effective.banks} page={page_param}"
        )

        data, count = await self.repository.search(
            effective,
            page=page_param,
            is_authenticated=is_authenticated,
            search_terms=search_terms
        )

        return SearchResponse(
            data=data,
            count=count,
            next_page=next_page(page_param, count, self.page_size),
            search_analysis=analysis,
        )

    async def get_search_suggestions(self, query: str) -> List[str]:
        """
        Autocomplete suggestions from post titles and tags.

        Returns an empty list for short queries or when the store fails.
        """
        if not query or len(query) < MIN_SUGGESTION_LENGTH:
            return []

        needle = query.lower()
        suggestions: List[str] = []

        try:
            titles = await self.repository.find_title_matches(query, limit=SUGGESTION_SOURCE_LIMIT)
            tag_lists = await self.repository.find_tag_matches(query, limit=SUGGESTION_SOURCE_LIMIT)
        except Exception as e:
            logger.error(f"Error getting search suggestions: {e}")
            return []

        for title in titles:
            for word in title.lower().split():
                if needle in word and len(word) >= MIN_SUGGESTED_WORD_LENGTH and word not in suggestions:
                    suggestions.append(word)

        for tags in tag_lists:
            for tag in tags:
                if needle in tag.lower() and tag not in suggestions:
                    suggestions.append(tag)

        return suggestions[:MAX_SUGGESTIONS]

    async def get_popular_tags(self, limit: int = 20) -> List[str]:
        try:
            return await self.repository.popular_tags(limit=limit)
        except Exception as e:
            logger.error(f"Error getting popular tags: {e}")
            return []

    def is_ai_available(self) -> bool:
        return self.analyzer.is_available()
