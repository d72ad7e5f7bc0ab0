"""
Posts query builder - translates EffectiveFilters into one parameterised
PostgreSQL read (page of rows + exact count) over approved posts.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, List, Optional, Sequence

from bridgeyou.models import EffectiveFilters, PostStatus, SortMode
from .vocabulary import city_slug, is_filler_term


PAGE_SIZE = 10

POST_COLUMNS = """
    p.id, p.user_id, p.bank_id, p.title, p.content, p.category, p.type,
    p.tags, p.city, p.is_public, p.status, p.upvotes, p.downvotes,
    p.comments_count, p.created_at, p.updated_at,
    CASE WHEN b.id IS NULL THEN NULL
         ELSE json_build_object('id', b.id, 'name', b.name, 'logo_url', b.logo_url)
    END AS bank,
    COALESCE((
        SELECT json_agg(json_build_object(
            'id', c.id,
            'status', c.status,
            'is_selected', c.is_selected,
            'tokens_awarded', c.tokens_awarded,
            'created_at', c.created_at
        ) ORDER BY c.created_at)
        FROM corrections c
        WHERE c.post_id = p.id
    ), '[]'::json) AS corrections
"""

POST_SOURCE = "FROM posts p LEFT JOIN banks b ON b.id = p.bank_id"

ORDER_BY = {
    SortMode.RECENT: "p.created_at DESC, p.id",
    SortMode.POPULAR: "p.upvotes DESC, p.created_at DESC, p.id",
    SortMode.COMMENTS: "p.comments_count DESC, p.created_at DESC, p.id",
}


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so a term only matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def next_page(page: int, count: int, page_size: int = PAGE_SIZE) -> Optional[int]:
    """Zero-based index of the next page, or None when this is the last one."""
    if count and (page + 1) * page_size < count:
        return page + 1
    return None


@dataclass
class PostQuery:
    """A ready-to-run page query and its matching count query"""
    sql: str
    params: List[Any]
    count_sql: str
    count_params: List[Any]
    page: int
    page_size: int
    keyword_filter_applied: bool = False
    conditions: List[str] = field(default_factory=list)


class _Where:
    """Accumulates AND-ed conditions with positional ($n) parameters."""

    def __init__(self):
        self.conditions: List[str] = []
        self.params: List[Any] = []

    def param(self, value: Any) -> str:
        self.params.append(value)
        return f"${len(self.params)}"

    def add(self, condition: str) -> None:
        self.conditions.append(condition)

    def sql(self) -> str:
        return " AND ".join(self.conditions)


class PostQueryBuilder:
    """Builds paginated reads against approved posts"""

    def __init__(self, page_size: int = PAGE_SIZE):
        self.page_size = page_size

    def build(
        self,
        filters: EffectiveFilters,
        page: int = 0,
        is_authenticated: bool = False,
        search_terms: Sequence[str] = ()
    ) -> PostQuery:
        """
        Build the page and count queries.

        Args:
            filters: Resolved filters
            page: Zero-based page index
            is_authenticated: Anonymous callers only see public posts
            search_terms: Keywords matched against title and content (OR)

        Returns:
            PostQuery with SQL and parameters
        """
        where = self._base_where(is_authenticated)

        keyword_applied = False
        terms = [t for t in search_terms if t and t.strip()]
        if terms and not self.skip_keywords(filters, terms):
            keyword_conditions = []
            for term in terms:
                placeholder = where.param(f"%{escape_like(term.strip())}%")
                keyword_conditions.append(f"p.title ILIKE {placeholder}")
                keyword_conditions.append(f"p.content ILIKE {placeholder}")
            where.add("(" + " OR ".join(keyword_conditions) + ")")
            keyword_applied = True

        self._apply_filters(where, filters)

        where_sql = where.sql()
        order_by = ORDER_BY.get(filters.sort_by, ORDER_BY[SortMode.RECENT])

        count_sql = f"SELECT COUNT(*) FROM posts p WHERE {where_sql}"
        count_params = list(where.params)

        limit = where.param(self.page_size)
        offset = where.param(page * self.page_size)
        sql = (
            f"SELECT {POST_COLUMNS} {POST_SOURCE} "
            f"WHERE {where_sql} "
            f"ORDER BY {order_by} "
            f"LIMIT {limit} OFFSET {offset}"
        )

        return PostQuery(
            sql=sql,
            params=list(where.params),
            count_sql=count_sql,
            count_params=count_params,
            page=page,
            page_size=self.page_size,
            keyword_filter_applied=keyword_applied,
            conditions=list(where.conditions),
        )

    def build_single(self, post_id: str, is_authenticated: bool = False) -> PostQuery:
        """Build the read for one approved post by id."""
        where = self._base_where(is_authenticated)
        where.add(f"p.id::text = {where.param(post_id)}")
        where_sql = where.sql()
        return PostQuery(
            sql=f"SELECT {POST_COLUMNS} {POST_SOURCE} WHERE {where_sql}",
            params=list(where.params),
            count_sql=f"SELECT COUNT(*) FROM posts p WHERE {where_sql}",
            count_params=list(where.params),
            page=0,
            page_size=1,
            conditions=list(where.conditions),
        )

    @staticmethod
    def skip_keywords(filters: EffectiveFilters, search_terms: Sequence[str]) -> bool:
        """A bank filter plus filler-only terms ("infos", "prep") needs no keyword match."""
        return bool(filters.banks) and all(is_filler_term(t) for t in search_terms)

    def _base_where(self, is_authenticated: bool) -> _Where:
        where = _Where()
        where.add(f"p.status = {where.param(PostStatus.APPROVED.value)}")
        if not is_authenticated:
            where.add("p.is_public = TRUE")
        return where

    def _apply_filters(self, where: _Where, filters: EffectiveFilters) -> None:
        if filters.category:
            where.add(f"p.category = {where.param(filters.category.value)}")
        if filters.type:
            where.add(f"p.type = {where.param(filters.type.value)}")
        if filters.banks:
            where.add(f"p.bank_id::text = ANY({where.param(list(filters.banks))}::text[])")
        if filters.tags:
            where.add(f"p.tags && {where.param(list(filters.tags))}::text[]")
        if filters.cities:
            cities = [city_slug(city) for city in filters.cities]
            where.add(f"lower(p.city) = ANY({where.param(cities)}::text[])")
        if filters.date_from:
            where.add(f"p.created_at >= {where.param(_parse_date(filters.date_from))}::date")
        if filters.date_to:
            # date_to is inclusive of the whole day
            day_after = _parse_date(filters.date_to) + timedelta(days=1)
            where.add(f"p.created_at < {where.param(day_after)}::date")


def _parse_date(value: str) -> date:
    return date.fromisoformat(value.strip()[:10])
