"""
Posts - search pages, the main feed, single posts, tag statistics,
submissions and votes.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from bridgeyou.error_handling import NotFoundError
from bridgeyou.models import EffectiveFilters, PostCategory, PostCreate, PostStatus, VoteResult
from bridgeyou.services.search.query_builder import PostQuery, PostQueryBuilder, escape_like
from bridgeyou.services.search.result_processor import process_row, process_rows
from bridgeyou.services.search.vocabulary import city_slug
from .base import Repository
from .votes import cast_vote

logger = logging.getLogger(__name__)

DEFAULT_CITY = "paris"


class PostRepository(Repository):
    """Posts table access; reads only ever return approved posts"""

    def __init__(self, pool=None, builder: Optional[PostQueryBuilder] = None):
        super().__init__(pool)
        self.builder = builder or PostQueryBuilder()

    async def run_page(self, query: PostQuery, operation: str = "search_posts") -> Tuple[List[Dict[str, Any]], int]:
        """
        Execute a page query and its count on one connection.

        Returns:
            (processed rows, exact total count)

        Raises:
            DatabaseQueryError: if either query fails
        """
        async with self.connection(operation) as conn:
            rows = await conn.fetch(query.sql, *query.params)
            count = await conn.fetchval(query.count_sql, *query.count_params)

        return process_rows(rows), int(count or 0)

    async def search(
        self,
        filters: EffectiveFilters,
        page: int = 0,
        is_authenticated: bool = False,
        search_terms: Sequence[str] = ()
    ) -> Tuple[List[Dict[str, Any]], int]:
        query = self.builder.build(
            filters,
            page=page,
            is_authenticated=is_authenticated,
            search_terms=search_terms
        )
        logger.debug(f"Search query conditions: {query.conditions}")
        return await self.run_page(query)

    async def fetch_posts(
        self,
        page: int = 0,
        category: Optional[PostCategory] = None,
        filters: Optional[EffectiveFilters] = None,
        is_authenticated: bool = False
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Feed page: same filters, visibility and sort as search, without keywords."""
        filters = filters or EffectiveFilters()
        if category is not None:
            filters = filters.model_copy(update={"category": category})

        query = self.builder.build(filters, page=page, is_authenticated=is_authenticated)
        return await self.run_page(query, operation="fetch_posts")

    async def fetch_post(self, post_id: str, is_authenticated: bool = False) -> Dict[str, Any]:
        """
        Fetch a single approved post.

        Raises:
            NotFoundError: if the post is missing, unapproved or not visible
            DatabaseQueryError: if the store cannot be read
        """
        query = self.builder.build_single(post_id, is_authenticated=is_authenticated)
        async with self.connection("fetch_post") as conn:
            row = await conn.fetchrow(query.sql, *query.params)

        if row is None:
            raise NotFoundError("Post", post_id)
        return process_row(row)

    async def find_title_matches(self, text: str, limit: int = 5) -> List[str]:
        async with self.connection("find_title_matches") as conn:
            rows = await conn.fetch("""
                SELECT title FROM posts
                WHERE status = $1 AND title ILIKE $2
                ORDER BY created_at DESC
                LIMIT $3
            """, PostStatus.APPROVED.value, f"%{escape_like(text)}%", limit)
        return [row['title'] for row in rows]

    async def find_tag_matches(self, text: str, limit: int = 5) -> List[List[str]]:
        async with self.connection("find_tag_matches") as conn:
            rows = await conn.fetch("""
                SELECT tags FROM posts
                WHERE status = $1
                  AND EXISTS (SELECT 1 FROM unnest(tags) AS tag WHERE tag ILIKE $2)
                ORDER BY created_at DESC
                LIMIT $3
            """, PostStatus.APPROVED.value, f"%{escape_like(text)}%", limit)
        return [list(row['tags'] or []) for row in rows]

    async def popular_tags(self, limit: int = 20) -> List[str]:
        """Tags of approved posts, most used first."""
        async with self.connection("popular_tags") as conn:
            rows = await conn.fetch("""
                SELECT tag, COUNT(*) AS uses
                FROM posts, unnest(tags) AS tag
                WHERE status = $1
                GROUP BY tag
                ORDER BY uses DESC, tag
                LIMIT $2
            """, PostStatus.APPROVED.value, limit)
        return [row['tag'] for row in rows]

    async def create_post(self, user_id: str, post: PostCreate) -> Dict[str, Any]:
        """
        Insert a post submitted by a user. New posts wait for moderation.

        Tags are trimmed, lower-cased and de-duplicated; the city is stored as
        its slug (Paris when none is given).
        """
        tags = list(dict.fromkeys(t.strip().lower() for t in post.tags if t.strip()))
        city = city_slug(post.city) if post.city and post.city.strip() else DEFAULT_CITY

        async with self.connection("create_post") as conn:
            row = await conn.fetchrow("""
                INSERT INTO posts (user_id, bank_id, title, content, category, type,
                                   tags, city, is_public, status)
                VALUES ($1::uuid, $2::uuid, $3, $4, $5, $6, $7::text[], $8, $9, $10)
                RETURNING *
            """, user_id, post.bank_id, post.title, post.content, post.category.value,
                post.type.value, tags, city, post.is_public, PostStatus.PENDING.value)

        logger.info(f"Post {row['id']} submitted by {user_id}")
        return process_row(row)

    async def vote_post(self, post_id: str, vote_type: int, user_id: str) -> VoteResult:
        async with self.connection("vote_post") as conn:
            return await cast_vote(conn, "post", post_id, user_id, vote_type)
