"""
Threaded comments on posts: a page of top-level comments, each with its replies.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from bridgeyou.error_handling import DatabaseQueryError, NotFoundError
from bridgeyou.models import Comment, VoteResult
from .base import Repository
from .votes import cast_vote

logger = logging.getLogger(__name__)

COMMENTS_PAGE_SIZE = 20

COMMENT_COLUMNS = """
    id, post_id, user_id, parent_id, content, upvotes, downvotes, created_at, updated_at
"""


def comment_from_row(row) -> Comment:
    return Comment(
        id=str(row['id']),
        post_id=str(row['post_id']),
        user_id=str(row['user_id']) if row['user_id'] else None,
        parent_id=str(row['parent_id']) if row['parent_id'] else None,
        content=row['content'],
        upvotes=row['upvotes'],
        downvotes=row['downvotes'],
        created_at=row['created_at'],
        updated_at=row['updated_at']
    )


class CommentRepository(Repository):
    """Comments table access"""

    def __init__(self, pool=None, page_size: int = COMMENTS_PAGE_SIZE):
        super().__init__(pool)
        self.page_size = page_size

    async def fetch_comments(self, post_id: str, page: int = 0) -> Tuple[List[Comment], int]:
        """
        Fetch a page of top-level comments, newest first.

        Replies are attached oldest first. A failure while loading replies is
        logged and leaves the comments without replies.

        Returns:
            (comments, exact count of top-level comments)
        """
        async with self.connection("fetch_comments") as conn:
            rows = await conn.fetch(f"""
                SELECT {COMMENT_COLUMNS}
                FROM comments
                WHERE post_id::text = $1 AND parent_id IS NULL
                ORDER BY created_at DESC, id
                LIMIT $2 OFFSET $3
            """, post_id, self.page_size, page * self.page_size)
            count = await conn.fetchval("""
                SELECT COUNT(*) FROM comments
                WHERE post_id::text = $1 AND parent_id IS NULL
            """, post_id)

        comments = [comment_from_row(row) for row in rows]
        if comments:
            try:
                replies = await self._fetch_replies([c.id for c in comments])
            except DatabaseQueryError as e:
                logger.error(f"Error fetching replies for post {post_id}: {e}")
            else:
                for comment in comments:
                    comment.replies = replies.get(comment.id, [])

        return comments, int(count or 0)

    async def _fetch_replies(self, parent_ids: Sequence[str]) -> Dict[str, List[Comment]]:
        async with self.connection("fetch_replies") as conn:
            rows = await conn.fetch(f"""
                SELECT {COMMENT_COLUMNS}
                FROM comments
                WHERE parent_id::text = ANY($1::text[])
                ORDER BY created_at ASC, id
            """, list(parent_ids))

        by_parent: Dict[str, List[Comment]] = defaultdict(list)
        for row in rows:
            reply = comment_from_row(row)
            by_parent[reply.parent_id].append(reply)
        return by_parent

    async def create_comment(
        self,
        post_id: str,
        user_id: str,
        content: str,
        parent_id: Optional[str] = None
    ) -> Comment:
        """
        Add a comment, or a reply when parent_id is given.

        The post's comments_count is kept in step with the insert.

        Raises:
            NotFoundError: if the post, or the parent comment on that post, is missing
        """
        async with self.connection("create_comment") as conn:
            async with conn.transaction():
                post = await conn.fetchrow("SELECT id FROM posts WHERE id::text = $1", post_id)
                if post is None:
                    raise NotFoundError("Post", post_id)

                parent = None
                if parent_id is not None:
                    parent = await conn.fetchrow(
                        "SELECT id FROM comments WHERE id::text = $1 AND post_id = $2",
                        parent_id, post['id']
                    )
                    if parent is None:
                        raise NotFoundError("Comment", parent_id)

                row = await conn.fetchrow(f"""
                    INSERT INTO comments (post_id, user_id, parent_id, content)
                    VALUES ($1, $2::uuid, $3, $4)
                    RETURNING {COMMENT_COLUMNS}
                """, post['id'], user_id, parent['id'] if parent else None, content)

                await conn.execute(
                    "UPDATE posts SET comments_count = comments_count + 1 WHERE id = $1",
                    post['id']
                )

        logger.info(f"Comment {row['id']} added on post {post_id}")
        return comment_from_row(row)

    async def vote_comment(self, comment_id: str, vote_type: int, user_id: str) -> VoteResult:
        async with self.connection("vote_comment") as conn:
            return await cast_vote(conn, "comment", comment_id, user_id, vote_type)
