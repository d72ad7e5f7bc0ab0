"""
Up/down votes on posts and comments.

A user holds at most one vote per target. Voting the same way twice
withdraws the vote, voting the other way switches it. The target's
upvotes/downvotes tallies are recounted in the same transaction.
"""

import logging
from typing import Optional

from bridgeyou.error_handling import NotFoundError
from bridgeyou.models import VoteResult

logger = logging.getLogger(__name__)

# target -> (table, votes column, resource name)
VOTE_TARGETS = {
    "post": ("posts", "post_id", "Post"),
    "comment": ("comments", "comment_id", "Comment"),
}


def next_vote(current: Optional[int], requested: int) -> Optional[int]:
    """Vote held after `requested` is cast on top of `current` (None = no vote)."""
    if current == requested:
        return None
    return requested


async def cast_vote(conn, target: str, target_id: str, user_id: str, vote_type: int) -> VoteResult:
    """
    Toggle a user's vote on a post or comment.

    Args:
        conn: asyncpg connection (a transaction is opened on it)
        target: "post" or "comment"
        target_id: Id of the voted post or comment
        user_id: Voting user
        vote_type: 1 or -1

    Raises:
        NotFoundError: if the target does not exist
    """
    table, column, resource = VOTE_TARGETS[target]

    async with conn.transaction():
        found = await conn.fetchrow(
            f"SELECT id FROM {table} WHERE id::text = $1", target_id
        )
        if found is None:
            raise NotFoundError(resource, target_id)

        existing = await conn.fetchrow(f"""
            SELECT id, vote_type FROM votes
            WHERE {column} = $1 AND user_id::text = $2
            FOR UPDATE
        """, found['id'], user_id)

        current = existing['vote_type'] if existing else None
        new_vote = next_vote(current, vote_type)

        if existing is None:
            await conn.execute(
                f"INSERT INTO votes ({column}, user_id, vote_type) VALUES ($1, $2::uuid, $3)",
                found['id'], user_id, new_vote
            )
        elif new_vote is None:
            await conn.execute("DELETE FROM votes WHERE id = $1", existing['id'])
        else:
            await conn.execute(
                "UPDATE votes SET vote_type = $2 WHERE id = $1", existing['id'], new_vote
            )

        tallies = await conn.fetchrow(f"""
            UPDATE {table} t SET
                upvotes = (SELECT COUNT(*) FROM votes v WHERE v.{column} = t.id AND v.vote_type = 1),
                downvotes = (SELECT COUNT(*) FROM votes v WHERE v.{column} = t.id AND v.vote_type = -1)
            WHERE t.id = $1
            RETURNING t.upvotes, t.downvotes
        """, found['id'])

    logger.info(f"Vote on {target} {target_id} by {user_id}: {current} -> {new_vote}")
    return VoteResult(
        vote_type=new_vote,
        upvotes=tallies['upvotes'],
        downvotes=tallies['downvotes']
    )
