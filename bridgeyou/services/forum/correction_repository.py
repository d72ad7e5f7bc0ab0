"""
Crowd-sourced corrections attached to posts.
"""

import logging
from typing import List, Optional

from bridgeyou.error_handling import NotFoundError
from bridgeyou.models import Correction, CorrectionStatus, CorrectionStatusUpdate
from .base import Repository

logger = logging.getLogger(__name__)

CORRECTION_COLUMNS = """
    id, post_id, user_id, moderator_id, content, status, is_selected,
    tokens_awarded, moderator_note, created_at, updated_at
"""

JOINED_COLUMNS = """
    c.id, c.post_id, p.title AS post_title, c.user_id, c.moderator_id, c.content,
    c.status, c.is_selected, c.tokens_awarded, c.moderator_note, c.created_at, c.updated_at
"""


def correction_from_row(row) -> Correction:
    return Correction(
        id=str(row['id']),
        post_id=str(row['post_id']),
        post_title=row.get('post_title'),
        user_id=str(row['user_id']) if row['user_id'] else None,
        moderator_id=str(row['moderator_id']) if row['moderator_id'] else None,
        content=row['content'],
        status=row['status'],
        is_selected=row['is_selected'],
        tokens_awarded=row['tokens_awarded'],
        moderator_note=row['moderator_note'],
        created_at=row['created_at'],
        updated_at=row['updated_at']
    )


class CorrectionRepository(Repository):
    """Corrections table access"""

    async def create_correction(self, post_id: str, user_id: str, content: str) -> Correction:
        """Submit a correction; it starts pending moderation."""
        async with self.connection("create_correction") as conn:
            row = await conn.fetchrow(f"""
                INSERT INTO corrections (post_id, user_id, content, status)
                VALUES ($1::uuid, $2::uuid, $3, $4)
                RETURNING {CORRECTION_COLUMNS}
            """, post_id, user_id, content, CorrectionStatus.PENDING.value)

        logger.info(f"Correction {row['id']} submitted on post {post_id}")
        return correction_from_row(row)

    async def get_corrections_by_post(self, post_id: str) -> List[Correction]:
        """Approved corrections of a post, oldest first."""
        async with self.connection("get_corrections_by_post") as conn:
            rows = await conn.fetch(f"""
                SELECT {CORRECTION_COLUMNS}
                FROM corrections
                WHERE post_id::text = $1 AND status = $2
                ORDER BY created_at ASC
            """, post_id, CorrectionStatus.APPROVED.value)
        return [correction_from_row(row) for row in rows]

    async def get_selected_correction(self, post_id: str) -> Optional[Correction]:
        async with self.connection("get_selected_correction") as conn:
            row = await conn.fetchrow(f"""
                SELECT {CORRECTION_COLUMNS}
                FROM corrections
                WHERE post_id::text = $1 AND status = $2 AND is_selected = TRUE
                ORDER BY created_at ASC
                LIMIT 1
            """, post_id, CorrectionStatus.APPROVED.value)
        return correction_from_row(row) if row else None

    async def get_pending_corrections(self) -> List[Correction]:
        """Moderation queue, oldest first, with the corrected post's title."""
        async with self.connection("get_pending_corrections") as conn:
            rows = await conn.fetch(f"""
                SELECT {JOINED_COLUMNS}
                FROM corrections c
                LEFT JOIN posts p ON p.id = c.post_id
                WHERE c.status = $1
                ORDER BY c.created_at ASC
            """, CorrectionStatus.PENDING.value)
        return [correction_from_row(row) for row in rows]

    async def get_user_corrections(self, user_id: str) -> List[Correction]:
        """Every correction a user submitted, newest first."""
        async with self.connection("get_user_corrections") as conn:
            rows = await conn.fetch(f"""
                SELECT {JOINED_COLUMNS}
                FROM corrections c
                LEFT JOIN posts p ON p.id = c.post_id
                WHERE c.user_id::text = $1
                ORDER BY c.created_at DESC
            """, user_id)
        return [correction_from_row(row) for row in rows]

    async def update_correction_status(
        self,
        correction_id: str,
        update: CorrectionStatusUpdate,
        moderator_id: str
    ) -> Correction:
        """
        Record a moderator's decision on a correction.

        Selecting an approved correction unselects the other corrections of
        the same post, so a post has at most one selected correction.

        Raises:
            NotFoundError: if the correction does not exist
        """
        is_selected = update.is_selected and update.status == CorrectionStatus.APPROVED

        async with self.connection("update_correction_status") as conn:
            async with conn.transaction():
                row = await conn.fetchrow(f"""
                    UPDATE corrections
                    SET status = $2, moderator_note = $3, tokens_awarded = $4,
                        is_selected = $5, moderator_id = $6::uuid, updated_at = NOW()
                    WHERE id::text = $1
                    RETURNING {CORRECTION_COLUMNS}
                """, correction_id, update.status.value, update.moderator_note,
                    update.tokens_awarded, is_selected, moderator_id)

                if row is None:
                    raise NotFoundError("Correction", correction_id)

                if is_selected:
                    await conn.execute("""
                        UPDATE corrections SET is_selected = FALSE, updated_at = NOW()
                        WHERE post_id = $1 AND id <> $2 AND is_selected = TRUE
                    """, row['post_id'], row['id'])

        logger.info(
            f"Correction {correction_id} {update.status.value} by moderator {moderator_id}"
            f"{' and selected' if is_selected else ''}"
        )
        return correction_from_row(row)

    async def delete_pending_correction(self, correction_id: str, user_id: str) -> bool:
        """Withdraw one of the user's own corrections while it is still pending."""
        async with self.connection("delete_pending_correction") as conn:
            result = await conn.execute("""
                DELETE FROM corrections
                WHERE id::text = $1 AND user_id::text = $2 AND status = $3
            """, correction_id, user_id, CorrectionStatus.PENDING.value)
        return result.endswith(" 1")
