"""
Per-user notifications.
"""

import logging
from typing import List

from bridgeyou.models import Notification
from .base import Repository

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20


def notification_from_row(row) -> Notification:
    return Notification(
        id=str(row['id']),
        user_id=str(row['user_id']),
        type=row['type'],
        title=row['title'],
        content=row['content'],
        post_id=str(row['post_id']) if row['post_id'] else None,
        post_title=row['post_title'],
        comment_id=str(row['comment_id']) if row['comment_id'] else None,
        is_read=row['is_read'],
        created_at=row['created_at']
    )


class NotificationRepository(Repository):
    """Notifications table access, always scoped to one user"""

    async def get_user_notifications(self, user_id: str, limit: int = DEFAULT_LIMIT) -> List[Notification]:
        """Newest notifications first, with the title of the related post."""
        async with self.connection("get_user_notifications") as conn:
            rows = await conn.fetch("""
                SELECT n.id, n.user_id, n.type, n.title, n.content, n.post_id,
                       p.title AS post_title, n.comment_id, n.is_read, n.created_at
                FROM notifications n
                LEFT JOIN posts p ON p.id = n.post_id
                WHERE n.user_id::text = $1
                ORDER BY n.created_at DESC
                LIMIT $2
            """, user_id, limit)
        return [notification_from_row(row) for row in rows]

    async def get_unread_count(self, user_id: str) -> int:
        async with self.connection("get_unread_count") as conn:
            count = await conn.fetchval("""
                SELECT COUNT(*) FROM notifications
                WHERE user_id::text = $1 AND is_read = FALSE
            """, user_id)
        return int(count or 0)

    async def mark_as_read(self, notification_id: str, user_id: str) -> bool:
        """Mark one notification read. Returns False when nothing matched."""
        async with self.connection("mark_as_read") as conn:
            result = await conn.execute("""
                UPDATE notifications SET is_read = TRUE
                WHERE id::text = $1 AND user_id::text = $2
            """, notification_id, user_id)
        return _affected_rows(result) > 0

    async def mark_all_as_read(self, user_id: str) -> int:
        async with self.connection("mark_all_as_read") as conn:
            result = await conn.execute("""
                UPDATE notifications SET is_read = TRUE
                WHERE user_id::text = $1 AND is_read = FALSE
            """, user_id)
        updated = _affected_rows(result)
        logger.info(f"Marked {updated} notifications read for user {user_id}")
        return updated

    async def delete(self, notification_id: str, user_id: str) -> bool:
        async with self.connection("delete_notification") as conn:
            result = await conn.execute("""
                DELETE FROM notifications
                WHERE id::text = $1 AND user_id::text = $2
            """, notification_id, user_id)
        return _affected_rows(result) > 0


def _affected_rows(status: str) -> int:
    # asyncpg returns the command tag, e.g. "UPDATE 3"
    try:
        return int(str(status).rsplit(" ", 1)[-1])
    except ValueError:
        return 0
