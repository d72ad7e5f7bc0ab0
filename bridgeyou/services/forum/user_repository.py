"""
User lookups needed for authorization.
"""

from typing import Optional

from .base import Repository

MODERATOR_ROLES = ("moderator", "admin")


class UserRepository(Repository):
    """Users table access"""

    async def get_role(self, user_id: str) -> Optional[str]:
        """Role of a user, None when unknown or banned."""
        async with self.connection("get_role") as conn:
            row = await conn.fetchrow("""
                SELECT role, is_banned FROM users WHERE id::text = $1
            """, user_id)
        if row is None or row['is_banned']:
            return None
        return row['role']

    async def is_moderator(self, user_id: str) -> bool:
        return await self.get_role(user_id) in MODERATOR_ROLES
