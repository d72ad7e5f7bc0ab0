"""
Bank directory access.
"""

import logging
from typing import List, Optional

from bridgeyou.error_handling import DatabaseQueryError
from bridgeyou.models import Bank
from .base import Repository

logger = logging.getLogger(__name__)


def bank_from_row(row) -> Bank:
    return Bank(
        id=str(row['id']),
        name=row['name'],
        logo_url=row['logo_url'],
        created_at=row['created_at'],
        updated_at=row['updated_at']
    )


class BankRepository(Repository):
    """Read access to the banks table"""

    async def fetch_banks(self) -> List[Bank]:
        """
        Fetch every bank ordered by name.

        Raises:
            DatabaseQueryError: if the store cannot be read
        """
        async with self.connection("fetch_banks") as conn:
            rows = await conn.fetch("""
                SELECT id, name, logo_url, created_at, updated_at
                FROM banks
                ORDER BY name
            """)

        logger.debug(f"Fetched {len(rows)} banks")
        return [bank_from_row(row) for row in rows]

    async def get_bank_by_id(self, bank_id: str) -> Optional[Bank]:
        """Fetch one bank, or None when it is missing or unreadable."""
        try:
            async with self.connection("get_bank_by_id") as conn:
                row = await conn.fetchrow("""
                    SELECT id, name, logo_url, created_at, updated_at
                    FROM banks
                    WHERE id::text = $1
                """, bank_id)
        except DatabaseQueryError as e:
            logger.error(f"Error fetching bank {bank_id}: {e}")
            return None

        return bank_from_row(row) if row else None
