"""
Bank name resolver - maps free text bank names to canonical bank ids.
"""

import logging
from typing import List, Optional, Sequence

from bridgeyou.models import Bank
from .directory_cache import DirectoryCache, DirectoryLoader, InMemoryDirectoryCache
from .vocabulary import BANK_ALIASES, normalize

logger = logging.getLogger(__name__)


def apply_alias(name: str) -> str:
    """Replace a known short form (SocGen, GS, JPM...) by its canonical name."""
    return BANK_ALIASES.get(normalize(name), name)


def match_bank(name: str, banks: Sequence[Bank]) -> Optional[Bank]:
    """
    Find the directory entry for a free text bank name.

    Exact case-insensitive match first, then substring match in either
    direction. Directory order decides between several substring hits.

    Args:
        name: Bank name as written by the user or the analyzer
        banks: Directory entries, ordered by name

    Returns:
        Matching bank, or None
    """
    candidate = normalize(apply_alias(name))
    if not candidate:
        return None

    for bank in banks:
        if normalize(bank.name) == candidate:
            return bank

    for bank in banks:
        directory_name = normalize(bank.name)
        if candidate in directory_name or directory_name in candidate:
            return bank

    return None


class BankResolver:
    """Resolve bank names against the cached bank directory"""

    def __init__(self, loader: DirectoryLoader, cache: Optional[DirectoryCache] = None):
        self.loader = loader
        self.cache = cache or InMemoryDirectoryCache()

    async def get_directory(self) -> List[Bank]:
        return await self.cache.get_or_populate(self.loader)

    async def resolve(self, names: Sequence[str]) -> List[str]:
        """
        Resolve names to bank ids. Unmatched names are logged and dropped.

        Args:
            names: Free text bank names

        Returns:
            Canonical bank ids, without duplicates, in input order
        """
        if not names:
            return []

        banks = await self.get_directory()
        bank_ids: List[str] = []

        for name in names:
            bank = match_bank(name, banks)
            if bank is None:
                logger.warning(f"No bank found matching '{name}'")
                continue
            if bank.id not in bank_ids:
                bank_ids.append(bank.id)

        logger.info(f"Resolved banks {list(names)} -> {bank_ids}")
        return bank_ids
