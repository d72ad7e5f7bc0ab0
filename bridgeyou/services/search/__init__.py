"""Search pipeline: normalize, analyze, resolve banks, merge filters, build and process"""

from .bank_resolver import BankResolver, match_bank
from .directory_cache import DirectoryCache, InMemoryDirectoryCache, RedisDirectoryCache
from .filter_merger import merge_filters
from .query_builder import PostQuery, PostQueryBuilder, next_page
from .query_normalizer import normalize_query, split_keywords
from .result_processor import process_rows

__all__ = [
    "BankResolver",
    "match_bank",
    "DirectoryCache",
    "InMemoryDirectoryCache",
    "RedisDirectoryCache",
    "merge_filters",
    "PostQuery",
    "PostQueryBuilder",
    "next_page",
    "normalize_query",
    "split_keywords",
    "process_rows",
]
