"""
Service wiring and request dependencies shared by the routers.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from bridgeyou.config import AppSettings
from bridgeyou.db import get_redis
from bridgeyou.error_handling import error_handler
from bridgeyou.services.forum import (
    BankRepository,
    CommentRepository,
    CorrectionRepository,
    NotificationRepository,
    PostRepository,
    TagGenerator,
    UserRepository,
)
from bridgeyou.services.llm import CompletionClient
from bridgeyou.services.search import (
    BankResolver,
    DirectoryCache,
    InMemoryDirectoryCache,
    PostQueryBuilder,
    RedisDirectoryCache,
)
from bridgeyou.services.search.query_analyzer import QueryAnalyzer
from bridgeyou.services.search.search_service import SearchService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Per-application service instances"""
    settings: AppSettings
    search: SearchService
    posts: PostRepository
    banks: BankRepository
    comments: CommentRepository
    corrections: CorrectionRepository
    notifications: NotificationRepository
    tagger: TagGenerator
    users: UserRepository


def build_directory_cache(settings: AppSettings) -> DirectoryCache:
    if settings.cache.backend == "redis":
        logger.info("Caching bank directory in redis")
        return RedisDirectoryCache(
            get_redis(),
            key=settings.cache.key,
            ttl_seconds=settings.cache.ttl_seconds
        )
    return InMemoryDirectoryCache()


def build_services(settings: AppSettings, pool=None) -> Services:
    """
    Build every service from settings.

    Repositories use the global pool unless one is given. A missing API key
    leaves the analyzer and the tagger on their fallbacks.
    """
    client = CompletionClient.from_config(settings.completion)
    builder = PostQueryBuilder(page_size=settings.search.page_size)

    posts = PostRepository(pool, builder=builder)
    banks = BankRepository(pool)

    resolver = BankResolver(banks.fetch_banks, cache=build_directory_cache(settings))
    analyzer = QueryAnalyzer(client, temperature=settings.completion.analyzer_temperature)

    return Services(
        settings=settings,
        search=SearchService(posts, analyzer, resolver, page_size=settings.search.page_size),
        posts=posts,
        banks=banks,
        comments=CommentRepository(pool),
        corrections=CorrectionRepository(pool),
        notifications=NotificationRepository(pool),
        tagger=TagGenerator(client, temperature=settings.completion.tagger_temperature),
        users=UserRepository(pool),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Id of the signed-in user, forwarded by the auth layer."""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return None


def require_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    user_id = get_user_id(x_user_id)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return user_id


async def require_moderator(
    user_id: str = Depends(require_user_id),
    services: Services = Depends(get_services)
) -> str:
    """Id of the signed-in user, who must be a moderator or an admin."""
    try:
        allowed = await services.users.is_moderator(user_id)
    except Exception as e:
        raise error_handler.to_http_exception("require_moderator", e, {"user_id": user_id})

    if not allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Moderator role required")
    return user_id
