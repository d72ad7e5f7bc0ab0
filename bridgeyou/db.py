"""
Database connection and initialization.
"""

import asyncpg
import redis.asyncio as redis
from typing import Optional
import logging

from bridgeyou.config import AppSettings

logger = logging.getLogger(__name__)

# Global connection pools
pg_pool: Optional[asyncpg.Pool] = None
redis_client: Optional[redis.Redis] = None


async def init_db(settings: AppSettings):
    """Initialize database connections"""
    global pg_pool, redis_client

    # PostgreSQL
    try:
        pg_pool = await asyncpg.create_pool(
            settings.database.url,
            min_size=settings.database.pool_min_size,
            max_size=settings.database.pool_max_size,
        )
        logger.info("PostgreSQL connection pool created")

        await create_tables()
    except Exception as e:
        logger.error(f"Failed to connect to PostgreSQL: {e}")
        raise

    # Redis is only needed when the bank directory is cached there
    if settings.cache.backend == "redis":
        try:
            redis_client = redis.from_url(settings.cache.redis_url, decode_responses=True)
            await redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise


async def close_db():
    """Close database connections"""
    global pg_pool, redis_client

    if pg_pool:
        await pg_pool.close()
        pg_pool = None
        logger.info("PostgreSQL connection pool closed")

    if redis_client:
        await redis_client.close()
        redis_client = None
        logger.info("Redis connection closed")


async def create_tables():
    """Create database tables if they don't exist"""
    async with pg_pool.acquire() as conn:
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS banks (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                name TEXT NOT NULL UNIQUE,
                logo_url TEXT,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id UUID PRIMARY KEY,
                email TEXT NOT NULL UNIQUE,
                username TEXT,
                first_name TEXT,
                last_name TEXT,
                profile_picture_url TEXT,
                tokens INTEGER NOT NULL DEFAULT 0,
                role TEXT NOT NULL DEFAULT 'user',
                is_banned BOOLEAN NOT NULL DEFAULT FALSE,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS posts (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                user_id UUID REFERENCES users(id),
                bank_id UUID REFERENCES banks(id),
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                category TEXT NOT NULL,
                type TEXT NOT NULL,
                tags TEXT[] NOT NULL DEFAULT '{}',
                city TEXT NOT NULL DEFAULT 'paris',
                is_public BOOLEAN NOT NULL DEFAULT TRUE,
                status TEXT NOT NULL DEFAULT 'pending',
                upvotes INTEGER NOT NULL DEFAULT 0,
                downvotes INTEGER NOT NULL DEFAULT 0,
                comments_count INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)

        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_posts_status_created ON posts(status, created_at DESC);
        """)

        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_posts_bank_id ON posts(bank_id);
        """)

        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_posts_tags ON posts USING GIN(tags);
        """)

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS corrections (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                post_id UUID NOT NULL REFERENCES posts(id) ON DELETE CASCADE,
                user_id UUID REFERENCES users(id),
                moderator_id UUID REFERENCES users(id),
                content TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                is_selected BOOLEAN NOT NULL DEFAULT FALSE,
                tokens_awarded INTEGER NOT NULL DEFAULT 0,
                moderator_note TEXT,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)

        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_corrections_post_id ON corrections(post_id);
        """)

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS comments (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                post_id UUID NOT NULL REFERENCES posts(id) ON DELETE CASCADE,
                user_id UUID REFERENCES users(id),
                parent_id UUID REFERENCES comments(id) ON DELETE CASCADE,
                content TEXT NOT NULL,
                upvotes INTEGER NOT NULL DEFAULT 0,
                downvotes INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)

        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_comments_post_parent ON comments(post_id, parent_id, created_at DESC);
        """)

        # One vote per user and target
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS votes (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                post_id UUID REFERENCES posts(id) ON DELETE CASCADE,
                comment_id UUID REFERENCES comments(id) ON DELETE CASCADE,
                vote_type SMALLINT NOT NULL CHECK (vote_type IN (1, -1)),
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                CHECK ((post_id IS NULL) <> (comment_id IS NULL)),
                UNIQUE (user_id, post_id),
                UNIQUE (user_id, comment_id)
            )
        """)

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS notifications (
                id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                type TEXT NOT NULL,
                title TEXT NOT NULL,
                content TEXT,
                post_id UUID REFERENCES posts(id) ON DELETE SET NULL,
                comment_id UUID,
                is_read BOOLEAN NOT NULL DEFAULT FALSE,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)

        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, created_at DESC);
        """)

        logger.info("Database tables created/verified")


def get_pg_pool() -> asyncpg.Pool:
    """Get PostgreSQL connection pool"""
    if pg_pool is None:
        raise RuntimeError("Database not initialized")
    return pg_pool


def get_redis() -> redis.Redis:
    """Get Redis client"""
    if redis_client is None:
        raise RuntimeError("Redis not initialized")
    return redis_client
