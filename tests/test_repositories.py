"""Tests for the asyncpg repositories, over a mocked pool."""

import json
from datetime import datetime
from uuid import UUID

import asyncpg
import pytest
from unittest.mock import AsyncMock, MagicMock

from bridgeyou.error_handling import DatabaseQueryError, NotFoundError
from bridgeyou.models import EffectiveFilters, PostCategory
from bridgeyou.services.forum import (
    BankRepository,
    CorrectionRepository,
    NotificationRepository,
    PostRepository,
)


NOW = datetime(2024, 5, 1, 12, 0)
BANK_UUID = UUID("11111111-2222-3333-4444-555555555555")


def make_pool():
    conn = AsyncMock()
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    return pool, conn


def bank_row(name="Goldman Sachs"):
    return {"id": BANK_UUID, "name": name, "logo_url": None, "created_at": NOW, "updated_at": NOW}


def correction_row(**overrides):
    row = {
        "id": UUID("aaaaaaaa-0000-0000-0000-000000000001"),
        "post_id": UUID("bbbbbbbb-0000-0000-0000-000000000001"),
        "user_id": UUID("cccccccc-0000-0000-0000-000000000001"),
        "moderator_id": None,
        "content": "La bonne réponse est 42",
        "status": "approved",
        "is_selected": True,
        "tokens_awarded": 5,
        "moderator_note": None,
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


@pytest.mark.asyncio
async def test_fetch_banks_orders_by_name():
    pool, conn = make_pool()
    conn.fetch.return_value = [bank_row("BNP Paribas"), bank_row("Goldman Sachs")]

    banks = await BankRepository(pool).fetch_banks()

    assert [b.name for b in banks] == ["BNP Paribas", "Goldman Sachs"]
    assert banks[0].id == str(BANK_UUID)
    assert "ORDER BY name" in conn.fetch.await_args.args[0]


@pytest.mark.asyncio
async def test_fetch_banks_raises_on_database_error():
    pool, conn = make_pool()
    conn.fetch.side_effect = asyncpg.InterfaceError("pool is closed")

    with pytest.raises(DatabaseQueryError) as exc_info:
        await BankRepository(pool).fetch_banks()

    assert exc_info.value.operation == "fetch_banks"


@pytest.mark.asyncio
async def test_get_bank_by_id_returns_none_when_missing_or_failing():
    pool, conn = make_pool()
    conn.fetchrow.return_value = None
    assert await BankRepository(pool).get_bank_by_id("nope") is None

    conn.fetchrow.side_effect = asyncpg.InterfaceError("pool is closed")
    assert await BankRepository(pool).get_bank_by_id("nope") is None


@pytest.mark.asyncio
async def test_fetch_post_not_found():
    pool, conn = make_pool()
    conn.fetchrow.return_value = None

    with pytest.raises(NotFoundError):
        await PostRepository(pool).fetch_post("missing")


@pytest.mark.asyncio
async def test_fetch_post_carries_corrected_flag():
    pool, conn = make_pool()
    conn.fetchrow.return_value = {
        "id": "p1",
        "created_at": NOW,
        "bank": None,
        "corrections": json.dumps([{"id": "c1", "status": "approved"}]),
    }

    post = await PostRepository(pool).fetch_post("p1", is_authenticated=True)

    assert post["corrected"] is True
    assert post["created_at"] == NOW.isoformat()
    sql, *params = conn.fetchrow.await_args.args
    assert params == ["approved", "p1"]
    assert "p.is_public = TRUE" not in sql


@pytest.mark.asyncio
async def test_fetch_posts_applies_category_without_keywords():
    pool, conn = make_pool()
    conn.fetch.return_value = []
    conn.fetchval.return_value = 0

    data, count = await PostRepository(pool).fetch_posts(
        page=1,
        category=PostCategory.STAGE_SUMMER_GRADUATE,
        filters=EffectiveFilters(tags=["stage"])
    )

    assert (data, count) == ([], 0)
    sql, *params = conn.fetch.await_args.args
    assert "ILIKE" not in sql
    assert "stage_summer_graduate" in params
    assert params[-2:] == [10, 10]


@pytest.mark.asyncio
async def test_popular_tags():
    pool, conn = make_pool()
    conn.fetch.return_value = [{"tag": "stage", "uses": 12}, {"tag": "goldman-sachs", "uses": 7}]

    assert await PostRepository(pool).popular_tags(limit=2) == ["stage", "goldman-sachs"]


@pytest.mark.asyncio
async def test_corrections_by_post():
    pool, conn = make_pool()
    conn.fetch.return_value = [correction_row()]

    corrections = await CorrectionRepository(pool).get_corrections_by_post("post-1")

    assert corrections[0].is_selected is True
    assert corrections[0].post_id == "bbbbbbbb-0000-0000-0000-000000000001"
    sql, *params = conn.fetch.await_args.args
    assert params == ["post-1", "approved"]
    assert "ORDER BY created_at ASC" in sql


@pytest.mark.asyncio
async def test_selected_correction_missing():
    pool, conn = make_pool()
    conn.fetchrow.return_value = None

    assert await CorrectionRepository(pool).get_selected_correction("post-1") is None


@pytest.mark.asyncio
async def test_create_correction_starts_pending():
    pool, conn = make_pool()
    conn.fetchrow.return_value = correction_row(status="pending", is_selected=False)

    correction = await CorrectionRepository(pool).create_correction("post-1", "user-1", "Réponse")

    assert correction.status.value == "pending"
    assert conn.fetchrow.await_args.args[1:] == ("post-1", "user-1", "Réponse", "pending")


@pytest.mark.asyncio
async def test_notifications_for_user():
    pool, conn = make_pool()
    conn.fetch.return_value = [{
        "id": UUID("dddddddd-0000-0000-0000-000000000001"),
        "user_id": UUID("cccccccc-0000-0000-0000-000000000001"),
        "type": "post_approved",
        "title": "Post approuvé",
        "content": None,
        "post_id": None,
        "post_title": None,
        "comment_id": None,
        "is_read": False,
        "created_at": NOW,
    }]

    notifications = await NotificationRepository(pool).get_user_notifications("user-1", limit=5)

    assert notifications[0].title == "Post approuvé"
    sql, *params = conn.fetch.await_args.args
    assert params == ["user-1", 5]
    assert "ORDER BY n.created_at DESC" in sql


@pytest.mark.asyncio
async def test_notification_updates_report_affected_rows():
    pool, conn = make_pool()
    repository = NotificationRepository(pool)

    conn.execute.return_value = "UPDATE 1"
    assert await repository.mark_as_read("n1", "user-1") is True

    conn.execute.return_value = "UPDATE 0"
    assert await repository.mark_as_read("n1", "someone-else") is False

    conn.execute.return_value = "UPDATE 4"
    assert await repository.mark_all_as_read("user-1") == 4

    conn.execute.return_value = "DELETE 1"
    assert await repository.delete("n1", "user-1") is True


@pytest.mark.asyncio
async def test_unread_count():
    pool, conn = make_pool()
    conn.fetchval.return_value = 3

    assert await NotificationRepository(pool).get_unread_count("user-1") == 3
