"""
Tests for the search service, end to end over fake collaborators.

The completion client and the asyncpg pool are mocked; everything in
between (analysis, resolution, merge, SQL building, post-processing) is
the real code.
"""

import json
from datetime import datetime

import asyncpg
import pytest
from unittest.mock import AsyncMock, MagicMock

from bridgeyou.error_handling import DatabaseQueryError
from bridgeyou.models import Bank, PostCategory, SearchFilters, SortMode
from bridgeyou.services.forum import PostRepository
from bridgeyou.services.search import BankResolver, PostQueryBuilder
from bridgeyou.services.search.query_analyzer import QueryAnalyzer
from bridgeyou.services.search.search_service import SearchService


DIRECTORY = [
    Bank(id="bnp-id", name="BNP Paribas"),
    Bank(id="gs-id", name="Goldman Sachs"),
    Bank(id="sg-id", name="Société Générale"),
]


def make_pool(rows=None, count=0):
    """Fake asyncpg pool whose connection returns the given rows and count"""
    conn = AsyncMock()
    conn.fetch.return_value = rows or []
    conn.fetchval.return_value = count
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    return pool, conn


def make_client(payload):
    client = MagicMock()
    client.complete = AsyncMock(return_value=json.dumps(payload))
    return client


def make_service(pool, client=None, loader=None):
    repository = PostRepository(pool, builder=PostQueryBuilder(page_size=10))
    analyzer = QueryAnalyzer(client)
    resolver = BankResolver(loader or AsyncMock(return_value=DIRECTORY))
    return SearchService(repository, analyzer, resolver, page_size=10)


def post_row(post_id, bank_id="gs-id", corrections="[]"):
    return {
        "id": post_id,
        "title": "Mon entretien",
        "content": "...",
        "bank_id": bank_id,
        "created_at": datetime(2024, 5, 1),
        "bank": json.dumps({"id": bank_id, "name": "Goldman Sachs", "logo_url": None}),
        "corrections": corrections,
    }


@pytest.mark.asyncio
async def test_entretiens_goldman_end_to_end():
    """Bank resolves, category defaults to interviews, keyword filter skipped."""
    rows = [
        post_row("p1", corrections=json.dumps([{"id": "c1", "status": "approved"}])),
        post_row("p2"),
    ]
    pool, conn = make_pool(rows=rows, count=2)
    client = make_client({"banks": ["Goldman"], "categories": [], "searchTerms": ["entretiens"]})
    service = make_service(pool, client)

    response = await service.enhanced_search(
        query="entretiens Goldman",
        is_natural_language=True
    )

    sql, *params = conn.fetch.await_args.args
    assert "ILIKE" not in sql
    assert "p.is_public = TRUE" in sql
    assert "ORDER BY p.created_at DESC" in sql
    assert params[0] == "approved"
    assert PostCategory.ENTRETIEN_SALES_TRADING.value in params
    assert ["gs-id"] in params

    assert response.count == 2
    assert response.next_page is None
    assert [post["id"] for post in response.data] == ["p1", "p2"]
    assert response.data[0]["corrected"] is True
    assert response.data[1]["corrected"] is False
    assert response.search_analysis.banks == ["Goldman"]
    client.complete.assert_awaited_once()


@pytest.mark.asyncio
async def test_keyword_mode_skips_analyzer():
    pool, conn = make_pool(count=25)
    client = make_client({})
    service = make_service(pool, client)

    response = await service.enhanced_search(query="stage BNP Paris", page_param=0)

    client.complete.assert_not_awaited()
    sql, *params = conn.fetch.await_args.args
    assert "ILIKE" in sql
    assert "%stage%" in params and "%BNP%" in params
    assert response.next_page == 1
    assert response.search_analysis is None


@pytest.mark.asyncio
async def test_last_page_has_no_next_page():
    pool, _ = make_pool(count=25)
    service = make_service(pool)

    response = await service.enhanced_search(query="stage", page_param=2)

    assert response.next_page is None


@pytest.mark.asyncio
async def test_unconfigured_analyzer_falls_back_to_keywords():
    pool, conn = make_pool(count=0)
    service = make_service(pool, client=None)

    response = await service.enhanced_search(query="prep SocGen", is_natural_language=True)

    assert response.search_analysis.confidence == 0.5
    assert response.search_analysis.search_terms == ["prep", "SocGen"]
    sql, *params = conn.fetch.await_args.args
    assert "%prep%" in params


@pytest.mark.asyncio
async def test_explicit_filters_win_in_natural_language_mode():
    pool, conn = make_pool()
    client = make_client({
        "categories": ["quant_hedge_funds"],
        "searchTerms": ["pricing"],
        "sortBy": "popular",
    })
    service = make_service(pool, client)

    await service.enhanced_search(
        query="pricing questions",
        filters=SearchFilters(category=PostCategory.CONSEILS_ECOLE, sort_by=SortMode.COMMENTS),
        is_natural_language=True,
        is_authenticated=True
    )

    sql, *params = conn.fetch.await_args.args
    assert "conseils_ecole" in params
    assert "quant_hedge_funds" not in params
    assert "ORDER BY p.comments_count DESC" in sql
    assert "p.is_public = TRUE" not in sql


@pytest.mark.asyncio
async def test_bank_name_terms_are_not_keyword_matched():
    pool, conn = make_pool()
    client = make_client({"banks": ["SocGen"], "searchTerms": ["pricing", "SocGen"]})
    service = make_service(pool, client)

    await service.enhanced_search(query="pricing SocGen", is_natural_language=True)

    sql, *params = conn.fetch.await_args.args
    assert "%pricing%" in params
    assert "%SocGen%" not in params
    assert ["sg-id"] in params


@pytest.mark.asyncio
async def test_database_errors_propagate():
    pool, conn = make_pool()
    conn.fetch.side_effect = asyncpg.InterfaceError("connection closed")
    service = make_service(pool)

    with pytest.raises(DatabaseQueryError):
        await service.enhanced_search(query="stage")


@pytest.mark.asyncio
async def test_search_suggestions():
    repository = MagicMock()
    repository.find_title_matches = AsyncMock(return_value=["Stage chez Goldman", "Mon stage d'été"])
    repository.find_tag_matches = AsyncMock(return_value=[["stage", "finance"], ["stage-ete"]])
    service = SearchService(repository, QueryAnalyzer(None), BankResolver(AsyncMock(return_value=[])))

    suggestions = await service.get_search_suggestions("sta")

    assert suggestions == ["stage", "stage-ete"]


@pytest.mark.asyncio
async def test_short_suggestion_query_returns_nothing():
    repository = MagicMock()
    repository.find_title_matches = AsyncMock()
    service = SearchService(repository, QueryAnalyzer(None), BankResolver(AsyncMock(return_value=[])))

    assert await service.get_search_suggestions("s") == []
    repository.find_title_matches.assert_not_awaited()


@pytest.mark.asyncio
async def test_suggestion_and_tag_failures_return_empty():
    repository = MagicMock()
    repository.find_title_matches = AsyncMock(side_effect=DatabaseQueryError("down"))
    repository.popular_tags = AsyncMock(side_effect=DatabaseQueryError("down"))
    service = SearchService(repository, QueryAnalyzer(None), BankResolver(AsyncMock(return_value=[])))

    assert await service.get_search_suggestions("stage") == []
    assert await service.get_popular_tags() == []


def test_is_ai_available():
    resolver = BankResolver(AsyncMock(return_value=[]))
    assert SearchService(MagicMock(), QueryAnalyzer(None), resolver).is_ai_available() is False
    assert SearchService(MagicMock(), QueryAnalyzer(make_client({})), resolver).is_ai_available() is True
