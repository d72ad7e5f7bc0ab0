"""
Search routes for forum posts.
"""

import logging
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from bridgeyou.error_handling import error_handler
from bridgeyou.models import SearchQuery, SearchResponse
from .dependencies import Services, get_services, get_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/search", response_model=SearchResponse)
async def search_posts(
    query: SearchQuery,
    services: Services = Depends(get_services),
    user_id: Optional[str] = Depends(get_user_id)
):
    """
    Search approved posts.

    1. In natural language mode, analyzes the query (keyword fallback when
       the completion service is unavailable)
    2. Resolves bank names to bank ids
    3. Merges explicit and analyzed filters (explicit wins)
    4. Returns one page of posts with the next page index

    Private posts are only visible with an X-User-Id header; the body's
    isAuthenticated flag is ignored here.
    """
    try:
        return await services.search.enhanced_search(
            query=query.query,
            filters=query.filters,
            page_param=query.page_param,
            is_authenticated=user_id is not None,
            is_natural_language=query.is_natural_language
        )
    except Exception as e:
        raise error_handler.to_http_exception(
            "search_posts", e, {"query": query.query, "page": query.page_param}
        )


@router.get("/search/suggestions", response_model=List[str])
async def search_suggestions(
    q: str = Query("", description="Text typed so far"),
    services: Services = Depends(get_services)
):
    """Autocomplete suggestions from titles and tags (empty on failure)."""
    return await services.search.get_search_suggestions(q)


@router.get("/search/tags/popular", response_model=List[str])
async def popular_tags(
    limit: int = Query(20, ge=1, le=100, description="Max tags to return"),
    services: Services = Depends(get_services)
):
    return await services.search.get_popular_tags(limit=limit)


@router.get("/search/ai-status")
async def ai_status(services: Services = Depends(get_services)):
    """Whether natural language search is backed by the completion service."""
    return {"available": services.search.is_ai_available()}
