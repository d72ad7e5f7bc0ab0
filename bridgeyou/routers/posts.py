"""
Post feed, submission, votes, single post, tag generation and correction routes.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from bridgeyou.error_handling import error_handler
from bridgeyou.models import (
    Correction,
    CorrectionCreate,
    MAX_PAGE,
    EffectiveFilters,
    PostCategory,
    PostCreate,
    PostType,
    SearchFilters,
    SearchResponse,
    SortMode,
    TagGenerationRequest,
    VoteRequest,
    VoteResult,
)
from bridgeyou.services.search import next_page
from .dependencies import Services, get_services, get_user_id, require_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=SearchResponse)
async def list_posts(
    page: int = Query(0, ge=0, le=MAX_PAGE, description="Zero-based page index"),
    category: Optional[PostCategory] = Query(None),
    type: Optional[PostType] = Query(None),
    sort_by: Optional[SortMode] = Query(None, alias="sortBy"),
    banks: List[str] = Query([], description="Bank ids"),
    tags: List[str] = Query([]),
    cities: List[str] = Query([]),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    services: Services = Depends(get_services),
    user_id: Optional[str] = Depends(get_user_id)
):
    """
    Feed of approved posts.

    Anonymous callers only see public posts. Each post carries the derived
    `corrected` flag.
    """
    try:
        explicit = SearchFilters(date_from=date_from, date_to=date_to)
    except ValidationError:
        raise HTTPException(status_code=422, detail="dateFrom and dateTo must be ISO dates")

    filters = EffectiveFilters(
        type=type,
        banks=banks,
        tags=tags,
        cities=cities,
        date_from=explicit.date_from,
        date_to=explicit.date_to,
        sort_by=sort_by or SortMode.RECENT,
    )

    try:
        data, count = await services.posts.fetch_posts(
            page=page,
            category=category,
            filters=filters,
            is_authenticated=user_id is not None
        )
    except Exception as e:
        raise error_handler.to_http_exception("list_posts", e, {"page": page, "category": category})

    return SearchResponse(
        data=data,
        count=count,
        next_page=next_page(page, count, services.settings.search.page_size)
    )


@router.post("/posts", status_code=201)
async def create_post(
    post: PostCreate,
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
) -> Dict[str, Any]:
    """Submit a post. It is listed once a moderator approves it."""
    try:
        return await services.posts.create_post(user_id, post)
    except Exception as e:
        raise error_handler.to_http_exception("create_post", e, {"category": post.category.value})


@router.post("/posts/tags/generate", response_model=List[str])
async def generate_tags(
    request: TagGenerationRequest,
    services: Services = Depends(get_services)
):
    """Suggest tags for a post being written (rule based when AI is off)."""
    return await services.tagger.generate(
        request.title,
        request.category,
        bank_name=request.bank_name,
        post_type=request.type
    )


@router.get("/posts/{post_id}")
async def get_post(
    post_id: str,
    services: Services = Depends(get_services),
    user_id: Optional[str] = Depends(get_user_id)
) -> Dict[str, Any]:
    try:
        return await services.posts.fetch_post(post_id, is_authenticated=user_id is not None)
    except Exception as e:
        raise error_handler.to_http_exception("get_post", e, {"post_id": post_id})


@router.post("/posts/{post_id}/vote", response_model=VoteResult)
async def vote_post(
    post_id: str,
    body: VoteRequest,
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
):
    """Cast, switch or withdraw (same vote twice) the caller's vote."""
    try:
        return await services.posts.vote_post(post_id, body.vote_type, user_id)
    except Exception as e:
        raise error_handler.to_http_exception("vote_post", e, {"post_id": post_id})


@router.get("/posts/{post_id}/corrections", response_model=List[Correction])
async def list_corrections(post_id: str, services: Services = Depends(get_services)):
    """Approved corrections of a post, oldest first."""
    try:
        return await services.corrections.get_corrections_by_post(post_id)
    except Exception as e:
        raise error_handler.to_http_exception("list_corrections", e, {"post_id": post_id})


@router.get("/posts/{post_id}/corrections/selected", response_model=Optional[Correction])
async def selected_correction(post_id: str, services: Services = Depends(get_services)):
    try:
        return await services.corrections.get_selected_correction(post_id)
    except Exception as e:
        raise error_handler.to_http_exception("selected_correction", e, {"post_id": post_id})


@router.post("/posts/{post_id}/corrections", response_model=Correction, status_code=201)
async def create_correction(
    post_id: str,
    body: CorrectionCreate,
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
):
    """Submit a correction; it stays pending until a moderator reviews it."""
    try:
        return await services.corrections.create_correction(post_id, user_id, body.content)
    except Exception as e:
        raise error_handler.to_http_exception("create_correction", e, {"post_id": post_id})
