"""
Comment thread routes.
"""

import logging
from fastapi import APIRouter, Depends, Query

from bridgeyou.error_handling import error_handler
from bridgeyou.models import MAX_PAGE, Comment, CommentCreate, CommentPage, VoteRequest, VoteResult
from bridgeyou.services.search import next_page
from .dependencies import Services, get_services, require_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts/{post_id}/comments", response_model=CommentPage)
async def list_comments(
    post_id: str,
    page: int = Query(0, ge=0, le=MAX_PAGE, description="Zero-based page index"),
    services: Services = Depends(get_services)
):
    """Top-level comments, newest first, each with its replies oldest first."""
    try:
        comments, count = await services.comments.fetch_comments(post_id, page=page)
    except Exception as e:
        raise error_handler.to_http_exception("list_comments", e, {"post_id": post_id, "page": page})

    return CommentPage(
        data=comments,
        count=count,
        next_page=next_page(page, count, services.comments.page_size)
    )


@router.post("/posts/{post_id}/comments", response_model=Comment, status_code=201)
async def create_comment(
    post_id: str,
    body: CommentCreate,
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
):
    try:
        return await services.comments.create_comment(
            post_id, user_id, body.content, parent_id=body.parent_id
        )
    except Exception as e:
        raise error_handler.to_http_exception(
            "create_comment", e, {"post_id": post_id, "parent_id": body.parent_id}
        )


@router.post("/comments/{comment_id}/vote", response_model=VoteResult)
async def vote_comment(
    comment_id: str,
    body: VoteRequest,
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
):
    """Cast, switch or withdraw (same vote twice) the caller's vote."""
    try:
        return await services.comments.vote_comment(comment_id, body.vote_type, user_id)
    except Exception as e:
        raise error_handler.to_http_exception("vote_comment", e, {"comment_id": comment_id})
