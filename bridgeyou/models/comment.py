"""Comment and vote data models"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Literal, Optional


class Comment(BaseModel):
    """Comment on a post; top-level comments carry their replies"""
    id: str
    post_id: str
    user_id: Optional[str] = None
    parent_id: Optional[str] = None
    content: str
    upvotes: int = 0
    downvotes: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None
    replies: List["Comment"] = []


class CommentCreate(BaseModel):
    """Body for commenting on a post or replying to a comment"""
    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(..., min_length=1, max_length=10000)
    parent_id: Optional[str] = Field(None, alias="parentId")


class CommentPage(BaseModel):
    """One page of top-level comments"""
    model_config = ConfigDict(populate_by_name=True)

    data: List[Comment]
    count: int
    next_page: Optional[int] = Field(None, alias="nextPage")


class VoteRequest(BaseModel):
    """Up (1) or down (-1) vote. Repeating the same vote withdraws it."""
    model_config = ConfigDict(populate_by_name=True)

    vote_type: Literal[1, -1] = Field(..., alias="voteType")


class VoteResult(BaseModel):
    """Caller's vote after the toggle, with the target's new tallies"""
    model_config = ConfigDict(populate_by_name=True)

    vote_type: Optional[Literal[1, -1]] = Field(None, alias="voteType")
    upvotes: int
    downvotes: int
