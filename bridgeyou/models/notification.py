"""Notification data models"""

from pydantic import BaseModel
from datetime import datetime
from enum import Enum
from typing import Optional


class NotificationType(str, Enum):
    """Events a user gets notified about"""
    POST_APPROVED = "post_approved"
    POST_REJECTED = "post_rejected"
    COMMENT_ON_POST = "comment_on_post"
    UPVOTE_RECEIVED = "upvote_received"


class Notification(BaseModel):
    """Notification for a single user"""
    id: str
    user_id: str
    type: NotificationType
    title: str
    content: Optional[str] = None
    post_id: Optional[str] = None
    post_title: Optional[str] = None
    comment_id: Optional[str] = None
    is_read: bool = False
    created_at: datetime
