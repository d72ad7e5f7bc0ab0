"""Data models for the BridgeYou forum API"""

from .bank import Bank, BankSummary
from .comment import Comment, CommentCreate, CommentPage, VoteRequest, VoteResult
from .correction import (
    Correction,
    CorrectionCreate,
    CorrectionStatus,
    CorrectionStatusUpdate,
    CorrectionSummary,
)
from .notification import Notification, NotificationType
from .post import Post, PostCategory, PostCreate, PostStatus, PostType, SortMode
from .search import (
    MAX_PAGE,
    DateRange,
    EffectiveFilters,
    SearchAnalysis,
    SearchFilters,
    SearchQuery,
    SearchResponse,
    TagGenerationRequest,
)

__all__ = [
    "Bank",
    "BankSummary",
    "Comment",
    "CommentCreate",
    "CommentPage",
    "VoteRequest",
    "VoteResult",
    "Correction",
    "CorrectionCreate",
    "CorrectionStatus",
    "CorrectionStatusUpdate",
    "CorrectionSummary",
    "Notification",
    "NotificationType",
    "Post",
    "PostCategory",
    "PostCreate",
    "PostStatus",
    "PostType",
    "SortMode",
    "MAX_PAGE",
    "DateRange",
    "EffectiveFilters",
    "SearchAnalysis",
    "SearchFilters",
    "SearchQuery",
    "SearchResponse",
    "TagGenerationRequest",
]
