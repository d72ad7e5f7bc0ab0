"""Forum data access and post helpers"""

from .bank_repository import BankRepository
from .comment_repository import CommentRepository
from .correction_repository import CorrectionRepository
from .notification_repository import NotificationRepository
from .post_repository import PostRepository
from .tag_generator import TagGenerator, fallback_tags
from .user_repository import UserRepository
from .votes import next_vote

__all__ = [
    "BankRepository",
    "CommentRepository",
    "CorrectionRepository",
    "NotificationRepository",
    "PostRepository",
    "TagGenerator",
    "UserRepository",
    "fallback_tags",
    "next_vote",
]
