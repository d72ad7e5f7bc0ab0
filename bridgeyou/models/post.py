"""Post data models"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from .bank import BankSummary
from .correction import CorrectionSummary


class PostCategory(str, Enum):
    """Forum sections a post belongs to"""
    ENTRETIEN_SALES_TRADING = "entretien_sales_trading"
    CONSEILS_ECOLE = "conseils_ecole"
    STAGE_SUMMER_GRADUATE = "stage_summer_graduate"
    QUANT_HEDGE_FUNDS = "quant_hedge_funds"


class PostType(str, Enum):
    """Kind of content a post carries"""
    QUESTION = "question"
    RETOUR_EXPERIENCE = "retour_experience"
    TRANSCRIPT_ENTRETIEN = "transcript_entretien"
    FICHIER_ATTACHE = "fichier_attache"


class PostStatus(str, Enum):
    """Moderation status. Only approved posts are ever listed."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SortMode(str, Enum):
    """Result ordering"""
    RECENT = "recent"
    POPULAR = "popular"
    COMMENTS = "comments"


class Post(BaseModel):
    """Approved post as returned to the presentation layer"""
    model_config = ConfigDict(extra="allow")

    id: str
    user_id: Optional[str] = None
    bank_id: Optional[str] = None
    title: str
    content: str
    category: PostCategory
    type: PostType
    tags: List[str] = []
    city: Optional[str] = None
    is_public: bool = True
    status: PostStatus = PostStatus.APPROVED
    upvotes: int = 0
    downvotes: int = 0
    comments_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

    bank: Optional[BankSummary] = None
    corrections: List[CorrectionSummary] = []
    corrected: bool = False


class PostCreate(BaseModel):
    """Body for submitting a post; it stays pending until moderated"""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1)
    category: PostCategory
    type: PostType
    bank_id: Optional[str] = Field(None, alias="bankId")
    tags: List[str] = []
    is_public: bool = Field(True, alias="isPublic")
    city: Optional[str] = None
