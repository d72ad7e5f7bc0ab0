"""Search data models"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date
from typing import Any, Dict, List, Optional

from .post import PostCategory, PostType, SortMode


# Keeps page * page_size inside a Postgres bigint OFFSET
MAX_PAGE = 100_000


class DateRange(BaseModel):
    """Inclusive creation-date window (ISO date strings)"""
    model_config = ConfigDict(populate_by_name=True)

    date_from: Optional[str] = Field(None, alias="from")
    date_to: Optional[str] = Field(None, alias="to")


class SearchFilters(BaseModel):
    """Explicit filters supplied by the caller"""
    model_config = ConfigDict(populate_by_name=True)

    category: Optional[PostCategory] = None
    type: Optional[PostType] = None
    city: Optional[str] = None
    cities: List[str] = []
    banks: List[str] = []  # bank ids
    tags: List[str] = []
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    sort_by: Optional[SortMode] = Field(None, alias="sortBy")

    @field_validator("date_from", "date_to")
    @classmethod
    def validate_iso_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        date.fromisoformat(v.strip()[:10])
        return v.strip()


class SearchAnalysis(BaseModel):
    """Structured interpretation of a natural language query"""
    model_config = ConfigDict(populate_by_name=True)

    search_terms: List[str] = Field(default_factory=list, alias="searchTerms")
    categories: List[PostCategory] = []
    types: List[PostType] = []
    tags: List[str] = []
    cities: List[str] = []
    banks: List[str] = []  # free text, resolved later
    date_range: Optional[DateRange] = Field(None, alias="dateRange")
    sort_by: SortMode = Field(SortMode.RECENT, alias="sortBy")
    confidence: float = Field(0.5, ge=0.0, le=1.0)


class EffectiveFilters(BaseModel):
    """Resolved filter set driving the posts query"""
    category: Optional[PostCategory] = None
    type: Optional[PostType] = None
    banks: List[str] = []  # canonical bank ids only
    tags: List[str] = []
    cities: List[str] = []
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    sort_by: SortMode = SortMode.RECENT


class SearchQuery(BaseModel):
    """Search request parameters"""
    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = None
    filters: Optional[SearchFilters] = None
    page_param: int = Field(0, ge=0, le=MAX_PAGE, alias="pageParam")
    is_authenticated: bool = Field(False, alias="isAuthenticated")
    is_natural_language: bool = Field(False, alias="isNaturalLanguage")


class SearchResponse(BaseModel):
    """One page of search results"""
    model_config = ConfigDict(populate_by_name=True)

    data: List[Dict[str, Any]]
    count: int
    next_page: Optional[int] = Field(None, alias="nextPage")
    search_analysis: Optional[SearchAnalysis] = Field(None, alias="searchAnalysis")


class TagGenerationRequest(BaseModel):
    """Post details used to suggest tags"""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    category: PostCategory
    bank_name: Optional[str] = Field(None, alias="bankName")
    type: Optional[PostType] = None
