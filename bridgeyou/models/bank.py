"""Bank data models"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class BankSummary(BaseModel):
    """Bank fields embedded in a post"""
    id: str
    name: str
    logo_url: Optional[str] = None


class Bank(BankSummary):
    """Bank directory entry"""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
