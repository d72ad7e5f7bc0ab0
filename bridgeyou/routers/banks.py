"""
Bank directory routes.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from bridgeyou.error_handling import error_handler
from bridgeyou.models import Bank
from .dependencies import Services, get_services

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/banks", response_model=List[Bank])
async def list_banks(services: Services = Depends(get_services)):
    """List every bank, ordered by name."""
    try:
        return await services.banks.fetch_banks()
    except Exception as e:
        raise error_handler.to_http_exception("list_banks", e)


@router.get("/banks/{bank_id}", response_model=Bank)
async def get_bank(bank_id: str, services: Services = Depends(get_services)):
    bank = await services.banks.get_bank_by_id(bank_id)
    if bank is None:
        raise HTTPException(status_code=404, detail="Bank not found")
    return bank
