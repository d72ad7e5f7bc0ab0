"""
Correction moderation routes.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from bridgeyou.error_handling import error_handler
from bridgeyou.models import Correction, CorrectionStatusUpdate
from .dependencies import Services, get_services, require_moderator, require_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/corrections/pending", response_model=List[Correction])
async def pending_corrections(
    services: Services = Depends(get_services),
    moderator_id: str = Depends(require_moderator)
):
    """Moderation queue, oldest first."""
    try:
        return await services.corrections.get_pending_corrections()
    except Exception as e:
        raise error_handler.to_http_exception("pending_corrections", e)


@router.get("/corrections/mine", response_model=List[Correction])
async def my_corrections(
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
):
    try:
        return await services.corrections.get_user_corrections(user_id)
    except Exception as e:
        raise error_handler.to_http_exception("my_corrections", e, {"user_id": user_id})


@router.patch("/corrections/{correction_id}", response_model=Correction)
async def moderate_correction(
    correction_id: str,
    update: CorrectionStatusUpdate,
    services: Services = Depends(get_services),
    moderator_id: str = Depends(require_moderator)
):
    """Approve or reject a correction, optionally selecting it for its post."""
    try:
        return await services.corrections.update_correction_status(
            correction_id, update, moderator_id
        )
    except Exception as e:
        raise error_handler.to_http_exception(
            "moderate_correction", e, {"correction_id": correction_id, "status": update.status.value}
        )


@router.delete("/corrections/{correction_id}")
async def withdraw_correction(
    correction_id: str,
    services: Services = Depends(get_services),
    user_id: str = Depends(require_user_id)
):
    """Withdraw one of the caller's corrections while it is still pending."""
    try:
        deleted = await services.corrections.delete_pending_correction(correction_id, user_id)
    except Exception as e:
        raise error_handler.to_http_exception("withdraw_correction", e, {"correction_id": correction_id})

    if not deleted:
        raise HTTPException(status_code=404, detail="Pending correction not found")
    return {"success": True}
