"""Promo code API routes"""

from fastapi import APIRouter, HTTPException, Depends

from kungfu import Ok, Error

from ..models.promo import ApplyPromoRequest, PromoResponse
from ..security.identity import require_session
from ..services.promo import PromoService, REJECTION_MESSAGES
from .deps import get_promo_service

router = APIRouter(prefix="/api/promo", tags=["Promo"])


@router.get("", response_model=PromoResponse)
async def get_promo(
    session_id: str = Depends(require_session),
    promo_service: PromoService = Depends(get_promo_service),
):
    """The promo applied in this session"""
    return PromoResponse(applied=promo_service.current(session_id))


@router.post("", response_model=PromoResponse)
async def apply_promo(
    request: ApplyPromoRequest,
    session_id: str = Depends(require_session),
    promo_service: PromoService = Depends(get_promo_service),
):
    """Apply a promo code, replacing any applied one"""
    match promo_service.apply(session_id, request.code):
        case Ok(promo):
            return PromoResponse(applied=promo, message="Promo code applied successfully!")
        case Error(reason):
            raise HTTPException(status_code=400, detail=REJECTION_MESSAGES[reason])


@router.delete("", response_model=PromoResponse)
async def remove_promo(
    session_id: str = Depends(require_session),
    promo_service: PromoService = Depends(get_promo_service),
):
    """Remove the applied promo"""
    promo_service.remove(session_id)
    return PromoResponse(applied=None, message="Promo code removed")
