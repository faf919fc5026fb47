"""
Referral API endpoints.
"""

from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import get_tenant_id
from app.core.rate_limit import limiter, PUBLIC_ENDPOINT_LIMIT
from app.db.session import get_db
from app.controllers.referral_controller import ReferralController
from app.models.referral import ReferralStatus
from app.schemas.referral import (
    ReferralInviteCreate,
    ReferralResponse,
    ReferralListResponse,
    ReferralCodeRequest,
    ReferralRedeemRequest,
    ReferralValidationResult,
    ReferralRedemptionResult,
    ClientReferralCodeResponse,
    ReferralStatsResponse,
)

router = APIRouter()


@router.post("/invite", response_model=ReferralResponse, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    invite_data: ReferralInviteCreate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> ReferralResponse:
    """Issue a referral invitation code for a client."""
    controller = ReferralController(db)
    try:
        return await controller.create_invitation(tenant_id, invite_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("", response_model=ReferralListResponse)
async def list_referrals(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    referrer_id: Optional[UUID] = Query(None),
    status_filter: Optional[ReferralStatus] = Query(None, alias="status"),
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> ReferralListResponse:
    """List referrals."""
    controller = ReferralController(db)
    return await controller.list_referrals(
        tenant_id,
        skip=skip,
        limit=limit,
        referrer_id=referrer_id,
        status=status_filter,
    )


@router.get("/stats", response_model=ReferralStatsResponse)
async def get_referral_stats(
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> ReferralStatsResponse:
    """Referral programme statistics."""
    controller = ReferralController(db)
    return await controller.get_stats(tenant_id)


@router.post("/validate", response_model=ReferralValidationResult)
@limiter.limit(PUBLIC_ENDPOINT_LIMIT)
async def validate_referral_code(
    request: Request,
    code_data: ReferralCodeRequest,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> ReferralValidationResult:
    """
    Check a referral code typed in by a prospective client.
    Public and rate limited; an unknown code is a normal result, not an error.
    """
    controller = ReferralController(db)
    return await controller.validate_code(tenant_id, code_data.code)


@router.post("/redeem", response_model=ReferralRedemptionResult)
async def redeem_referral_code(
    redeem_data: ReferralRedeemRequest,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> ReferralRedemptionResult:
    """Attribute a new client to the owner of a referral code."""
    controller = ReferralController(db)
    try:
        return await controller.redeem_code(tenant_id, redeem_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/clients/{client_id}/code", response_model=ClientReferralCodeResponse)
async def get_client_referral_code(
    client_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> ClientReferralCodeResponse:
    """Get a client's standing referral code, issuing it on first request."""
    controller = ReferralController(db)
    try:
        code = await controller.get_client_code(tenant_id, client_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    if not code:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found",
        )
    return code
