"""
Endpoints de campañas y destinatarios.
"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from reviewflow.core.database import get_db
from reviewflow.core.security import UserContext, get_current_user
from reviewflow.schemas.campaign import (
    CampaignCreate,
    CampaignUpdate,
    CampaignStatusUpdate,
    RecipientsAdd,
    RecipientResponse,
    CampaignResponse,
    CampaignDetail,
    CampaignList,
    DispatchResult,
    ConversionResult,
)
from reviewflow.services import campaign_service

router = APIRouter()


@router.get("", response_model=CampaignList)
async def list_campaigns(
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    campaigns = await campaign_service.list_campaigns(db, user.user_id)
    return {"count": len(campaigns), "campaigns": campaigns}


@router.get("/{campaign_id}", response_model=CampaignDetail)
async def get_campaign(
    campaign_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await campaign_service.get_campaign(db, user.user_id, campaign_id)


@router.post("", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    payload: CampaignCreate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await campaign_service.create_campaign(db, user.user_id, **payload.model_dump())


@router.put("/{campaign_id}", response_model=CampaignResponse)
async def update_campaign(
    campaign_id: str,
    payload: CampaignUpdate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await campaign_service.update_campaign(db, user.user_id, campaign_id, **payload.model_dump())


@router.patch("/{campaign_id}/status", response_model=CampaignResponse)
async def update_campaign_status(
    campaign_id: str,
    payload: CampaignStatusUpdate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await campaign_service.set_campaign_status(db, user.user_id, campaign_id, payload.status)


@router.post("/{campaign_id}/recipients", response_model=List[RecipientResponse], status_code=status.HTTP_201_CREATED)
async def add_recipients(
    campaign_id: str,
    payload: RecipientsAdd,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    entries = [recipient.model_dump() for recipient in payload.recipients]
    return await campaign_service.add_recipients(db, user.user_id, campaign_id, entries)


@router.post("/{campaign_id}/send", response_model=DispatchResult)
async def send_campaign(
    campaign_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Marca como enviados todos los destinatarios pendientes.
    El envío real por email/SMS es responsabilidad del canal externo.
    """
    dispatched = await campaign_service.dispatch(db, user.user_id, campaign_id)
    campaign = await campaign_service.get_campaign(db, user.user_id, campaign_id)
    return {"campaign_id": campaign_id, "dispatched": dispatched, "total_sent": campaign.total_sent}


@router.post("/{campaign_id}/recipients/{recipient_id}/convert", response_model=ConversionResult)
async def convert_recipient(
    campaign_id: str,
    recipient_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    recorded = await campaign_service.record_conversion(db, user.user_id, campaign_id, recipient_id)
    return {"recipient_id": recipient_id, "recorded": recorded}


@router.delete("/{campaign_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_campaign(
    campaign_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await campaign_service.delete_campaign(db, user.user_id, campaign_id)
