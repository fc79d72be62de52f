"""
Endpoints del perfil de usuario.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reviewflow.core.database import get_db
from reviewflow.core.security import UserContext, get_current_user
from reviewflow.schemas.user import ProfileUpdate, SubscriptionUpdate, ProfileResponse
from reviewflow.services import user_service

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await user_service.get_profile(db, user.user_id)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    payload: ProfileUpdate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await user_service.update_profile(db, user.user_id, **payload.model_dump())


@router.put("/subscription", response_model=ProfileResponse)
async def update_subscription(
    payload: SubscriptionUpdate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await user_service.update_subscription(db, user.user_id, payload.plan)
