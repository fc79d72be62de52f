"""
Endpoints de reseñas.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from reviewflow.core.database import get_db
from reviewflow.core.security import UserContext, get_current_user
from reviewflow.models.enums import ReviewStatus
from reviewflow.schemas.review import (
    ReviewCreate,
    ReviewRespond,
    ReviewStatusUpdate,
    ReviewResponse,
    ReviewList,
    ReviewCreated,
    AutoRespondResult,
)
from reviewflow.services import automation_service, review_service

router = APIRouter()


@router.get("", response_model=ReviewList)
async def list_reviews(
    status_filter: Optional[ReviewStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1),
    offset: int = Query(0, ge=0),
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    reviews = await review_service.list_reviews(db, user.user_id, status=status_filter, limit=limit, offset=offset)
    return {"count": len(reviews), "reviews": reviews}


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(
    review_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await review_service.get_review(db, user.user_id, review_id)


@router.post("", response_model=ReviewCreated, status_code=status.HTTP_201_CREATED)
async def create_review(
    payload: ReviewCreate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Ingresa una reseña en estado pending.
    negative_alert indica si la calificación debe disparar la alerta externa.
    """
    review = await review_service.ingest_review(db, user.user_id, **payload.model_dump())
    automation = await automation_service.get_settings(db, user.user_id)

    return {
        "review": review,
        "negative_alert": automation_service.is_negative(automation, review.rating)
    }


@router.post("/{review_id}/respond", response_model=ReviewResponse)
async def respond_to_review(
    review_id: str,
    payload: ReviewRespond,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await review_service.respond(db, user.user_id, review_id, payload.response_text)


@router.post("/{review_id}/auto-respond", response_model=AutoRespondResult)
async def auto_respond_to_review(
    review_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    text = await review_service.auto_respond(db, user.user_id, review_id)
    return {"review_id": review_id, "response_text": text}


@router.patch("/{review_id}/status", response_model=ReviewResponse)
async def update_review_status(
    review_id: str,
    payload: ReviewStatusUpdate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await review_service.set_status(db, user.user_id, review_id, payload.status)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await review_service.delete_review(db, user.user_id, review_id)
