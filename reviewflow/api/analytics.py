"""
Endpoints de analytics (solo lectura).
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from reviewflow.core.database import get_db
from reviewflow.core.security import UserContext, get_current_user
from reviewflow.services import analytics_service

router = APIRouter()


@router.get("/dashboard")
async def dashboard(
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return {"stats": await analytics_service.get_dashboard_stats(db, user.user_id)}


@router.get("/trends")
async def trends(
    period: Optional[int] = Query(None, ge=1, le=365, description="Días hacia atrás"),
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return {"trends": await analytics_service.get_review_trends(db, user.user_id, days=period)}


@router.get("/rating-distribution")
async def rating_distribution(
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return {"distribution": await analytics_service.get_rating_distribution(db, user.user_id)}


@router.get("/campaign-performance")
async def campaign_performance(
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return {"performance": await analytics_service.get_campaign_performance(db, user.user_id)}


@router.get("/monthly-report")
async def monthly_report(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return {"report": await analytics_service.get_monthly_report(db, user.user_id, month=month, year=year)}
