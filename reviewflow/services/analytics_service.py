"""
Servicio de Analytics - Estadísticas de reseñas y campañas.

Solo lectura: cada cálculo es independiente y no modifica entidades.
"""

from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy import select, func, and_, case
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reviewflow.core.config import settings
from reviewflow.core.database import transaction
from reviewflow.core.exceptions import ValidationFailure
from reviewflow.models import Review, Campaign, CampaignStatus

logger = structlog.get_logger()


def _round(value, digits: int = 2) -> float:
    return round(float(value), digits) if value is not None else 0


async def _count_reviews_since(session: AsyncSession, user_id: str, since: datetime) -> int:
    result = await session.execute(
        select(func.count(Review.id)).where(
            and_(Review.user_id == user_id, Review.review_date >= since)
        )
    )
    return result.scalar() or 0


async def get_dashboard_stats(session: AsyncSession, user_id: str) -> dict:
    """
    Estadísticas del panel principal.

    responseRate es un porcentaje entero; 0 si no hay reseñas.
    """
    now = datetime.utcnow()

    async with transaction(session):
        totals_query = select(
            func.count(Review.id),
            func.avg(Review.rating),
            func.sum(case((Review.responded.is_(True), 1), else_=0))
        ).where(Review.user_id == user_id)

        total_reviews, avg_rating, responded = (await session.execute(totals_query)).one()
        total_reviews = total_reviews or 0
        responded = responded or 0

        last_30_days = await _count_reviews_since(session, user_id, now - timedelta(days=30))
        last_7_days = await _count_reviews_since(session, user_id, now - timedelta(days=7))

        campaigns_result = await session.execute(
            select(func.count(Campaign.id)).where(
                and_(Campaign.user_id == user_id, Campaign.status == CampaignStatus.ACTIVE)
            )
        )
        active_campaigns = campaigns_result.scalar() or 0

    response_rate = round(responded / total_reviews * 100) if total_reviews > 0 else 0

    return {
        "totalReviews": total_reviews,
        "reviewsLast30Days": last_30_days,
        "reviewsLast7Days": last_7_days,
        "averageRating": _round(avg_rating, 1),
        "respondedReviews": responded,
        "responseRate": response_rate,
        "activeCampaigns": active_campaigns
    }


async def get_review_trends(
    session: AsyncSession,
    user_id: str,
    days: Optional[int] = None
) -> List[dict]:
    """
    Conteo y calificación promedio por día en la ventana indicada.
    Serie dispersa: los días sin reseñas no aparecen.
    """
    days = settings.trends_default_days if days is None else days
    if days < 1:
        raise ValidationFailure("Period must be at least 1 day", field="period", user_id=user_id)

    since = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0) - timedelta(days=days)
    day = func.date(Review.review_date)

    async with transaction(session):
        query = select(
            day.label("date"),
            func.count(Review.id).label("count"),
            func.avg(Review.rating).label("avg_rating")
        ).where(
            and_(Review.user_id == user_id, Review.review_date >= since)
        ).group_by(day).order_by(day.asc())

        rows = (await session.execute(query)).all()

    return [
        {
            "date": str(row.date),
            "count": row.count,
            "avg_rating": _round(row.avg_rating)
        }
        for row in rows
    ]


async def get_rating_distribution(session: AsyncSession, user_id: str) -> List[dict]:
    """Reseñas por calificación, de mayor a menor. Omite conteos en cero."""
    async with transaction(session):
        query = select(
            Review.rating,
            func.count(Review.id).label("count")
        ).where(
            Review.user_id == user_id
        ).group_by(Review.rating).order_by(Review.rating.desc())

        rows = (await session.execute(query)).all()

    return [{"rating": rating, "count": count} for rating, count in rows]


async def get_campaign_performance(session: AsyncSession, user_id: str) -> List[dict]:
    """
    Tasa de conversión por campaña: total_collected / total_sent * 100.
    """
    async with transaction(session):
        result = await session.execute(
            select(Campaign).where(
                Campaign.user_id == user_id
            ).order_by(Campaign.created_at.desc())
        )
        campaigns = result.scalars().all()

    return [
        {
            "id": campaign.id,
            "name": campaign.name,
            "status": campaign.status.value,
            "total_sent": campaign.total_sent,
            "total_collected": campaign.total_collected,
            "conversion_rate": conversion_rate(campaign.total_sent, campaign.total_collected)
        }
        for campaign in campaigns
    ]


def conversion_rate(total_sent: int, total_collected: int) -> float:
    if not total_sent:
        return 0
    return round(total_collected / total_sent * 100, 2)


async def get_monthly_report(
    session: AsyncSession,
    user_id: str,
    month: Optional[int] = None,
    year: Optional[int] = None
) -> dict:
    """
    Reporte mensual.

    positive_reviews cuenta calificaciones >= 4 y negative_reviews <= 2;
    las de 3 no cuentan en ninguno.
    """
    now = datetime.utcnow()
    month = now.month if month is None else month
    year = now.year if year is None else year

    if not 1 <= month <= 12:
        raise ValidationFailure("Month must be between 1 and 12", field="month", user_id=user_id)
    if not 1 <= year < 9999:
        raise ValidationFailure("Invalid year", field="year", user_id=user_id)

    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)

    async with transaction(session):
        query = select(
            func.count(Review.id),
            func.avg(Review.rating),
            func.sum(case((Review.responded.is_(True), 1), else_=0)),
            func.sum(case((Review.rating >= 4, 1), else_=0)),
            func.sum(case((Review.rating <= 2, 1), else_=0))
        ).where(
            and_(
                Review.user_id == user_id,
                Review.review_date >= start,
                Review.review_date < end
            )
        )
        total, avg_rating, responses, positive, negative = (await session.execute(query)).one()

    report = {
        "month": month,
        "year": year,
        "total_reviews": total or 0,
        "avg_rating": _round(avg_rating),
        "total_responses": responses or 0,
        "positive_reviews": positive or 0,
        "negative_reviews": negative or 0
    }

    logger.info("monthly_report_generated", user_id=user_id, month=month, year=year, total=report["total_reviews"])
    return report
