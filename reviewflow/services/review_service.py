"""
Servicio de Reseñas - Ciclo de vida de una reseña.

Estados:
    pending   -> responded (respuesta manual o automática)
    pending   -> archived  (marcar como leída)
    responded -> archived
    archived es terminal, aunque respond() no lo impide y set_status()
    acepta cualquier valor válido del enum.
"""

from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reviewflow.core.config import settings
from reviewflow.core.database import transaction
from reviewflow.core.exceptions import ValidationFailure
from reviewflow.models import Review, ResponseTemplate, ReviewStatus
from reviewflow.services.ownership import get_owned
from reviewflow.services.template_selector import select_response

logger = structlog.get_logger()


def _apply_response(review: Review, text: str) -> None:
    """Marca la reseña como respondida. Sobrescribe una respuesta previa."""
    review.responded = True
    review.response_text = text
    review.response_date = datetime.utcnow()
    review.status = ReviewStatus.RESPONDED


async def list_reviews(
    session: AsyncSession,
    user_id: str,
    status: Optional[ReviewStatus] = None,
    limit: int = 50,
    offset: int = 0
) -> List[Review]:
    """
    Reseñas del usuario, las más recientes primero.
    """
    limit = max(1, min(limit, settings.max_page_size))
    offset = max(0, offset)

    async with transaction(session):
        query = select(Review).where(Review.user_id == user_id)
        if status is not None:
            query = query.where(Review.status == status)

        query = query.order_by(Review.review_date.desc()).limit(limit).offset(offset)
        result = await session.execute(query)
        return list(result.scalars().all())


async def get_review(session: AsyncSession, user_id: str, review_id: str) -> Review:
    async with transaction(session):
        return await get_owned(session, Review, review_id, user_id)


async def ingest_review(
    session: AsyncSession,
    user_id: str,
    author_name: str,
    rating: int,
    author_email: Optional[str] = None,
    review_text: Optional[str] = None,
    review_date: Optional[datetime] = None,
    source: Optional[str] = None,
    external_id: Optional[str] = None
) -> Review:
    """
    Crea una reseña nueva en estado pending.

    Args:
        author_name: Obligatorio
        rating: Obligatorio, entero entre 1 y 5
        review_date: Por defecto, ahora. Con zona horaria se guarda en UTC
        source: Por defecto settings.default_review_source
    """
    if not author_name or not author_name.strip():
        raise ValidationFailure("Author name is required", field="author_name", user_id=user_id)
    if rating is None or isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationFailure("Rating must be an integer between 1 and 5", field="rating", user_id=user_id)

    external_id = external_id or None
    if review_date is not None and review_date.tzinfo is not None:
        review_date = review_date.astimezone(timezone.utc).replace(tzinfo=None)

    async with transaction(session):
        if external_id:
            existing = await session.execute(
                select(Review.id).where(
                    Review.user_id == user_id,
                    Review.external_id == external_id
                )
            )
            if existing.scalar_one_or_none() is not None:
                raise ValidationFailure("Review already ingested", field="external_id", user_id=user_id)

        review = Review(
            user_id=user_id,
            external_id=external_id,
            author_name=author_name,
            author_email=author_email,
            rating=rating,
            review_text=review_text,
            review_date=review_date or datetime.utcnow(),
            source=source or settings.default_review_source,
            status=ReviewStatus.PENDING,
            responded=False
        )
        session.add(review)

    logger.info("review_ingested", review_id=review.id, user_id=user_id, rating=rating, source=review.source)
    return review


async def respond(session: AsyncSession, user_id: str, review_id: str, text: str) -> Review:
    """
    Respuesta manual a una reseña.

    Re-responder sobrescribe la respuesta anterior, incluso si la reseña
    está archivada.
    """
    if not text or not text.strip():
        raise ValidationFailure("Response text is required", field="response_text", user_id=user_id)

    async with transaction(session):
        review = await get_owned(session, Review, review_id, user_id)
        previous_status = review.status
        _apply_response(review, text)

    logger.info(
        "review_responded",
        review_id=review_id,
        user_id=user_id,
        previous_status=previous_status.value,
        mode="manual"
    )
    return review


async def auto_respond(session: AsyncSession, user_id: str, review_id: str) -> str:
    """
    Respuesta automática usando la plantilla por defecto del rango.

    Returns:
        El texto enviado, para que el cliente lo muestre
    """
    async with transaction(session):
        review = await get_owned(session, Review, review_id, user_id)

        result = await session.execute(
            select(ResponseTemplate).where(
                ResponseTemplate.user_id == user_id,
                ResponseTemplate.is_default.is_(True)
            )
        )
        text = select_response(review.rating, result.scalars().all())
        _apply_response(review, text)

    logger.info(
        "review_responded",
        review_id=review_id,
        user_id=user_id,
        rating=review.rating,
        mode="auto"
    )
    return text


async def set_status(
    session: AsyncSession,
    user_id: str,
    review_id: str,
    status: ReviewStatus
) -> Review:
    """
    Cambia el estado de la reseña.
    Solo valida que el estado pertenezca al enum; no impide retrocesos.
    """
    try:
        status = ReviewStatus(status)
    except ValueError:
        raise ValidationFailure(f"Invalid status: {status}", field="status", user_id=user_id) from None

    async with transaction(session):
        review = await get_owned(session, Review, review_id, user_id)
        previous_status = review.status
        review.status = status

    logger.info(
        "review_status_changed",
        review_id=review_id,
        user_id=user_id,
        from_status=previous_status.value,
        to_status=status.value
    )
    return review


async def delete_review(session: AsyncSession, user_id: str, review_id: str) -> None:
    async with transaction(session):
        review = await get_owned(session, Review, review_id, user_id)
        await session.delete(review)

    logger.info("review_deleted", review_id=review_id, user_id=user_id)
