"""
Servicio de Plantillas - CRUD de plantillas de respuesta.

Mantiene la invariante: como máximo una plantilla por defecto
por (usuario, rango de calificación).
"""

from typing import List, Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reviewflow.core.database import transaction
from reviewflow.core.exceptions import ValidationFailure
from reviewflow.models import ResponseTemplate, RatingRange
from reviewflow.services.ownership import get_owned

logger = structlog.get_logger()


async def enforce_single_default(
    session: AsyncSession,
    user_id: str,
    rating_range: RatingRange,
    keep_id: Optional[str] = None
) -> int:
    """
    Quita el flag por defecto a las demás plantillas del mismo rango.

    Debe ejecutarse dentro de la misma transacción que la escritura
    que marca la nueva plantilla por defecto.

    Returns:
        Número de plantillas degradadas
    """
    query = update(ResponseTemplate).where(
        ResponseTemplate.user_id == user_id,
        ResponseTemplate.rating_range == rating_range,
        ResponseTemplate.is_default.is_(True)
    )
    if keep_id is not None:
        query = query.where(ResponseTemplate.id != keep_id)

    result = await session.execute(
        query.values(is_default=False).returning(ResponseTemplate.id)
    )

    demoted = len(result.scalars().all())
    if demoted:
        logger.info(
            "default_template_demoted",
            user_id=user_id,
            rating_range=rating_range.value,
            count=demoted
        )
    return demoted


async def list_templates(session: AsyncSession, user_id: str) -> List[ResponseTemplate]:
    """Plantillas del usuario, las más recientes primero."""
    async with transaction(session):
        query = select(ResponseTemplate).where(
            ResponseTemplate.user_id == user_id
        ).order_by(ResponseTemplate.created_at.desc())

        result = await session.execute(query)
        return list(result.scalars().all())


async def create_template(
    session: AsyncSession,
    user_id: str,
    name: str,
    template_text: str,
    rating_range: Optional[RatingRange] = None,
    is_default: bool = False
) -> ResponseTemplate:
    """
    Crea una plantilla. Si es por defecto y tiene rango, degrada
    la anterior por defecto de ese rango.
    """
    if not name or not name.strip():
        raise ValidationFailure("Name is required", field="name", user_id=user_id)
    if not template_text or not template_text.strip():
        raise ValidationFailure("Template text is required", field="template_text", user_id=user_id)

    async with transaction(session):
        if is_default and rating_range is not None:
            await enforce_single_default(session, user_id, rating_range)

        template = ResponseTemplate(
            user_id=user_id,
            name=name,
            template_text=template_text,
            rating_range=rating_range,
            is_default=bool(is_default)
        )
        session.add(template)

    await session.refresh(template)
    logger.info("template_created", template_id=template.id, user_id=user_id, is_default=template.is_default)
    return template


async def update_template(
    session: AsyncSession,
    user_id: str,
    template_id: str,
    name: Optional[str] = None,
    template_text: Optional[str] = None,
    rating_range: Optional[RatingRange] = None,
    is_default: Optional[bool] = None
) -> ResponseTemplate:
    """
    Actualización parcial: los campos None conservan su valor.
    """
    async with transaction(session):
        template = await get_owned(session, ResponseTemplate, template_id, user_id)

        if name is not None:
            template.name = name
        if template_text is not None:
            template.template_text = template_text
        if rating_range is not None:
            template.rating_range = rating_range

        if is_default is not None:
            template.is_default = is_default

        # También cubre el cambio de rango de una plantilla ya por defecto
        if template.is_default and template.rating_range is not None:
            await enforce_single_default(session, user_id, template.rating_range, keep_id=template.id)

    logger.info("template_updated", template_id=template_id, user_id=user_id)
    return template


async def delete_template(session: AsyncSession, user_id: str, template_id: str) -> None:
    """Elimina una plantilla del usuario."""
    async with transaction(session):
        template = await get_owned(session, ResponseTemplate, template_id, user_id)
        await session.delete(template)

    logger.info("template_deleted", template_id=template_id, user_id=user_id)
