"""
Servicio de Automatización - Configuración por usuario.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reviewflow.core.database import transaction
from reviewflow.core.exceptions import ValidationFailure
from reviewflow.models import AutomationSettings

logger = structlog.get_logger()

# Campos que acepta la actualización parcial
UPDATABLE_FIELDS = (
    "auto_response_enabled",
    "ai_response_enabled",
    "review_request_enabled",
    "negative_alert_enabled",
    "negative_threshold",
)


async def _get_or_create(session: AsyncSession, user_id: str) -> AutomationSettings:
    result = await session.execute(
        select(AutomationSettings).where(AutomationSettings.user_id == user_id)
    )
    automation = result.scalar_one_or_none()

    if automation is None:
        # Valores por defecto: todo activado, umbral 3
        automation = AutomationSettings(
            user_id=user_id,
            auto_response_enabled=True,
            ai_response_enabled=True,
            review_request_enabled=True,
            negative_alert_enabled=True,
            negative_threshold=3
        )
        session.add(automation)
        await session.flush()
        logger.info("automation_settings_created", user_id=user_id)

    return automation


async def get_settings(session: AsyncSession, user_id: str) -> AutomationSettings:
    """Obtiene la configuración, creándola con valores por defecto si no existe."""
    async with transaction(session):
        return await _get_or_create(session, user_id)


async def update_settings(session: AsyncSession, user_id: str, **changes: Optional[object]) -> AutomationSettings:
    """
    Actualización parcial: los campos en None conservan su valor previo.
    """
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        field = sorted(unknown)[0]
        raise ValidationFailure(f"Unknown setting: {field}", field=field, user_id=user_id)

    threshold = changes.get("negative_threshold")
    if threshold is not None and not 1 <= threshold <= 5:
        raise ValidationFailure("negative_threshold must be between 1 and 5", field="negative_threshold", user_id=user_id)

    async with transaction(session):
        automation = await _get_or_create(session, user_id)

        applied = {}
        for field, value in changes.items():
            if value is not None:
                setattr(automation, field, value)
                applied[field] = value

        if applied:
            automation.updated_at = datetime.utcnow()

    logger.info("automation_settings_updated", user_id=user_id, fields=sorted(applied))
    return automation


def is_negative(automation: AutomationSettings, rating: int) -> bool:
    """True si la calificación debe disparar una alerta negativa."""
    return bool(automation.negative_alert_enabled) and rating <= automation.negative_threshold
