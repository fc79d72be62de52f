"""
Servicio de Usuarios - Perfil y plan de suscripción.

El registro, el hash de contraseñas y la emisión de credenciales
quedan fuera de este servicio.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reviewflow.core.database import transaction
from reviewflow.core.exceptions import NotFoundError, ValidationFailure
from reviewflow.models import User, SubscriptionPlan

logger = structlog.get_logger()


async def _get_user(session: AsyncSession, user_id: str) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User", entity_id=user_id, user_id=user_id)
    return user


async def get_profile(session: AsyncSession, user_id: str) -> User:
    async with transaction(session):
        return await _get_user(session, user_id)


async def update_profile(
    session: AsyncSession,
    user_id: str,
    name: Optional[str] = None,
    company_name: Optional[str] = None,
    google_business_id: Optional[str] = None
) -> User:
    """Actualización parcial del perfil."""
    async with transaction(session):
        user = await _get_user(session, user_id)

        if name is not None:
            if not name.strip():
                raise ValidationFailure("Name cannot be empty", field="name", user_id=user_id)
            user.name = name
        if company_name is not None:
            user.company_name = company_name
        if google_business_id is not None:
            user.google_business_id = google_business_id
        user.updated_at = datetime.utcnow()

    logger.info("profile_updated", user_id=user_id)
    return user


async def update_subscription(session: AsyncSession, user_id: str, plan) -> User:
    """Cambia el plan: free, basic, pro o enterprise."""
    try:
        plan = SubscriptionPlan(plan)
    except ValueError:
        raise ValidationFailure(f"Invalid subscription plan: {plan}", field="plan", user_id=user_id) from None

    async with transaction(session):
        user = await _get_user(session, user_id)
        previous_plan = user.subscription_plan
        user.subscription_plan = plan
        user.updated_at = datetime.utcnow()

    logger.info(
        "subscription_updated",
        user_id=user_id,
        from_plan=previous_plan.value,
        to_plan=plan.value
    )
    return user
