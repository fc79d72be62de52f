"""
Servicio de Campañas - Despacho de destinatarios y contadores.

Destinatarios: pending -> sent -> review_submitted (solo hacia adelante).
Los contadores total_sent / total_collected solo se modifican aquí.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from reviewflow.core.database import transaction
from reviewflow.core.exceptions import ValidationFailure
from reviewflow.models import Campaign, CampaignRecipient, CampaignStatus, RecipientStatus
from reviewflow.services.ownership import get_owned, get_owned_recipient

logger = structlog.get_logger()


def _require_text(value: Optional[str], field: str, user_id: str) -> None:
    if not value or not str(value).strip():
        raise ValidationFailure(f"{field} is required", field=field, user_id=user_id)


def _parse_status(status, user_id: str) -> CampaignStatus:
    try:
        return CampaignStatus(status)
    except ValueError:
        raise ValidationFailure(f"Invalid status: {status}", field="status", user_id=user_id) from None


async def list_campaigns(session: AsyncSession, user_id: str) -> List[Campaign]:
    """Campañas del usuario, las más recientes primero."""
    async with transaction(session):
        result = await session.execute(
            select(Campaign).where(
                Campaign.user_id == user_id
            ).order_by(Campaign.created_at.desc())
        )
        return list(result.scalars().all())


async def get_campaign(session: AsyncSession, user_id: str, campaign_id: str) -> Campaign:
    """Campaña con sus destinatarios cargados."""
    async with transaction(session):
        return await get_owned(
            session, Campaign, campaign_id, user_id,
            selectinload(Campaign.recipients)
        )


async def create_campaign(
    session: AsyncSession,
    user_id: str,
    name: str,
    type: str,
    message_template: str,
    send_delay_days: int = 0
) -> Campaign:
    """
    Crea una campaña activa con contadores en cero.
    """
    _require_text(name, "name", user_id)
    _require_text(type, "type", user_id)
    _require_text(message_template, "message_template", user_id)
    if send_delay_days is not None and send_delay_days < 0:
        raise ValidationFailure("send_delay_days must be >= 0", field="send_delay_days", user_id=user_id)

    async with transaction(session):
        campaign = Campaign(
            user_id=user_id,
            name=name,
            type=type,
            message_template=message_template,
            send_delay_days=send_delay_days or 0,
            status=CampaignStatus.ACTIVE,
            total_sent=0,
            total_collected=0
        )
        session.add(campaign)

    logger.info("campaign_created", campaign_id=campaign.id, user_id=user_id, type=type)
    return campaign


async def update_campaign(
    session: AsyncSession,
    user_id: str,
    campaign_id: str,
    name: Optional[str] = None,
    type: Optional[str] = None,
    send_delay_days: Optional[int] = None,
    message_template: Optional[str] = None,
    status: Optional[CampaignStatus] = None
) -> Campaign:
    """
    Actualización parcial de los campos editables.
    Los contadores no se pueden editar.
    """
    if status is not None:
        status = _parse_status(status, user_id)
    if send_delay_days is not None and send_delay_days < 0:
        raise ValidationFailure("send_delay_days must be >= 0", field="send_delay_days", user_id=user_id)

    async with transaction(session):
        campaign = await get_owned(session, Campaign, campaign_id, user_id)

        if name is not None:
            campaign.name = name
        if type is not None:
            campaign.type = type
        if send_delay_days is not None:
            campaign.send_delay_days = send_delay_days
        if message_template is not None:
            campaign.message_template = message_template
        if status is not None:
            campaign.status = status
        campaign.updated_at = datetime.utcnow()

    logger.info("campaign_updated", campaign_id=campaign_id, user_id=user_id)
    return campaign


async def set_campaign_status(
    session: AsyncSession,
    user_id: str,
    campaign_id: str,
    status: CampaignStatus
) -> Campaign:
    """Pausar, reactivar o completar una campaña (manual)."""
    status = _parse_status(status, user_id)

    async with transaction(session):
        campaign = await get_owned(session, Campaign, campaign_id, user_id)
        previous_status = campaign.status
        campaign.status = status
        campaign.updated_at = datetime.utcnow()

    logger.info(
        "campaign_status_changed",
        campaign_id=campaign_id,
        from_status=previous_status.value,
        to_status=status.value
    )
    return campaign


async def delete_campaign(session: AsyncSession, user_id: str, campaign_id: str) -> None:
    """Elimina la campaña y sus destinatarios."""
    async with transaction(session):
        campaign = await get_owned(session, Campaign, campaign_id, user_id)
        await session.execute(
            delete(CampaignRecipient).where(CampaignRecipient.campaign_id == campaign_id)
        )
        await session.delete(campaign)

    logger.info("campaign_deleted", campaign_id=campaign_id, user_id=user_id)


async def add_recipients(
    session: AsyncSession,
    user_id: str,
    campaign_id: str,
    recipients: List[dict]
) -> List[CampaignRecipient]:
    """
    Agrega destinatarios en estado pending.

    Cada entrada: {"name": str, "email": str?, "phone": str?}.
    El lote es atómico: si una entrada falla no se inserta ninguna.
    """
    if not isinstance(recipients, list):
        raise ValidationFailure("Recipients array is required", field="recipients", user_id=user_id)

    for index, entry in enumerate(recipients):
        name = entry.get("name") if isinstance(entry, dict) else None
        if not name or not str(name).strip():
            raise ValidationFailure(
                f"Recipient name is required (entry {index})",
                field=f"recipients[{index}].name",
                user_id=user_id
            )

    async with transaction(session):
        await get_owned(session, Campaign, campaign_id, user_id)

        created = []
        for entry in recipients:
            recipient = CampaignRecipient(
                campaign_id=campaign_id,
                customer_name=entry["name"],
                customer_email=entry.get("email") or None,
                customer_phone=entry.get("phone") or None,
                status=RecipientStatus.PENDING,
                review_submitted=False
            )
            session.add(recipient)
            created.append(recipient)

    logger.info("recipients_added", campaign_id=campaign_id, user_id=user_id, count=len(created))
    return created


async def dispatch(session: AsyncSession, user_id: str, campaign_id: str) -> int:
    """
    Envía la campaña a todos los destinatarios pendientes.

    La transición pending -> sent es un único UPDATE ... RETURNING, de modo
    que dos despachos concurrentes no pueden contar el mismo destinatario.
    Luego total_sent se incrementa una sola vez con el conteo obtenido.

    Returns:
        Número de destinatarios despachados (0 si no había pendientes)
    """
    async with transaction(session):
        campaign = await get_owned(session, Campaign, campaign_id, user_id)

        now = datetime.utcnow()
        result = await session.execute(
            update(CampaignRecipient).where(
                CampaignRecipient.campaign_id == campaign_id,
                CampaignRecipient.status == RecipientStatus.PENDING
            ).values(
                status=RecipientStatus.SENT,
                sent_at=now
            ).returning(CampaignRecipient.id).execution_options(synchronize_session=False)
        )
        dispatched_ids = list(result.scalars().all())
        dispatched = len(dispatched_ids)

        if dispatched:
            await session.execute(
                update(Campaign).where(
                    Campaign.id == campaign_id
                ).values(
                    total_sent=Campaign.total_sent + dispatched,
                    updated_at=now
                ).execution_options(synchronize_session=False)
            )

            # Las copias ya cargadas en la sesión quedan desactualizadas
            await session.execute(
                select(CampaignRecipient).where(
                    CampaignRecipient.id.in_(dispatched_ids)
                ).execution_options(populate_existing=True)
            )
            await session.refresh(campaign)

    logger.info(
        "campaign_dispatched",
        campaign_id=campaign_id,
        user_id=user_id,
        dispatched=dispatched,
        total_sent=campaign.total_sent
    )
    return dispatched


async def record_conversion(
    session: AsyncSession,
    user_id: str,
    campaign_id: str,
    recipient_id: str
) -> bool:
    """
    Marca que el destinatario dejó una reseña y suma total_collected.

    Solo aplica a destinatarios ya enviados. Repetir la conversión no
    vuelve a sumar.

    Returns:
        True si se registró la conversión, False si ya existía
    """
    async with transaction(session):
        recipient = await get_owned_recipient(session, campaign_id, recipient_id, user_id)

        if recipient.status != RecipientStatus.SENT:
            raise ValidationFailure(
                "Recipient has not been sent the campaign yet",
                field="status",
                user_id=user_id
            )

        if recipient.review_submitted:
            logger.info("conversion_already_recorded", recipient_id=recipient_id, campaign_id=campaign_id)
            return False

        recipient.review_submitted = True
        await session.execute(
            update(Campaign).where(
                Campaign.id == campaign_id
            ).values(
                total_collected=Campaign.total_collected + 1
            ).execution_options(synchronize_session=False)
        )
        await session.execute(
            select(Campaign).where(Campaign.id == campaign_id).execution_options(populate_existing=True)
        )

    logger.info("conversion_recorded", recipient_id=recipient_id, campaign_id=campaign_id, user_id=user_id)
    return True
