"""
Verificación de propiedad - Un único chequeo por operación.

Una entidad inexistente y una entidad de otro usuario producen el mismo
NotFoundError, para no filtrar la existencia de datos ajenos.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewflow.core.exceptions import NotFoundError
from reviewflow.models import Campaign, CampaignRecipient


async def get_owned(session: AsyncSession, model, entity_id: str, user_id: str, *options):
    """Carga una entidad con columna user_id si pertenece al usuario."""
    query = select(model).where(model.id == entity_id, model.user_id == user_id)
    if options:
        query = query.options(*options)

    result = await session.execute(query)
    entity = result.scalar_one_or_none()

    if entity is None:
        raise NotFoundError(model.__name__, entity_id=entity_id, user_id=user_id)
    return entity


async def get_owned_recipient(
    session: AsyncSession,
    campaign_id: str,
    recipient_id: str,
    user_id: str
) -> CampaignRecipient:
    """Carga un destinatario verificando la propiedad a través de su campaña."""
    query = select(CampaignRecipient).join(
        Campaign, CampaignRecipient.campaign_id == Campaign.id
    ).where(
        CampaignRecipient.id == recipient_id,
        CampaignRecipient.campaign_id == campaign_id,
        Campaign.user_id == user_id
    )

    result = await session.execute(query)
    recipient = result.scalar_one_or_none()

    if recipient is None:
        raise NotFoundError("CampaignRecipient", entity_id=recipient_id, user_id=user_id)
    return recipient
