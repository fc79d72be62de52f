"""
Modelo de Campañas y Destinatarios.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer, Boolean
from sqlalchemy.orm import relationship
import uuid

from reviewflow.core.database import Base
from reviewflow.models.enums import CampaignStatus, RecipientStatus, enum_column_type


class Campaign(Base):
    """
    Campaña de solicitud de reseñas.

    total_sent y total_collected solo los modifica el despachador.
    """
    __tablename__ = "campaigns"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False)  # email, sms, whatsapp
    status = Column(enum_column_type(CampaignStatus), default=CampaignStatus.ACTIVE, nullable=False)
    send_delay_days = Column(Integer, default=0, nullable=False)
    message_template = Column(Text, nullable=False)

    total_sent = Column(Integer, default=0, nullable=False)
    total_collected = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="campaigns")
    recipients = relationship(
        "CampaignRecipient",
        back_populates="campaign",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CampaignRecipient.created_at",
    )

    def __repr__(self):
        return f"<Campaign {self.name} [{self.status}]>"


class CampaignRecipient(Base):
    """
    Un destinatario dentro de una campaña.
    Solo avanza: pending -> sent -> review_submitted.
    """
    __tablename__ = "campaign_recipients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)
    status = Column(enum_column_type(RecipientStatus), default=RecipientStatus.PENDING, nullable=False)
    sent_at = Column(DateTime, nullable=True)
    review_submitted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    campaign = relationship("Campaign", back_populates="recipients")

    @property
    def is_converted(self) -> bool:
        return bool(self.review_submitted)

    def __repr__(self):
        return f"<CampaignRecipient {self.customer_name} [{self.status}]>"
