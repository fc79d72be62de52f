"""
Modelo User - Dueños de negocio que usan ReviewFlow.

Cada usuario tiene sus reseñas, plantillas, campañas y configuración
de automatización aisladas (multi-tenant).
"""

from sqlalchemy import Column, String, DateTime, Boolean, Integer, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from reviewflow.core.database import Base
from reviewflow.models.enums import SubscriptionPlan, enum_column_type


class User(Base):
    """
    Representa un negocio cliente del sistema.
    """
    __tablename__ = "users"

    # === Identificación ===
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=False)

    # === Autenticación ===
    api_key = Column(String(100), unique=True, nullable=False, comment="Credencial bearer")

    # === Información del negocio ===
    company_name = Column(String(255))
    google_business_id = Column(String(255))
    subscription_plan = Column(enum_column_type(SubscriptionPlan), default=SubscriptionPlan.FREE, nullable=False)

    # === Timestamps ===
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # === Relaciones ===
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    templates = relationship("ResponseTemplate", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    campaigns = relationship("Campaign", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    automation_settings = relationship(
        "AutomationSettings", back_populates="user", uselist=False, cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User {self.email} ({self.id[:8]})>"


class AutomationSettings(Base):
    """
    Interruptores de automatización por usuario (1:1).
    Se crea la primera vez que se consulta.
    """
    __tablename__ = "automation_settings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    auto_response_enabled = Column(Boolean, default=True, nullable=False)
    ai_response_enabled = Column(Boolean, default=True, nullable=False)
    review_request_enabled = Column(Boolean, default=True, nullable=False)
    negative_alert_enabled = Column(Boolean, default=True, nullable=False)
    # Calificaciones <= umbral disparan la alerta (la alerta es externa)
    negative_threshold = Column(Integer, default=3, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="automation_settings")

    def __repr__(self):
        return f"<AutomationSettings for {self.user_id[:8]}>"
