"""
Enumeraciones cerradas para los campos de estado.

Cualquier valor fuera de estos conjuntos se rechaza al construir la entidad
o al validar el request.
"""

import enum

from sqlalchemy import Enum


class ReviewStatus(str, enum.Enum):
    PENDING = "pending"
    RESPONDED = "responded"
    ARCHIVED = "archived"


class CampaignStatus(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class RecipientStatus(str, enum.Enum):
    # "converted" se deriva de review_submitted
    PENDING = "pending"
    SENT = "sent"


class RatingRange(str, enum.Enum):
    LOW = "1-3"
    HIGH = "4-5"


class SubscriptionPlan(str, enum.Enum):
    FREE = "free"
    BASIC = "basic"
    PRO = "pro"
    ENTERPRISE = "enterprise"


def enum_column_type(enum_class):
    """Tipo SQLAlchemy que guarda el valor (no el nombre) del enum."""
    return Enum(
        enum_class,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
