"""
Modelos de reseñas y plantillas de respuesta.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer, Boolean, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid

from reviewflow.core.database import Base
from reviewflow.models.enums import ReviewStatus, RatingRange, enum_column_type


class Review(Base):
    """
    Una reseña de un cliente.

    Ciclo de vida: pending -> responded | archived, responded -> archived.
    """
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        UniqueConstraint("user_id", "external_id", name="uq_reviews_user_external_id"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    external_id = Column(String(255), nullable=True)  # id en Google, Yelp, etc.

    author_name = Column(String(255), nullable=False)
    author_email = Column(String(255))
    rating = Column(Integer, nullable=False)
    review_text = Column(Text)
    review_date = Column(DateTime, nullable=False, default=datetime.utcnow)

    responded = Column(Boolean, default=False, nullable=False)
    response_text = Column(Text)
    response_date = Column(DateTime)

    source = Column(String(50), default="google", nullable=False)
    status = Column(enum_column_type(ReviewStatus), default=ReviewStatus.PENDING, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="reviews")

    def __repr__(self):
        return f"<Review {self.rating}* by {self.author_name} [{self.status}]>"


class ResponseTemplate(Base):
    """
    Plantilla de respuesta automática por rango de calificación.
    Como máximo una plantilla por defecto por (usuario, rango).
    """
    __tablename__ = "response_templates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    template_text = Column(Text, nullable=False)
    rating_range = Column(enum_column_type(RatingRange), nullable=True)
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="templates")

    def __repr__(self):
        return f"<ResponseTemplate {self.name} ({self.rating_range})>"
