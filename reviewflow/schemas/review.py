"""
Esquemas para reseñas.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from reviewflow.models.enums import ReviewStatus


class ReviewCreate(BaseModel):
    """Para ingresar una reseña (manual o desde una fuente externa)."""
    author_name: str = Field(..., min_length=1, max_length=255)
    rating: int = Field(..., ge=1, le=5)
    author_email: Optional[str] = None
    review_text: Optional[str] = None
    review_date: Optional[datetime] = None
    source: Optional[str] = Field(None, max_length=50)
    external_id: Optional[str] = Field(None, max_length=255)

    class Config:
        json_schema_extra = {
            "example": {
                "author_name": "Emily Chen",
                "rating": 5,
                "review_text": "Absolutely fantastic!",
                "source": "google"
            }
        }


class ReviewRespond(BaseModel):
    response_text: str = Field(..., min_length=1)


class ReviewStatusUpdate(BaseModel):
    status: ReviewStatus


class ReviewResponse(BaseModel):
    """Respuesta con datos de la reseña."""
    id: str
    external_id: Optional[str]
    author_name: str
    author_email: Optional[str]
    rating: int
    review_text: Optional[str]
    review_date: datetime
    responded: bool
    response_text: Optional[str]
    response_date: Optional[datetime]
    source: str
    status: ReviewStatus
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class ReviewList(BaseModel):
    count: int
    reviews: List[ReviewResponse]


class ReviewCreated(BaseModel):
    review: ReviewResponse
    negative_alert: bool = Field(False, description="La calificación está bajo el umbral de alerta")


class AutoRespondResult(BaseModel):
    review_id: str
    response_text: str
