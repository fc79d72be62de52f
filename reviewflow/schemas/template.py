"""
Esquemas para plantillas de respuesta.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from reviewflow.models.enums import RatingRange


class TemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    template_text: str = Field(..., min_length=1)
    rating_range: Optional[RatingRange] = None
    is_default: bool = False


class TemplateUpdate(BaseModel):
    """Actualización parcial: los campos omitidos no cambian."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    template_text: Optional[str] = Field(None, min_length=1)
    rating_range: Optional[RatingRange] = None
    is_default: Optional[bool] = None


class TemplateResponse(BaseModel):
    id: str
    name: str
    template_text: str
    rating_range: Optional[RatingRange]
    is_default: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class TemplateList(BaseModel):
    count: int
    templates: List[TemplateResponse]
