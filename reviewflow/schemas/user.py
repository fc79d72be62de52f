"""
Esquemas para el perfil de usuario.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from reviewflow.models.enums import SubscriptionPlan


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    company_name: Optional[str] = None
    google_business_id: Optional[str] = None


class SubscriptionUpdate(BaseModel):
    plan: SubscriptionPlan


class ProfileResponse(BaseModel):
    id: str
    email: str
    name: str
    company_name: Optional[str]
    google_business_id: Optional[str]
    subscription_plan: SubscriptionPlan
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
