"""
Esquemas para campañas y destinatarios.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from reviewflow.models.enums import CampaignStatus, RecipientStatus


class CampaignCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=50, description="Canal: email, sms, whatsapp")
    message_template: str = Field(..., min_length=1, description="Admite {customer_name}")
    send_delay_days: int = Field(0, ge=0)


class CampaignUpdate(BaseModel):
    """Los contadores no son editables."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=50)
    send_delay_days: Optional[int] = Field(None, ge=0)
    message_template: Optional[str] = Field(None, min_length=1)
    status: Optional[CampaignStatus] = None


class CampaignStatusUpdate(BaseModel):
    status: CampaignStatus


class RecipientIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None


class RecipientsAdd(BaseModel):
    recipients: List[RecipientIn]


class RecipientResponse(BaseModel):
    id: str
    customer_name: str
    customer_email: Optional[str]
    customer_phone: Optional[str]
    status: RecipientStatus
    sent_at: Optional[datetime]
    review_submitted: bool

    class Config:
        from_attributes = True


class CampaignResponse(BaseModel):
    id: str
    name: str
    type: str
    status: CampaignStatus
    send_delay_days: int
    message_template: str
    total_sent: int
    total_collected: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class CampaignDetail(CampaignResponse):
    recipients: List[RecipientResponse] = []


class CampaignList(BaseModel):
    count: int
    campaigns: List[CampaignResponse]


class DispatchResult(BaseModel):
    campaign_id: str
    dispatched: int
    total_sent: int


class ConversionResult(BaseModel):
    recipient_id: str
    recorded: bool
