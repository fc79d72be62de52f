"""
Esquemas Pydantic de ReviewFlow.
"""

from reviewflow.schemas.review import (
    ReviewCreate,
    ReviewRespond,
    ReviewStatusUpdate,
    ReviewResponse,
    ReviewList,
    ReviewCreated,
    AutoRespondResult,
)
from reviewflow.schemas.template import TemplateCreate, TemplateUpdate, TemplateResponse, TemplateList
from reviewflow.schemas.campaign import (
    CampaignCreate,
    CampaignUpdate,
    CampaignStatusUpdate,
    RecipientIn,
    RecipientsAdd,
    RecipientResponse,
    CampaignResponse,
    CampaignDetail,
    CampaignList,
    DispatchResult,
    ConversionResult,
)
from reviewflow.schemas.automation import AutomationSettingsUpdate, AutomationSettingsResponse
from reviewflow.schemas.user import ProfileUpdate, SubscriptionUpdate, ProfileResponse

__all__ = [
    "ReviewCreate",
    "ReviewRespond",
    "ReviewStatusUpdate",
    "ReviewResponse",
    "ReviewList",
    "ReviewCreated",
    "AutoRespondResult",
    "TemplateCreate",
    "TemplateUpdate",
    "TemplateResponse",
    "TemplateList",
    "CampaignCreate",
    "CampaignUpdate",
    "CampaignStatusUpdate",
    "RecipientIn",
    "RecipientsAdd",
    "RecipientResponse",
    "CampaignResponse",
    "CampaignDetail",
    "CampaignList",
    "DispatchResult",
    "ConversionResult",
    "AutomationSettingsUpdate",
    "AutomationSettingsResponse",
    "ProfileUpdate",
    "SubscriptionUpdate",
    "ProfileResponse",
]
