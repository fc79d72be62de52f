"""
Modelos de base de datos.
"""

from reviewflow.models.enums import (
    ReviewStatus,
    CampaignStatus,
    RecipientStatus,
    RatingRange,
    SubscriptionPlan,
)
from reviewflow.models.user import User, AutomationSettings
from reviewflow.models.review import Review, ResponseTemplate
from reviewflow.models.campaign import Campaign, CampaignRecipient

__all__ = [
    "ReviewStatus",
    "CampaignStatus",
    "RecipientStatus",
    "RatingRange",
    "SubscriptionPlan",
    "User",
    "AutomationSettings",
    "Review",
    "ResponseTemplate",
    "Campaign",
    "CampaignRecipient",
]
