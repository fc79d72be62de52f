"""
Esquemas para la configuración de automatización.
"""

from pydantic import BaseModel, Field
from typing import Optional


class AutomationSettingsUpdate(BaseModel):
    """Los campos omitidos conservan su valor."""
    auto_response_enabled: Optional[bool] = None
    ai_response_enabled: Optional[bool] = None
    review_request_enabled: Optional[bool] = None
    negative_alert_enabled: Optional[bool] = None
    negative_threshold: Optional[int] = Field(None, ge=1, le=5)


class AutomationSettingsResponse(BaseModel):
    auto_response_enabled: bool
    ai_response_enabled: bool
    review_request_enabled: bool
    negative_alert_enabled: bool
    negative_threshold: int

    class Config:
        from_attributes = True
