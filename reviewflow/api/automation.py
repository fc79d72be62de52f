"""
Endpoints de automatización: configuración y plantillas de respuesta.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from reviewflow.core.database import get_db
from reviewflow.core.security import UserContext, get_current_user
from reviewflow.schemas.automation import AutomationSettingsUpdate, AutomationSettingsResponse
from reviewflow.schemas.template import TemplateCreate, TemplateUpdate, TemplateResponse, TemplateList
from reviewflow.services import automation_service, template_service

router = APIRouter()


@router.get("/settings", response_model=AutomationSettingsResponse)
async def get_automation_settings(
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await automation_service.get_settings(db, user.user_id)


@router.put("/settings", response_model=AutomationSettingsResponse)
async def update_automation_settings(
    payload: AutomationSettingsUpdate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await automation_service.update_settings(db, user.user_id, **payload.model_dump())


@router.get("/templates", response_model=TemplateList)
async def list_templates(
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    templates = await template_service.list_templates(db, user.user_id)
    return {"count": len(templates), "templates": templates}


@router.post("/templates", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    payload: TemplateCreate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await template_service.create_template(db, user.user_id, **payload.model_dump())


@router.put("/templates/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: str,
    payload: TemplateUpdate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await template_service.update_template(db, user.user_id, template_id, **payload.model_dump())


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await template_service.delete_template(db, user.user_id, template_id)
