"""
Company settings API routes.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ponto.database import get_db
from ponto.schemas.settings import CompanySettingsUpdate, CompanySettingsResponse
from ponto.services.settings_service import CompanySettingsService
from ponto.utils.auth import Actor, get_current_actor, get_current_reviewer

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/", response_model=CompanySettingsResponse, summary="Get company settings")
async def get_settings(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """
    Readable by every authenticated user; the capture client uses it for its
    advisory geofence check. Until a gestor/admin saves the settings the
    defaults are returned with `configured: false` and nothing is stored.
    """
    service = CompanySettingsService(db)
    return service.to_response(service.current_or_defaults())


@router.put("/", response_model=CompanySettingsResponse, summary="Update company settings")
async def update_settings(
    update_data: CompanySettingsUpdate,
    actor: Actor = Depends(get_current_reviewer),
    db: Session = Depends(get_db)
):
    service = CompanySettingsService(db)
    return service.to_response(service.update(actor, update_data))
