"""
Device authorization API routes.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from ponto.database import get_db
from ponto.schemas.device import DeviceCreate, DeviceReviewRequest, DeviceResponse, DeviceListResponse
from ponto.schemas.review import ReviewResult
from ponto.services.review_service import DeviceWorkflow
from ponto.utils.auth import Actor, get_current_actor

router = APIRouter(prefix="/devices", tags=["devices"])


@router.post("/", response_model=DeviceResponse, status_code=status.HTTP_201_CREATED, summary="Register a device")
async def register_device(
    data: DeviceCreate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """New devices start inactive until a gestor/admin authorizes them"""
    device = DeviceWorkflow(db).register(actor, data)
    return DeviceResponse.model_validate(device)


@router.get("/", response_model=DeviceListResponse, summary="List devices")
async def list_devices(
    is_active: Optional[bool] = Query(None),
    user_id: Optional[str] = Query(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    items, total = DeviceWorkflow(db).list_items(actor, state=is_active, user_id=user_id)
    return DeviceListResponse(records=[DeviceResponse.model_validate(d) for d in items], total=total)


@router.post("/review", response_model=ReviewResult, summary="Authorize or revoke a device")
async def review_device(
    review: DeviceReviewRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """`aprovado` activates an inactive device, `rejeitado` deactivates an active one"""
    device = DeviceWorkflow(db).transition(actor, review.active_device_id, review.decision)
    state = "ativo" if device.is_active else "inativo"
    return ReviewResult(id=device.id, status=state, message=f"Dispositivo {state}.")
