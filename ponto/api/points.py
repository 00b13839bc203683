"""
Point registration and approval API routes.
"""

import json
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Form, File, UploadFile
from sqlalchemy.orm import Session

from ponto.config import settings
from ponto.database import get_db
from ponto.exceptions import PontoError, ValidationError
from ponto.schemas.point import (
    PointType,
    PointSubmissionResult,
    PointReviewRequest,
    PointResponse,
    PointListResponse,
)
from ponto.schemas.review import ReviewStatus, ReviewResult
from ponto.services.point_service import PointService
from ponto.services.review_service import PointReviewWorkflow
from ponto.services.storage import ContentStorage, get_storage
from ponto.utils.auth import Actor, get_current_actor
from ponto.utils.validators import validate_pagination_params

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/points", tags=["points"])


@router.post("/", response_model=PointSubmissionResult, status_code=status.HTTP_201_CREATED, summary="Register a point")
async def register_point(
    metadata: str = Form(..., description="JSON: type, lat, lon, accuracy_m, timestamp_local, timestamp_utc, fingerprint"),
    photo: UploadFile = File(..., description="Selfie taken at punch time"),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
    storage: ContentStorage = Depends(get_storage)
):
    """
    Register a clock-in/out event for the authenticated user.

    - The geofence is re-validated against the company settings
    - Every point starts as `pendente`; out-of-area points are flagged for review
    - Resubmitting the same fingerprint does not create a second point
    """
    try:
        try:
            raw_metadata = json.loads(metadata)
        except json.JSONDecodeError:
            raise ValidationError("metadata is not valid JSON", "metadata")

        content = await photo.read()
        content_type = photo.content_type or "application/octet-stream"

        service = PointService(db, storage)
        return service.submit(actor, raw_metadata, content, content_type)

    except PontoError:
        raise
    except Exception as e:
        logger.error(f"Failed to register point for {actor.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to register point: {str(e)}"
        )


@router.get("/", response_model=PointListResponse, summary="List points")
async def list_points(
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1),
    user_id: Optional[str] = Query(None, description="Filter by user (reviewers only)"),
    status_filter: Optional[ReviewStatus] = Query(None, alias="status"),
    point_type: Optional[PointType] = Query(None, alias="type"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
    storage: ContentStorage = Depends(get_storage)
):
    """
    List points, newest first.

    - colaborador sees only their own points
    - gestor/admin see everyone's
    """
    skip, limit = validate_pagination_params(skip, limit, settings.MAX_PAGE_SIZE)

    service = PointService(db, storage)
    points, total = service.list_points(
        actor, skip, limit,
        user_id=user_id,
        status=status_filter,
        point_type=point_type,
        start_date=start_date,
        end_date=end_date,
    )

    return PointListResponse(
        records=[PointResponse.model_validate(p) for p in points],
        total=total,
        skip=skip,
        limit=limit
    )


@router.post("/review", response_model=ReviewResult, summary="Approve or reject a point")
async def review_point(
    review: PointReviewRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """
    Decide a pending point.

    - gestor/admin only (403 otherwise)
    - 409 when the point was already decided
    """
    point = PointReviewWorkflow(db).transition(actor, review.point_id, review.decision)
    return ReviewResult(id=point.id, status=point.status, message=f"Ponto {point.status}.")


@router.get("/{point_id}", response_model=PointResponse, summary="Get a point")
async def get_point(
    point_id: str,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
    storage: ContentStorage = Depends(get_storage)
):
    point = PointService(db, storage).get_point(actor, point_id)
    return PointResponse.model_validate(point)


@router.get("/{point_id}/photo-url", response_model=dict, summary="Public URL of a point's photo")
async def get_point_photo_url(
    point_id: str,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
    storage: ContentStorage = Depends(get_storage)
):
    url = PointService(db, storage).get_photo_url(actor, point_id)
    return {"point_id": point_id, "url": url}
