"""
Absence request API routes.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from ponto.database import get_db
from ponto.schemas.absence import AbsenceCreate, AbsenceReviewRequest, AbsenceResponse, AbsenceListResponse
from ponto.schemas.review import ReviewStatus, ReviewResult
from ponto.services.review_service import AbsenceWorkflow
from ponto.utils.auth import Actor, get_current_actor

router = APIRouter(prefix="/absences", tags=["absences"])


@router.post("/", response_model=AbsenceResponse, status_code=status.HTTP_201_CREATED, summary="Request an absence")
async def request_absence(
    data: AbsenceCreate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    absence = AbsenceWorkflow(db).request(actor, data)
    return AbsenceResponse.model_validate(absence)


@router.get("/", response_model=AbsenceListResponse, summary="List absences")
async def list_absences(
    status_filter: Optional[ReviewStatus] = Query(None, alias="status"),
    user_id: Optional[str] = Query(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """colaborador sees own requests; gestor/admin see all"""
    state = status_filter.value if status_filter else None
    items, total = AbsenceWorkflow(db).list_items(actor, state=state, user_id=user_id)
    return AbsenceListResponse(records=[AbsenceResponse.model_validate(a) for a in items], total=total)


@router.post("/review", response_model=ReviewResult, summary="Approve or reject an absence")
async def review_absence(
    review: AbsenceReviewRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    absence = AbsenceWorkflow(db).transition(actor, review.absence_id, review.decision)
    return ReviewResult(id=absence.id, status=absence.status, message=f"Ausência {absence.status}.")
