"""
Audit log read API.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ponto.config import settings
from ponto.database import get_db
from ponto.schemas.audit import AuditLogResponse, AuditLogListResponse
from ponto.services.audit_service import AuditLogWriter
from ponto.utils.auth import Actor, get_current_actor
from ponto.utils.validators import validate_pagination_params

router = APIRouter(prefix="/audit-logs", tags=["audit"])


@router.get("/", response_model=AuditLogListResponse, summary="List audit log entries")
async def list_audit_logs(
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1),
    user_id: Optional[str] = Query(None, description="Filter by actor (reviewers only)"),
    action: Optional[str] = Query(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """
    Reverse-chronological audit entries.

    - colaborador sees only their own entries
    - gestor/admin see all
    """
    skip, limit = validate_pagination_params(skip, limit, settings.MAX_PAGE_SIZE)
    entries, total = AuditLogWriter(db).list_entries(actor, skip, limit, user_id=user_id, action=action)

    return AuditLogListResponse(
        records=[AuditLogResponse.model_validate(e) for e in entries],
        total=total,
        skip=skip,
        limit=limit
    )
