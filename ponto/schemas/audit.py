from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import datetime


class AuditLogResponse(BaseModel):
    id: int
    user_id: str
    action: str
    timestamp: datetime
    details: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class AuditLogListResponse(BaseModel):
    records: List[AuditLogResponse]
    total: int
    skip: int
    limit: int
