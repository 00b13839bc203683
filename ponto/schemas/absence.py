from pydantic import BaseModel, model_validator
from typing import List, Optional
from datetime import date, datetime
from enum import Enum

from .review import ReviewDecision


class AbsenceType(str, Enum):
    FERIAS = "ferias"
    ATESTADO = "atestado"
    FOLGA = "folga"
    OUTRO = "outro"


class AbsenceCreate(BaseModel):
    type: AbsenceType = AbsenceType.FERIAS
    start_date: date
    end_date: date
    reason: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class AbsenceReviewRequest(BaseModel):
    absence_id: str
    decision: ReviewDecision


class AbsenceResponse(BaseModel):
    id: str
    user_id: str
    type: AbsenceType
    start_date: date
    end_date: date
    reason: Optional[str] = None
    status: str
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AbsenceListResponse(BaseModel):
    records: List[AbsenceResponse]
    total: int
