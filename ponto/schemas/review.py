from pydantic import BaseModel
from enum import Enum


class ReviewStatus(str, Enum):
    PENDENTE = "pendente"
    APROVADO = "aprovado"
    REJEITADO = "rejeitado"


class ReviewDecision(str, Enum):
    APROVADO = "aprovado"
    REJEITADO = "rejeitado"


class ReviewResult(BaseModel):
    id: str
    status: str
    success: bool = True
    message: str = ""
