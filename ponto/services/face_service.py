"""
Face verification stub.

Produces a confidence score for a captured image and records the attempt.
The result is an auxiliary signal only; it never changes a point's status.
"""

import logging
import random
from typing import Callable, Optional
from sqlalchemy.orm import Session

from ponto.config import settings
from ponto.schemas.face import FaceVerifyResponse
from ponto.services.audit_service import AuditLogWriter, AuditAction
from ponto.utils.auth import Actor

logger = logging.getLogger(__name__)


def random_scorer(rng: random.Random = None) -> Callable[[str, str], float]:
    """Placeholder scorer: 0.95 nine times out of ten, otherwise 0.70"""
    rng = rng or random.Random()

    def score(image_hash: str, user_id: str) -> float:
        return 0.95 if rng.random() > 0.1 else 0.70

    return score


class FaceVerifier:
    def __init__(self, db: Session, scorer: Optional[Callable[[str, str], float]] = None, threshold: float = None):
        self.audit = AuditLogWriter(db)
        self.scorer = scorer or random_scorer()
        self.threshold = settings.FACE_MATCH_THRESHOLD if threshold is None else threshold

    def verify(self, actor: Actor, target_user_id: str, image_hash: str) -> FaceVerifyResponse:
        confidence = round(float(self.scorer(image_hash, target_user_id)), 2)
        match = confidence >= self.threshold

        self.audit.record_best_effort(actor.id, AuditAction.FACE_VERIFICATION_ATTEMPT, {
            "target_user_id": target_user_id,
            "match": match,
            "confidence": confidence,
        })

        logger.info(f"Face verification for {target_user_id} by {actor.id}: confidence={confidence} match={match}")
        return FaceVerifyResponse(success=True, match=match, confidence=confidence, threshold=self.threshold)
