"""
Face verification API route (stub scorer).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ponto.database import get_db
from ponto.schemas.face import FaceVerifyRequest, FaceVerifyResponse
from ponto.services.face_service import FaceVerifier
from ponto.utils.auth import Actor, get_current_actor

router = APIRouter(prefix="/face", tags=["face"])


def get_face_verifier(db: Session = Depends(get_db)) -> FaceVerifier:
    return FaceVerifier(db)


@router.post("/verify", response_model=FaceVerifyResponse, summary="Verify a captured face")
async def verify_face(
    request: FaceVerifyRequest,
    actor: Actor = Depends(get_current_actor),
    verifier: FaceVerifier = Depends(get_face_verifier)
):
    """Returns a confidence score against the threshold; does not change any point"""
    return verifier.verify(actor, request.user_id, request.image_hash)
