from pydantic import BaseModel, Field


class FaceVerifyRequest(BaseModel):
    image_hash: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class FaceVerifyResponse(BaseModel):
    success: bool = True
    match: bool
    confidence: float
    threshold: float
