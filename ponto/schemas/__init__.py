from .profile import Role, ProfileBase, ProfileCreate, ProfileNameUpdate, ProfileRoleUpdate, ProfileResponse
from .review import ReviewStatus, ReviewDecision, ReviewResult
from .point import PointType, PointMetadata, PointSubmissionResult, PointReviewRequest, PointResponse, PointListResponse
from .absence import AbsenceType, AbsenceCreate, AbsenceReviewRequest, AbsenceResponse, AbsenceListResponse
from .device import DeviceCreate, DeviceReviewRequest, DeviceResponse, DeviceListResponse
from .audit import AuditLogResponse, AuditLogListResponse
from .settings import GeofenceCenter, CompanySettingsUpdate, CompanySettingsResponse
from .face import FaceVerifyRequest, FaceVerifyResponse

__all__ = [
    "Role", "ProfileBase", "ProfileCreate", "ProfileNameUpdate", "ProfileRoleUpdate", "ProfileResponse",
    "ReviewStatus", "ReviewDecision", "ReviewResult",
    "PointType", "PointMetadata", "PointSubmissionResult", "PointReviewRequest", "PointResponse", "PointListResponse",
    "AbsenceType", "AbsenceCreate", "AbsenceReviewRequest", "AbsenceResponse", "AbsenceListResponse",
    "DeviceCreate", "DeviceReviewRequest", "DeviceResponse", "DeviceListResponse",
    "AuditLogResponse", "AuditLogListResponse",
    "GeofenceCenter", "CompanySettingsUpdate", "CompanySettingsResponse",
    "FaceVerifyRequest", "FaceVerifyResponse",
]
