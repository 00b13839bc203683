"""
Point submission service: the single place that creates Point records and
decides their initial status.
"""

import logging
import uuid
from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import desc, func

from ponto.config import settings
from ponto.exceptions import ValidationError, NotFound, Forbidden, StorageError
from ponto.models.point import Point
from ponto.schemas.point import PointType, PointMetadata, PointSubmissionResult
from ponto.schemas.review import ReviewStatus
from ponto.services.audit_service import AuditLogWriter, AuditAction
from ponto.services.geofence import Coordinates, distance_meters
from ponto.services.settings_service import CompanySettingsService
from ponto.services.storage import ContentStorage
from ponto.utils.auth import Actor
from ponto.utils.datetime_utils import utc_now
from ponto.utils import validators

logger = logging.getLogger(__name__)

REQUIRED_METADATA_FIELDS = ["type", "lat", "lon", "accuracy_m", "timestamp_local", "timestamp_utc", "fingerprint"]

PHOTO_EXTENSIONS = {
    "image/jpeg": "jpeg",
    "image/png": "png",
    "image/webp": "webp",
}

MESSAGE_INSIDE = "Ponto registrado dentro da área permitida. Status pendente de validação facial."
MESSAGE_OUTSIDE = "Ponto registrado, mas fora da área de geofence. Requer revisão."


def parse_metadata(raw: dict) -> PointMetadata:
    """
    Validate the metadata part of a submission.

    Raises:
        ValidationError: On missing fields, invalid type, coordinates or fingerprint
    """
    if not isinstance(raw, dict):
        raise ValidationError("metadata must be a JSON object", "metadata")

    missing = validators.validate_required_fields(raw, REQUIRED_METADATA_FIELDS)
    if missing:
        raise ValidationError(f"Missing required metadata fields: {', '.join(missing)}")

    point_type = validators.validate_choice(raw["type"], [t.value for t in PointType], "type")

    return PointMetadata(
        type=PointType(point_type),
        lat=validators.validate_latitude(raw["lat"]),
        lon=validators.validate_longitude(raw["lon"]),
        accuracy_m=validators.validate_accuracy(raw["accuracy_m"]),
        timestamp_local=validators.validate_client_timestamp(raw["timestamp_local"], "timestamp_local"),
        timestamp_utc=validators.validate_client_timestamp(raw["timestamp_utc"], "timestamp_utc"),
        fingerprint=validators.validate_fingerprint(raw["fingerprint"]),
    )


class PointService:
    """Point submission and point queries"""

    def __init__(self, db: Session, storage: ContentStorage):
        self.db = db
        self.storage = storage
        self.audit = AuditLogWriter(db)
        self.company_settings = CompanySettingsService(db)

    def submit(self, actor: Actor, raw_metadata: dict, photo: bytes, photo_content_type: str) -> PointSubmissionResult:
        """
        Register a point for `actor`.

        The geofence is re-derived here from the stored company settings; any
        client-side verdict is ignored. Every point starts as `pendente`.
        Resubmitting the same fingerprint returns the original result without
        creating a second row.

        Args:
            actor: Authenticated actor (resolved from the session credential)
            raw_metadata: Decoded `metadata` JSON object
            photo: Photo bytes
            photo_content_type: MIME type of the photo

        Returns:
            The submission result

        Raises:
            ValidationError: Malformed metadata or photo
            ConfigurationError: Company settings missing or malformed
            StorageError: Photo upload failed
        """
        metadata = parse_metadata(raw_metadata)
        validators.validate_photo(photo, photo_content_type, settings.ALLOWED_PHOTO_TYPES, settings.MAX_PHOTO_SIZE)

        center, radius = self.company_settings.get_geofence()

        existing = self._find_by_fingerprint(actor.id, metadata.fingerprint)
        if existing is not None:
            logger.info(f"Duplicate submission {metadata.fingerprint} from {actor.id}, returning point {existing.id}")
            return self._build_result(existing, radius)

        distance = distance_meters(Coordinates(metadata.lat, metadata.lon), center)
        within = distance <= radius

        key = self._photo_key(actor.id, metadata.fingerprint, photo_content_type)
        photo_path = self.storage.put(key, photo, photo_content_type)

        try:
            point = Point(
                user_id=actor.id,
                type=metadata.type.value,
                timestamp=utc_now(),
                client_timestamp_local=metadata.timestamp_local,
                client_timestamp_utc=metadata.timestamp_utc,
                latitude=metadata.lat,
                longitude=metadata.lon,
                accuracy_meters=metadata.accuracy_m,
                photo_reference=photo_path,
                fingerprint=metadata.fingerprint,
                distance_meters=distance,
                within_geofence=within,
                status=ReviewStatus.PENDENTE.value,
            )
            self.db.add(point)
            self.db.flush()

            self.audit.record(actor.id, AuditAction.PONTO_REGISTRADO, {
                "point_id": point.id,
                "type": point.type,
                "distance_m": round(distance, 2),
                "geofence_radius": radius,
                "within_geofence": within,
            })
            self.db.commit()

        except IntegrityError:
            # A concurrent request with the same fingerprint committed first
            self._rollback_and_cleanup(photo_path)
            winner = self._find_by_fingerprint(actor.id, metadata.fingerprint)
            if winner is None:
                raise
            return self._build_result(winner, radius)

        except Exception:
            self._rollback_and_cleanup(photo_path)
            raise

        self.db.refresh(point)
        logger.info(
            f"Point {point.id} ({point.type}) registered for {actor.id}: "
            f"{distance:.2f}m from center, radius {radius}m"
        )
        return self._build_result(point, radius)

    def list_points(
        self,
        actor: Actor,
        skip: int = 0,
        limit: int = 50,
        user_id: Optional[str] = None,
        status: Optional[ReviewStatus] = None,
        point_type: Optional[PointType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> Tuple[List[Point], int]:
        """
        Points visible to `actor`, newest first.

        - colaborador: own points only
        - gestor/admin: everyone's, optionally filtered by user
        """
        query = self.db.query(Point)

        if not actor.is_reviewer:
            if user_id and user_id != actor.id:
                raise Forbidden("Permission denied to view other users' points")
            query = query.filter(Point.user_id == actor.id)
        elif user_id:
            query = query.filter(Point.user_id == user_id)

        if status:
            query = query.filter(Point.status == status.value)

        if point_type:
            query = query.filter(Point.type == point_type.value)

        if start_date:
            query = query.filter(func.date(Point.timestamp) >= start_date)

        if end_date:
            query = query.filter(func.date(Point.timestamp) <= end_date)

        total = query.count()
        points = query.order_by(desc(Point.timestamp)).offset(skip).limit(limit).all()

        return points, total

    def get_point(self, actor: Actor, point_id: str) -> Point:
        point = self.db.query(Point).filter(Point.id == point_id).first()
        if point is None:
            raise NotFound("Point not found")

        if not actor.is_reviewer and point.user_id != actor.id:
            raise Forbidden("Permission denied to view this point")

        return point

    def get_photo_url(self, actor: Actor, point_id: str) -> str:
        point = self.get_point(actor, point_id)
        return self.storage.get_public_url(point.photo_reference)

    def _find_by_fingerprint(self, user_id: str, fingerprint: str) -> Optional[Point]:
        return self.db.query(Point).filter(
            Point.user_id == user_id,
            Point.fingerprint == fingerprint
        ).first()

    @staticmethod
    def _photo_key(user_id: str, fingerprint: str, content_type: str) -> str:
        extension = PHOTO_EXTENSIONS.get(content_type, "bin")
        return f"{user_id}/{fingerprint}-{uuid.uuid4().hex[:12]}.{extension}"

    def _rollback_and_cleanup(self, photo_path: str) -> None:
        """Undo a failed insert and remove the photo uploaded for it"""
        self.db.rollback()
        try:
            self.storage.delete(photo_path)
        except StorageError as e:
            logger.error(f"Failed to clean up orphaned photo {photo_path}: {e}")

    @staticmethod
    def _build_result(point: Point, radius: int) -> PointSubmissionResult:
        return PointSubmissionResult(
            success=True,
            message=MESSAGE_INSIDE if point.within_geofence else MESSAGE_OUTSIDE,
            status=point.status,
            distance_m=f"{point.distance_meters:.2f}",
            geofence_radius=radius,
            point_id=point.id,
        )
