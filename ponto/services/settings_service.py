"""
Company settings singleton: geofence and auxiliary policy numbers.
"""

import logging
import math
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from ponto.config import settings
from ponto.exceptions import ConfigurationError, Forbidden
from ponto.models.company_settings import CompanySettings, SINGLETON_ID
from ponto.schemas.settings import CompanySettingsUpdate, CompanySettingsResponse, GeofenceCenter
from ponto.services.audit_service import AuditLogWriter, AuditAction
from ponto.services.geofence import Coordinates
from ponto.utils.auth import Actor

logger = logging.getLogger(__name__)


class CompanySettingsService:
    """Read and update the `company_settings` row with id 'default'"""

    def __init__(self, db: Session):
        self.db = db
        self.audit = AuditLogWriter(db)

    def get(self) -> CompanySettings:
        """
        Authoritative read used by point submission.

        Raises:
            ConfigurationError: If the row is missing or its geofence is unusable
        """
        row = self.db.query(CompanySettings).filter(CompanySettings.id == SINGLETON_ID).first()
        if row is None:
            raise ConfigurationError("Company settings are not configured")

        self._check_geofence(row)
        return row

    def get_geofence(self) -> tuple:
        """(center, radius) of the configured geofence"""
        row = self.get()
        return Coordinates(row.geofence_center_lat, row.geofence_center_lng), row.geofence_radius

    def current_or_defaults(self) -> CompanySettings:
        """
        The stored singleton, or an unsaved row holding the configured defaults.

        Reading never creates the row; only `update` does.
        """
        row = self.db.query(CompanySettings).filter(CompanySettings.id == SINGLETON_ID).first()
        if row is not None:
            return row
        return self._defaults()

    def get_or_create(self) -> CompanySettings:
        """Return the singleton, creating it with defaults when absent"""
        row = self.db.query(CompanySettings).filter(CompanySettings.id == SINGLETON_ID).first()
        if row is not None:
            return row

        row = self._defaults()
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)

        logger.info("Created default company settings")
        return row

    def update(self, actor: Actor, update_data: CompanySettingsUpdate) -> CompanySettings:
        """
        Update the singleton (last writer wins).

        Raises:
            Forbidden: If the actor is not gestor/admin
        """
        if not actor.is_reviewer:
            raise Forbidden("Forbidden: Only managers and admins can change settings.")

        row = self.get_or_create()
        changes = {}

        if update_data.geofence_center is not None:
            row.geofence_center_lat = update_data.geofence_center.lat
            row.geofence_center_lng = update_data.geofence_center.lng
            changes["geofence_center"] = update_data.geofence_center.model_dump()

        for field in ("geofence_radius", "tolerance_minutes", "photo_retention_days"):
            value = getattr(update_data, field)
            if value is not None:
                setattr(row, field, value)
                changes[field] = value

        self.audit.record(actor.id, AuditAction.CONFIGURACOES_ATUALIZADAS, changes)
        self.db.commit()
        self.db.refresh(row)

        logger.info(f"Company settings updated by {actor.id}: {changes}")
        return row

    @staticmethod
    def _defaults() -> CompanySettings:
        return CompanySettings(
            id=SINGLETON_ID,
            geofence_center_lat=settings.DEFAULT_GEOFENCE_LAT,
            geofence_center_lng=settings.DEFAULT_GEOFENCE_LNG,
            geofence_radius=settings.DEFAULT_GEOFENCE_RADIUS,
            tolerance_minutes=settings.DEFAULT_TOLERANCE_MINUTES,
            photo_retention_days=settings.DEFAULT_PHOTO_RETENTION_DAYS,
        )

    @staticmethod
    def to_response(row: CompanySettings) -> CompanySettingsResponse:
        return CompanySettingsResponse(
            configured=inspect(row).persistent,
            geofence_center=GeofenceCenter(lat=row.geofence_center_lat, lng=row.geofence_center_lng),
            geofence_radius=row.geofence_radius,
            tolerance_minutes=row.tolerance_minutes,
            photo_retention_days=row.photo_retention_days,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _check_geofence(row: CompanySettings) -> None:
        values = (row.geofence_center_lat, row.geofence_center_lng, row.geofence_radius)
        if any(v is None for v in values):
            raise ConfigurationError("Company settings geofence is incomplete")

        lat, lng, radius = values
        if not (math.isfinite(lat) and math.isfinite(lng)) or abs(lat) > 90 or abs(lng) > 180:
            raise ConfigurationError("Company settings geofence center is invalid")

        if radius <= 0:
            raise ConfigurationError("Company settings geofence radius must be positive")
