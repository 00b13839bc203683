"""
Location/capture client.

Wraps the device's geolocation and camera into a point intent, performs the
advisory geofence check and submits the intent to the registration endpoint.
Device APIs are external; they are plugged in through `LocationProvider` and
`PhotoSource`.
"""

import asyncio
import hashlib
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar
import httpx

from ponto.config import settings
from ponto.exceptions import (
    PontoError, Unauthorized, Forbidden, NotFound, ValidationError,
    LocationUnavailable, InvalidStateTransition,
)
from ponto.schemas.point import PointType, PointSubmissionResult
from ponto.schemas.settings import CompanySettingsResponse
from ponto.services.geofence import Coordinates, distance_meters, is_within_geofence
from ponto.utils.datetime_utils import utc_now, ensure_utc, to_company_timezone

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_ERRORS = {
    400: ValidationError,
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
    409: InvalidStateTransition,
}

OUTSIDE_AREA_WARNING = "Você está fora da área permitida. O ponto ficará pendente de aprovação."


@dataclass(frozen=True)
class Position:
    latitude: float
    longitude: float
    accuracy: float
    fixed_at: datetime


class LocationProvider:
    """Device geolocation. Raise LocationUnavailable on permission denial."""

    async def current_position(self) -> Position:
        raise NotImplementedError


@dataclass(frozen=True)
class Photo:
    content: bytes
    content_type: str = "image/jpeg"
    filename: str = "selfie.jpeg"


class PhotoSource:
    """Device camera"""

    async def capture(self) -> Optional[Photo]:
        raise NotImplementedError


@dataclass(frozen=True)
class PointIntent:
    type: PointType
    latitude: float
    longitude: float
    accuracy: float
    photo: Photo
    client_timestamp_local: str
    client_timestamp_utc: str
    fingerprint: str

    def metadata(self) -> dict:
        return {
            "type": self.type.value,
            "lat": self.latitude,
            "lon": self.longitude,
            "accuracy_m": self.accuracy,
            "timestamp_local": self.client_timestamp_local,
            "timestamp_utc": self.client_timestamp_utc,
            "fingerprint": self.fingerprint,
        }


@dataclass(frozen=True)
class GeofenceAdvice:
    distance_m: float
    within: bool
    message: Optional[str]


async def retry_bounded(
    func: Callable[[], Awaitable[T]],
    attempts: int,
    delay: float,
    retry_on: Tuple[Type[BaseException], ...] = (httpx.TransportError,)
) -> T:
    """
    Await `func()` up to `attempts` times, sleeping `delay` seconds between
    attempts, retrying only on `retry_on` exceptions. The last error is
    re-raised once attempts are exhausted.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    for attempt in range(1, attempts + 1):
        try:
            return await func()
        except retry_on as e:
            if attempt == attempts:
                raise
            logger.warning(f"Attempt {attempt}/{attempts} failed: {e}; retrying in {delay}s")
            await asyncio.sleep(delay)


def compute_fingerprint(photo: bytes, point_type: PointType, timestamp_utc: str) -> str:
    """Idempotency token for one submission"""
    digest = hashlib.sha256()
    digest.update(photo)
    digest.update(point_type.value.encode())
    digest.update(timestamp_utc.encode())
    return digest.hexdigest()


class CaptureClient:
    """Builds point intents on the device and submits them"""

    def __init__(
        self,
        base_url: str,
        token: str,
        location_provider: LocationProvider,
        photo_source: PhotoSource,
        http_client: Optional[httpx.AsyncClient] = None,
        location_timeout: float = None,
        max_position_age: float = None,
        retry_attempts: int = None,
        retry_delay: float = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.location_provider = location_provider
        self.photo_source = photo_source
        self.http = http_client or httpx.AsyncClient()
        self.location_timeout = settings.LOCATION_TIMEOUT_SECONDS if location_timeout is None else location_timeout
        self.max_position_age = timedelta(
            seconds=settings.MAX_POSITION_AGE_SECONDS if max_position_age is None else max_position_age
        )
        self.retry_attempts = settings.CLIENT_RETRY_ATTEMPTS if retry_attempts is None else retry_attempts
        self.retry_delay = settings.CLIENT_RETRY_DELAY_SECONDS if retry_delay is None else retry_delay
        self.clock = clock
        self._last_position: Optional[Position] = None

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}

    async def acquire_location(self) -> Position:
        """
        Current position, reusing the last fix while it is fresh enough.

        Raises:
            LocationUnavailable: On timeout, permission denial, provider failure
                or a fix older than the maximum position age
        """
        last = self._last_position
        if last is not None and self.clock() - ensure_utc(last.fixed_at) <= self.max_position_age:
            return last

        try:
            position = await asyncio.wait_for(
                self.location_provider.current_position(),
                timeout=self.location_timeout
            )
        except asyncio.TimeoutError:
            raise LocationUnavailable(f"Location request timed out after {self.location_timeout}s")
        except LocationUnavailable:
            raise
        except Exception as e:
            raise LocationUnavailable(f"Location unavailable: {e}")

        if position is None:
            raise LocationUnavailable("Location provider returned no position")

        age = self.clock() - ensure_utc(position.fixed_at)
        if age > self.max_position_age:
            raise LocationUnavailable(
                f"Location fix is {age.total_seconds():.0f}s old "
                f"(maximum {self.max_position_age.total_seconds():.0f}s)"
            )

        self._last_position = position
        return position

    async def capture_photo(self) -> Photo:
        photo = await self.photo_source.capture()
        if photo is None or not photo.content:
            raise ValidationError("A photo is required to register a point", "photo")
        return photo

    async def prepare(self, point_type: PointType) -> PointIntent:
        """Acquire location and photo and package them; location comes first"""
        position = await self.acquire_location()
        photo = await self.capture_photo()

        now = self.clock()
        timestamp_utc = now.isoformat()

        return PointIntent(
            type=point_type,
            latitude=position.latitude,
            longitude=position.longitude,
            accuracy=position.accuracy,
            photo=photo,
            client_timestamp_local=to_company_timezone(now).isoformat(),
            client_timestamp_utc=timestamp_utc,
            fingerprint=compute_fingerprint(photo.content, point_type, timestamp_utc),
        )

    def advisory_check(self, intent: PointIntent, company_settings: Optional[CompanySettingsResponse]) -> Optional[GeofenceAdvice]:
        """
        Local geofence check used only to warn the user before submitting.
        The server re-derives the verdict; None when no geofence is configured.
        """
        if company_settings is None or not company_settings.configured:
            return None

        point = Coordinates(intent.latitude, intent.longitude)
        center = Coordinates(company_settings.geofence_center.lat, company_settings.geofence_center.lng)
        within = is_within_geofence(point, center, company_settings.geofence_radius)

        return GeofenceAdvice(
            distance_m=distance_meters(point, center),
            within=within,
            message=None if within else OUTSIDE_AREA_WARNING,
        )

    async def fetch_settings(self) -> CompanySettingsResponse:
        async def request():
            response = await self.http.get(f"{self.base_url}{settings.API_PREFIX}/settings/", headers=self.headers)
            self._raise_for_error(response)
            return CompanySettingsResponse.model_validate(response.json())

        return await retry_bounded(request, self.retry_attempts, self.retry_delay)

    async def submit(self, intent: PointIntent) -> PointSubmissionResult:
        """
        Post the intent as multipart. Retrying is safe because the server
        deduplicates on the fingerprint.
        """
        async def request():
            response = await self.http.post(
                f"{self.base_url}{settings.API_PREFIX}/points/",
                headers=self.headers,
                data={"metadata": json.dumps(intent.metadata())},
                files={"photo": (intent.photo.filename, intent.photo.content, intent.photo.content_type)},
            )
            self._raise_for_error(response)
            return PointSubmissionResult.model_validate(response.json())

        return await retry_bounded(request, self.retry_attempts, self.retry_delay)

    async def register_point(
        self,
        point_type: PointType,
        on_advice: Optional[Callable[[GeofenceAdvice], None]] = None
    ) -> PointSubmissionResult:
        """
        Full flow: location -> photo -> advisory check -> submit.

        Nothing is sent when the location cannot be acquired. Failing to load
        the settings only skips the advisory warning.
        """
        intent = await self.prepare(point_type)

        try:
            company_settings = await self.fetch_settings()
        except (PontoError, httpx.HTTPError) as e:
            logger.warning(f"Skipping advisory geofence check: {e}")
            company_settings = None

        advice = self.advisory_check(intent, company_settings)
        if advice is not None and on_advice is not None:
            on_advice(advice)

        result = await self.submit(intent)
        logger.info(f"Point {result.point_id} submitted: {result.status}, {result.distance_m}m")
        return result

    async def aclose(self) -> None:
        await self.http.aclose()

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.status_code < 400:
            return

        try:
            message = response.json().get("error") or response.text
        except ValueError:
            message = response.text

        error_class = STATUS_ERRORS.get(response.status_code, PontoError)
        raise error_class(message)
