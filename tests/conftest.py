import math
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from ponto.config import settings
from ponto.database import Base, get_db
from ponto.main import app
from ponto.models.company_settings import CompanySettings, SINGLETON_ID
from ponto.schemas.profile import Role
from ponto.services.geofence import Coordinates, EARTH_RADIUS_METERS
from ponto.services.profile_service import ProfileService
from ponto.services.storage import LocalContentStorage, get_storage
from ponto.utils.auth import Actor
from ponto.utils.datetime_utils import utc_now

CENTER = Coordinates(-23.5505, -46.6333)
RADIUS = 100

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake-jpeg-payload" * 8 + b"\xff\xd9"


def offset_north(point: Coordinates, meters: float) -> Coordinates:
    """Coordinate `meters` due north of `point` along the meridian"""
    return Coordinates(point.latitude + math.degrees(meters / EARTH_RADIUS_METERS), point.longitude)


def create_access_token(data: dict, expires_delta: timedelta = timedelta(minutes=60)) -> str:
    """Sign a token the way the identity provider does"""
    claims = {**data, "exp": utc_now() + expires_delta}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def auth_headers(profile_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': profile_id})}"}


def stored_files(storage: LocalContentStorage) -> list:
    if not storage.base_dir.exists():
        return []
    return [p for p in storage.base_dir.rglob("*") if p.is_file()]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalContentStorage(root=str(tmp_path), bucket="point-photos", public_base_url="http://test/storage")


@pytest.fixture
def client(session_factory, storage):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def company_settings(db):
    row = CompanySettings(
        id=SINGLETON_ID,
        geofence_center_lat=CENTER.latitude,
        geofence_center_lng=CENTER.longitude,
        geofence_radius=RADIUS,
        tolerance_minutes=15,
        photo_retention_days=30,
    )
    db.add(row)
    db.commit()
    return row


@pytest.fixture
def colaborador(db):
    profile = ProfileService(db).ensure_profile("colab-1", "ana@example.com", "Ana", Role.COLABORADOR)
    return Actor(id=profile.id, role=Role.COLABORADOR)


@pytest.fixture
def other_colaborador(db):
    profile = ProfileService(db).ensure_profile("colab-2", "bruno@example.com", "Bruno", Role.COLABORADOR)
    return Actor(id=profile.id, role=Role.COLABORADOR)


@pytest.fixture
def gestor(db):
    profile = ProfileService(db).ensure_profile("gestor-1", "gil@example.com", "Gil", Role.GESTOR)
    return Actor(id=profile.id, role=Role.GESTOR)


@pytest.fixture
def admin(db):
    profile = ProfileService(db).ensure_profile("admin-1", "alice@example.com", "Alice", Role.ADMIN)
    return Actor(id=profile.id, role=Role.ADMIN)


def make_metadata(location: Coordinates = CENTER, fingerprint: str = "fp-0001-abcdef", point_type: str = "entrada") -> dict:
    return {
        "type": point_type,
        "lat": location.latitude,
        "lon": location.longitude,
        "accuracy_m": 12.5,
        "timestamp_local": "2026-10-19T08:00:00-03:00",
        "timestamp_utc": "2026-10-19T11:00:00+00:00",
        "fingerprint": fingerprint,
    }
