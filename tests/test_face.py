import random

from ponto.api.face import get_face_verifier
from ponto.main import app
from ponto.models.audit import AuditLogEntry
from ponto.models.point import Point
from ponto.services.face_service import FaceVerifier, random_scorer
from ponto.services.point_service import PointService
from tests.conftest import JPEG_BYTES, auth_headers, make_metadata

FACE_URL = "/api/v1/face/verify"


def test_high_score_matches(db, colaborador):
    result = FaceVerifier(db, scorer=lambda image_hash, user_id: 0.951).verify(colaborador, colaborador.id, "abc")

    assert result.match is True
    assert result.confidence == 0.95
    assert result.threshold == 0.85


def test_low_score_does_not_match(db, colaborador):
    result = FaceVerifier(db, scorer=lambda image_hash, user_id: 0.70).verify(colaborador, colaborador.id, "abc")

    assert result.match is False


def test_score_at_threshold_matches(db, colaborador):
    verifier = FaceVerifier(db, scorer=lambda image_hash, user_id: 0.85, threshold=0.85)

    assert verifier.verify(colaborador, colaborador.id, "abc").match is True


def test_random_scorer_yields_only_known_values():
    score = random_scorer(random.Random(7))

    assert {score("h", "u") for _ in range(200)} == {0.95, 0.70}


def test_verification_is_audited_and_leaves_points_alone(db, storage, company_settings, colaborador):
    point_id = PointService(db, storage).submit(colaborador, make_metadata(), JPEG_BYTES, "image/jpeg").point_id

    FaceVerifier(db, scorer=lambda image_hash, user_id: 0.99).verify(colaborador, colaborador.id, "abc")

    entry = db.query(AuditLogEntry).filter(AuditLogEntry.action == "face_verification_attempt").one()
    assert entry.details == {"target_user_id": colaborador.id, "match": True, "confidence": 0.99}
    assert db.query(Point).filter(Point.id == point_id).one().status == "pendente"


def test_verify_endpoint(client, session_factory, colaborador):
    def fixed_verifier():
        session = session_factory()
        try:
            yield FaceVerifier(session, scorer=lambda image_hash, user_id: 0.70)
        finally:
            session.close()

    app.dependency_overrides[get_face_verifier] = fixed_verifier

    response = client.post(
        FACE_URL,
        json={"image_hash": "deadbeef", "user_id": colaborador.id},
        headers=auth_headers(colaborador.id)
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "match": False, "confidence": 0.7, "threshold": 0.85}


def test_verify_requires_authentication(client):
    response = client.post(FACE_URL, json={"image_hash": "deadbeef", "user_id": "x"})

    assert response.status_code == 401
