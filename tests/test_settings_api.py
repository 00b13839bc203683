import json

from ponto.models.audit import AuditLogEntry
from ponto.models.company_settings import CompanySettings
from tests.conftest import JPEG_BYTES, auth_headers, make_metadata

SETTINGS_URL = "/api/v1/settings/"


def test_get_returns_defaults_without_saving(client, db, colaborador):
    response = client.get(SETTINGS_URL, headers=auth_headers(colaborador.id))

    assert response.status_code == 200
    body = response.json()
    assert body["configured"] is False
    assert db.query(CompanySettings).count() == 0
    assert body["geofence_center"] == {"lat": -23.5505, "lng": -46.6333}
    assert body["geofence_radius"] == 100
    assert body["tolerance_minutes"] == 15
    assert body["photo_retention_days"] == 30


def test_get_returns_configured_row(client, company_settings, colaborador):
    body = client.get(SETTINGS_URL, headers=auth_headers(colaborador.id)).json()

    assert body["configured"] is True
    assert body["geofence_radius"] == company_settings.geofence_radius


def test_colaborador_cannot_update(client, company_settings, colaborador):
    response = client.put(SETTINGS_URL, json={"geofence_radius": 5000}, headers=auth_headers(colaborador.id))

    assert response.status_code == 403


def test_gestor_updates_and_is_audited(client, db, company_settings, gestor):
    response = client.put(
        SETTINGS_URL,
        json={"geofence_center": {"lat": -22.9068, "lng": -43.1729}, "geofence_radius": 250},
        headers=auth_headers(gestor.id)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["geofence_center"] == {"lat": -22.9068, "lng": -43.1729}
    assert body["geofence_radius"] == 250
    assert body["tolerance_minutes"] == 15

    db.expire_all()
    assert db.query(CompanySettings).one().geofence_radius == 250
    entry = db.query(AuditLogEntry).filter(AuditLogEntry.action == "configuracoes_atualizadas").one()
    assert entry.user_id == gestor.id
    assert entry.details["geofence_radius"] == 250


def test_non_positive_radius_is_400(client, company_settings, admin):
    response = client.put(SETTINGS_URL, json={"geofence_radius": 0}, headers=auth_headers(admin.id))

    assert response.status_code == 400


def test_out_of_range_center_is_400(client, company_settings, admin):
    response = client.put(
        SETTINGS_URL,
        json={"geofence_center": {"lat": 95, "lng": 0}},
        headers=auth_headers(admin.id)
    )

    assert response.status_code == 400


def test_reading_settings_does_not_unblock_submission(client, db, colaborador):
    client.get(SETTINGS_URL, headers=auth_headers(colaborador.id))

    response = client.post(
        "/api/v1/points/",
        data={"metadata": json.dumps(make_metadata())},
        files={"photo": ("selfie.jpeg", JPEG_BYTES, "image/jpeg")},
        headers=auth_headers(colaborador.id)
    )

    assert response.status_code == 500
    assert response.json()["error"] == "Company settings are not configured"
    assert db.query(CompanySettings).count() == 0


def test_first_update_creates_the_row(client, db, gestor):
    response = client.put(SETTINGS_URL, json={"geofence_radius": 300}, headers=auth_headers(gestor.id))

    assert response.status_code == 200
    assert response.json()["configured"] is True
    assert response.json()["geofence_radius"] == 300
    assert db.query(CompanySettings).count() == 1
