from datetime import timedelta

import pytest

from ponto.exceptions import Forbidden, ValidationError
from ponto.models.audit import AuditLogEntry
from ponto.models.profile import Profile
from ponto.schemas.profile import ProfileCreate, ProfileNameUpdate, Role
from ponto.services.profile_service import ProfileService
from tests.conftest import auth_headers, create_access_token

ME_URL = "/api/v1/profiles/me"


def role_url(profile_id):
    return f"/api/v1/profiles/{profile_id}/role"


def test_get_own_profile(client, colaborador):
    response = client.get(ME_URL, headers=auth_headers(colaborador.id))

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == colaborador.id
    assert body["role"] == "colaborador"
    assert body["email"] == "ana@example.com"


def test_update_own_name(client, colaborador):
    response = client.patch(
        ME_URL,
        json={"first_name": "  Ana  ", "last_name": "Souza"},
        headers=auth_headers(colaborador.id)
    )

    assert response.status_code == 200
    assert response.json()["first_name"] == "Ana"
    assert response.json()["last_name"] == "Souza"


def test_name_too_long_is_rejected(db, colaborador):
    with pytest.raises(ValidationError):
        ProfileService(db).update_name(colaborador, ProfileNameUpdate(first_name="x" * 101))


def test_gestor_promotes_colaborador(client, colaborador, gestor):
    response = client.patch(role_url(colaborador.id), json={"role": "gestor"}, headers=auth_headers(gestor.id))

    assert response.status_code == 200
    assert response.json()["role"] == "gestor"


def test_gestor_cannot_grant_admin(db, colaborador, gestor):
    with pytest.raises(Forbidden):
        ProfileService(db).update_role(gestor, colaborador.id, Role.ADMIN)


def test_gestor_cannot_demote_admin(db, gestor, admin):
    with pytest.raises(Forbidden):
        ProfileService(db).update_role(gestor, admin.id, Role.COLABORADOR)


def test_admin_can_grant_admin(db, gestor, admin):
    assert ProfileService(db).update_role(admin, gestor.id, Role.ADMIN).role == "admin"


def test_colaborador_cannot_change_roles(client, colaborador, other_colaborador):
    response = client.patch(
        role_url(other_colaborador.id),
        json={"role": "gestor"},
        headers=auth_headers(colaborador.id)
    )

    assert response.status_code == 403


def test_unknown_role_in_store_is_unauthenticated(client, db):
    db.add(Profile(id="weird-1", email="weird@example.com", role="estagiario"))
    db.commit()

    response = client.get(ME_URL, headers=auth_headers("weird-1"))

    assert response.status_code == 401


def test_token_for_missing_profile_is_401(client):
    response = client.get(ME_URL, headers=auth_headers("ghost"))

    assert response.status_code == 401


PROFILES_URL = "/api/v1/profiles/"


def test_gestor_creates_colaborador_and_is_audited(client, db, gestor):
    response = client.post(
        PROFILES_URL,
        json={"email": "Carla@Example.com", "first_name": "Carla", "role": "colaborador"},
        headers=auth_headers(gestor.id)
    )

    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "colaborador"
    assert body["email"] == "carla@example.com"

    entry = db.query(AuditLogEntry).filter(AuditLogEntry.action == "usuario_criado").one()
    assert entry.user_id == gestor.id
    assert entry.details == {"new_user_id": body["id"], "role": "colaborador", "email": "carla@example.com"}


def test_created_profile_keeps_provider_id(db, admin):
    profile = ProfileService(db).create_profile(
        admin, ProfileCreate(id="idp-123", email="dora@example.com", first_name="Dora", role=Role.GESTOR)
    )

    assert profile.id == "idp-123"
    assert profile.role == "gestor"


def test_colaborador_cannot_create_users(client, db, colaborador):
    response = client.post(
        PROFILES_URL,
        json={"email": "eve@example.com", "first_name": "Eve"},
        headers=auth_headers(colaborador.id)
    )

    assert response.status_code == 403
    assert db.query(AuditLogEntry).filter(AuditLogEntry.action == "usuario_criado").count() == 0


def test_gestor_cannot_create_admin(db, gestor):
    with pytest.raises(Forbidden):
        ProfileService(db).create_profile(
            gestor, ProfileCreate(email="root@example.com", first_name="Root", role=Role.ADMIN)
        )

    assert db.query(Profile).filter(Profile.email == "root@example.com").count() == 0


def test_admin_can_create_admin(db, admin):
    profile = ProfileService(db).create_profile(
        admin, ProfileCreate(email="root@example.com", first_name="Root", role=Role.ADMIN)
    )

    assert profile.role == "admin"


def test_duplicate_email_is_400(client, colaborador, gestor):
    response = client.post(
        PROFILES_URL,
        json={"email": "ana@example.com", "first_name": "Ana"},
        headers=auth_headers(gestor.id)
    )

    assert response.status_code == 400


def test_expired_token_is_401(client, colaborador):
    token = create_access_token({"sub": colaborador.id}, expires_delta=timedelta(minutes=-1))

    response = client.get(ME_URL, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized: Invalid token"
