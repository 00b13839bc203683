from ponto.services.audit_service import AuditLogWriter
from ponto.utils.datetime_utils import utc_now
from tests.conftest import auth_headers

AUDIT_URL = "/api/v1/audit-logs/"


def seed(db, colaborador, other_colaborador, gestor):
    writer = AuditLogWriter(db)
    writer.record(colaborador.id, "ponto_registrado", {"n": 1})
    writer.record(other_colaborador.id, "ponto_registrado", {"n": 2})
    writer.record(gestor.id, "ponto_aprovado", {"n": 3})
    writer.record(colaborador.id, "ausencia_solicitada", {"n": 4})
    db.commit()


def test_colaborador_sees_only_own_entries(client, db, colaborador, other_colaborador, gestor):
    seed(db, colaborador, other_colaborador, gestor)

    body = client.get(AUDIT_URL, headers=auth_headers(colaborador.id)).json()

    assert body["total"] == 2
    assert {r["user_id"] for r in body["records"]} == {colaborador.id}


def test_colaborador_asking_for_other_user_is_403(client, db, colaborador, other_colaborador, gestor):
    seed(db, colaborador, other_colaborador, gestor)

    response = client.get(AUDIT_URL, params={"user_id": other_colaborador.id}, headers=auth_headers(colaborador.id))

    assert response.status_code == 403


def test_reviewer_sees_everything_newest_first(client, db, colaborador, other_colaborador, gestor):
    seed(db, colaborador, other_colaborador, gestor)

    body = client.get(AUDIT_URL, headers=auth_headers(gestor.id)).json()

    assert body["total"] == 4
    assert [r["details"]["n"] for r in body["records"]] == [4, 3, 2, 1]


def test_filters_by_action_and_user(client, db, colaborador, other_colaborador, gestor):
    seed(db, colaborador, other_colaborador, gestor)

    body = client.get(
        AUDIT_URL,
        params={"action": "ponto_registrado", "user_id": other_colaborador.id},
        headers=auth_headers(gestor.id)
    ).json()

    assert body["total"] == 1
    assert body["records"][0]["details"] == {"n": 2}


def test_pagination_clamps_limit(client, db, colaborador, other_colaborador, gestor):
    seed(db, colaborador, other_colaborador, gestor)

    body = client.get(AUDIT_URL, params={"skip": 1, "limit": 100000}, headers=auth_headers(gestor.id)).json()

    assert body["skip"] == 1
    assert body["limit"] == 500
    assert len(body["records"]) == 3


def test_best_effort_record_swallows_database_errors(db, colaborador, monkeypatch, caplog):
    from sqlalchemy.exc import SQLAlchemyError

    writer = AuditLogWriter(db)

    def broken_commit():
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(db, "commit", broken_commit)

    assert writer.record_best_effort(colaborador.id, "face_verification_attempt", {"at": utc_now().isoformat()}) is None
    assert "Failed to write audit entry" in caplog.text
