from tests.conftest import auth_headers

ABSENCES_URL = "/api/v1/absences/"
DEVICES_URL = "/api/v1/devices/"


def request_absence(client, actor, **overrides):
    payload = {"type": "ferias", "start_date": "2026-12-01", "end_date": "2026-12-15", "reason": "Férias"}
    payload.update(overrides)
    return client.post(ABSENCES_URL, json=payload, headers=auth_headers(actor.id))


def test_absence_request_starts_pending(client, colaborador):
    response = request_absence(client, colaborador)

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pendente"
    assert body["user_id"] == colaborador.id
    assert body["type"] == "ferias"


def test_absence_with_inverted_dates_is_400(client, colaborador):
    response = request_absence(client, colaborador, start_date="2026-12-15", end_date="2026-12-01")

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_absence_review_by_gestor(client, colaborador, gestor):
    absence_id = request_absence(client, colaborador).json()["id"]

    response = client.post(
        f"{ABSENCES_URL}review",
        json={"absence_id": absence_id, "decision": "rejeitado"},
        headers=auth_headers(gestor.id)
    )

    assert response.status_code == 200
    assert response.json()["status"] == "rejeitado"

    retry = client.post(
        f"{ABSENCES_URL}review",
        json={"absence_id": absence_id, "decision": "aprovado"},
        headers=auth_headers(gestor.id)
    )
    assert retry.status_code == 409


def test_colaborador_cannot_review_absence(client, colaborador):
    absence_id = request_absence(client, colaborador).json()["id"]

    response = client.post(
        f"{ABSENCES_URL}review",
        json={"absence_id": absence_id, "decision": "aprovado"},
        headers=auth_headers(colaborador.id)
    )

    assert response.status_code == 403
    listing = client.get(ABSENCES_URL, headers=auth_headers(colaborador.id)).json()
    assert listing["records"][0]["status"] == "pendente"


def test_absence_listing_filters_by_status(client, colaborador, other_colaborador, gestor):
    first = request_absence(client, colaborador).json()["id"]
    request_absence(client, other_colaborador)
    client.post(
        f"{ABSENCES_URL}review",
        json={"absence_id": first, "decision": "aprovado"},
        headers=auth_headers(gestor.id)
    )

    pending = client.get(ABSENCES_URL, params={"status": "pendente"}, headers=auth_headers(gestor.id)).json()
    own = client.get(ABSENCES_URL, headers=auth_headers(other_colaborador.id)).json()

    assert pending["total"] == 1
    assert pending["records"][0]["user_id"] == other_colaborador.id
    assert own["total"] == 1


def test_device_lifecycle(client, colaborador, gestor):
    created = client.post(
        DEVICES_URL,
        json={"device_id": "android-abc123", "device_model": "Galaxy S24"},
        headers=auth_headers(colaborador.id)
    )
    assert created.status_code == 201
    device = created.json()
    assert device["is_active"] is False

    approve = client.post(
        f"{DEVICES_URL}review",
        json={"active_device_id": device["id"], "decision": "aprovado"},
        headers=auth_headers(gestor.id)
    )
    assert approve.status_code == 200
    assert approve.json()["status"] == "ativo"

    active = client.get(DEVICES_URL, params={"is_active": "true"}, headers=auth_headers(colaborador.id)).json()
    assert active["total"] == 1

    revoke = client.post(
        f"{DEVICES_URL}review",
        json={"active_device_id": device["id"], "decision": "rejeitado"},
        headers=auth_headers(gestor.id)
    )
    assert revoke.json()["status"] == "inativo"

    again = client.post(
        f"{DEVICES_URL}review",
        json={"active_device_id": device["id"], "decision": "rejeitado"},
        headers=auth_headers(gestor.id)
    )
    assert again.status_code == 409


def test_unknown_device_is_404(client, gestor):
    response = client.post(
        f"{DEVICES_URL}review",
        json={"active_device_id": "missing", "decision": "aprovado"},
        headers=auth_headers(gestor.id)
    )

    assert response.status_code == 404
