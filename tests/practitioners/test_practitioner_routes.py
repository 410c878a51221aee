"""Practitioner follow-up: patient links and notes."""

from models import RoleName


def test_practitioner_routes_require_role(client, make_user, admin, auth_headers) -> None:
    assert client.get("/api/practitioners/patients").status_code == 401
    for user in (make_user(), admin):
        response = client.get("/api/practitioners/patients", headers=auth_headers(user))
        assert response.status_code == 403


def test_add_and_list_patients(client, practitioner, make_user, auth_headers) -> None:
    headers = auth_headers(practitioner)
    patient = make_user(email="patient@example.com", first_name="Paula", last_name="Patiente")

    response = client.post("/api/practitioners/patients", json={"patientId": patient.id}, headers=headers)
    assert response.status_code == 201
    assert response.get_json() == {"success": True, "message": "Patient ajouté au suivi"}

    patients = client.get("/api/practitioners/patients", headers=headers).get_json()["data"]
    assert [(p["id"], p["email"]) for p in patients] == [(patient.id, "patient@example.com")]
    assert patients[0]["patient_since"] is not None


def test_patient_cannot_be_added_twice(client, practitioner, make_user, auth_headers) -> None:
    headers = auth_headers(practitioner)
    patient = make_user()
    client.post("/api/practitioners/patients", json={"patientId": patient.id}, headers=headers)

    response = client.post("/api/practitioners/patients", json={"patientId": patient.id}, headers=headers)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Ce patient est déjà dans votre suivi"


def test_unknown_patient(client, practitioner, auth_headers) -> None:
    response = client.post("/api/practitioners/patients", json={"patientId": 9999},
                           headers=auth_headers(practitioner))
    assert response.status_code == 404
    assert response.get_json()["message"] == "Patient non trouvé"


def test_notes_for_linked_patient(client, practitioner, make_user, auth_headers) -> None:
    headers = auth_headers(practitioner)
    patient = make_user()
    client.post("/api/practitioners/patients", json={"patientId": patient.id}, headers=headers)

    response = client.post("/api/practitioners/notes",
                           json={"patientId": patient.id, "content": "Sommeil <b>agité</b>", "category": "SUIVI"},
                           headers=headers)
    assert response.status_code == 201
    assert set(response.get_json()["data"]) == {"id", "created_at"}

    notes = client.get(f"/api/practitioners/patients/{patient.id}/notes", headers=headers).get_json()["data"]
    assert len(notes) == 1
    assert notes[0]["category"] == "SUIVI"
    assert notes[0]["content"] == "Sommeil &lt;b&gt;agité&lt;/b&gt;"


def test_notes_require_a_link(client, practitioner, make_user, auth_headers) -> None:
    headers = auth_headers(practitioner)
    stranger = make_user()

    response = client.post("/api/practitioners/notes",
                           json={"patientId": stranger.id, "content": "Bonjour", "category": "AUTRE"},
                           headers=headers)
    assert response.status_code == 403
    assert response.get_json()["message"] == "Accès non autorisé à ce patient"

    response = client.get(f"/api/practitioners/patients/{stranger.id}/notes", headers=headers)
    assert response.status_code == 403


def test_notes_are_scoped_to_their_practitioner(client, practitioner, make_user, auth_headers) -> None:
    patient = make_user()
    colleague = make_user(roles=(RoleName.PRACTITIONER, RoleName.USER))
    client.post("/api/practitioners/patients", json={"patientId": patient.id}, headers=auth_headers(practitioner))
    client.post("/api/practitioners/notes",
                json={"patientId": patient.id, "content": "Première séance", "category": "CONSULTATION"},
                headers=auth_headers(practitioner))

    response = client.get(f"/api/practitioners/patients/{patient.id}/notes", headers=auth_headers(colleague))
    assert response.status_code == 403


def test_note_payload_validation(client, practitioner, make_user, auth_headers) -> None:
    response = client.post("/api/practitioners/notes",
                           json={"patientId": 1, "content": "   ", "category": "DIAGNOSTIC"},
                           headers=auth_headers(practitioner))

    assert response.status_code == 400
    fields = {err["field"] for err in response.get_json()["errors"]}
    assert fields == {"content", "category"}
