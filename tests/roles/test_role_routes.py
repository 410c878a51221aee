"""Role administration and the last-administrator guard."""

from extensions import db
from models import RoleName, User, count_role_holders


def test_roles_routes_are_admin_only(client, make_user, auth_headers) -> None:
    user = make_user()

    assert client.get("/api/roles/all").status_code == 401
    response = client.get("/api/roles/all", headers=auth_headers(user))
    assert response.status_code == 403
    assert response.get_json() == {"success": False, "message": "Accès non autorisé"}


def test_list_all_roles(client, admin, auth_headers) -> None:
    response = client.get("/api/roles/all", headers=auth_headers(admin))

    assert response.status_code == 200
    assert [r["name"] for r in response.get_json()["data"]] == ["ADMIN", "PRACTITIONER", "USER"]


def test_assign_is_idempotent(client, app, admin, make_user, auth_headers) -> None:
    user = make_user()
    headers = auth_headers(admin)
    payload = {"userId": user.id, "roleName": "PRACTITIONER"}

    for _ in range(2):
        response = client.post("/api/roles/assign", json=payload, headers=headers)
        assert response.status_code == 200
        assert response.get_json()["message"] == (
            f"Rôle PRACTITIONER assigné avec succès à l'utilisateur {user.id}"
        )

    response = client.get(f"/api/roles/user/{user.id}", headers=headers)
    assert [r["name"] for r in response.get_json()["data"]] == ["PRACTITIONER", "USER"]

    with app.app_context():
        assert count_role_holders(RoleName.PRACTITIONER) == 1


def test_assign_unknown_user_or_role(client, admin, auth_headers) -> None:
    headers = auth_headers(admin)

    response = client.post("/api/roles/assign", json={"userId": 9999, "roleName": "USER"}, headers=headers)
    assert response.status_code == 404
    assert response.get_json()["message"] == "Utilisateur non trouvé"

    response = client.post("/api/roles/assign", json={"userId": admin.id, "roleName": "SUPERUSER"}, headers=headers)
    assert response.status_code == 400


def test_remove_role(client, app, admin, practitioner, auth_headers) -> None:
    response = client.post("/api/roles/remove",
                           json={"userId": practitioner.id, "roleName": "PRACTITIONER"},
                           headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.get_json()["message"] == (
        f"Rôle PRACTITIONER retiré avec succès de l'utilisateur {practitioner.id}"
    )
    with app.app_context():
        assert db.session.get(User, practitioner.id).role_names == {"USER"}


def test_remove_missing_assignment(client, admin, make_user, auth_headers) -> None:
    user = make_user()

    response = client.post("/api/roles/remove",
                           json={"userId": user.id, "roleName": "ADMIN"},
                           headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.get_json()["message"] == "Attribution de rôle non trouvée"


def test_last_admin_cannot_be_removed(client, app, admin, auth_headers) -> None:
    response = client.post("/api/roles/remove",
                           json={"userId": admin.id, "roleName": "ADMIN"},
                           headers=auth_headers(admin))

    assert response.status_code == 400
    assert response.get_json()["message"] == "Impossible de supprimer le dernier administrateur"
    with app.app_context():
        assert count_role_holders(RoleName.ADMIN) == 1


def test_admin_can_be_removed_while_another_remains(client, app, admin, make_user, auth_headers) -> None:
    other = make_user(roles=(RoleName.ADMIN, RoleName.USER))

    response = client.post("/api/roles/remove",
                           json={"userId": other.id, "roleName": "ADMIN"},
                           headers=auth_headers(admin))

    assert response.status_code == 200
    with app.app_context():
        assert count_role_holders(RoleName.ADMIN) == 1


def test_user_roles_of_unknown_user_is_empty(client, admin, auth_headers) -> None:
    response = client.get("/api/roles/user/9999", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.get_json()["data"] == []
