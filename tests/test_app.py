def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "OK"
    assert "timestamp" in body


def test_unknown_route(client) -> None:
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.get_json() == {"success": False, "message": "Route non trouvée"}


def test_wrong_method(client) -> None:
    response = client.delete("/api/users/login")

    assert response.status_code == 405
    assert response.get_json() == {"success": False, "message": "Méthode non autorisée"}


def test_unexpected_error_is_wrapped(app, client) -> None:
    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    response = client.get("/boom")

    assert response.status_code == 500
    body = response.get_json()
    assert body == {"success": False, "message": "Une erreur interne est survenue"}


def test_unexpected_error_detail_in_debug(app, client) -> None:
    app.debug = True

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    response = client.get("/boom")

    assert response.status_code == 500
    assert response.get_json()["error"] == "kaboom"


def test_missing_body_is_a_validation_error(client) -> None:
    response = client.post("/api/users/login", data="not json", content_type="text/plain")

    assert response.status_code == 400
    fields = {err["field"] for err in response.get_json()["errors"]}
    assert fields == {"email", "password"}
