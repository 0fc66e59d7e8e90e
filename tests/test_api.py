from postbox.config import settings


def _sign_up_and_login(client, email="walt@example.com", password="04234"):
    created = client.post("/api/users", json={"email": email, "password": password})
    assert created.status_code == 201
    login = client.post("/api/login", json={"email": email, "password": password})
    assert login.status_code == 200
    return login.json()


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_healthz(client):
    response = client.get("/api/healthz")
    assert response.status_code == 200
    assert response.text == "OK"


def test_sign_up_hides_password(client):
    response = client.post("/api/users", json={"email": "a@example.com", "password": "pw"})

    assert response.status_code == 201
    assert response.json() == {"id": 1, "email": "a@example.com", "is_upgraded": False}


def test_duplicate_sign_up_conflicts(client):
    client.post("/api/users", json={"email": "a@example.com", "password": "pw"})
    response = client.post("/api/users", json={"email": "a@example.com", "password": "pw"})

    assert response.status_code == 409
    assert response.json()["success"] is False


def test_login_with_wrong_password(client):
    client.post("/api/users", json={"email": "a@example.com", "password": "pw"})
    response = client.post("/api/login", json={"email": "a@example.com", "password": "nope"})

    assert response.status_code == 401


def test_post_lifecycle(client):
    session = _sign_up_and_login(client)

    created = client.post("/api/posts", json={"body": "I love sharbert"}, headers=_auth(session["token"]))
    assert created.status_code == 201
    post = created.json()
    assert post == {"id": 1, "body": "I love ****", "author_id": session["id"]}

    assert client.get("/api/posts").json() == [post]
    assert client.get(f"/api/posts/{post['id']}").json() == post

    deleted = client.delete(f"/api/posts/{post['id']}", headers=_auth(session["token"]))
    assert deleted.status_code == 204
    assert client.get(f"/api/posts/{post['id']}").status_code == 404


def test_create_post_requires_token(client):
    assert client.post("/api/posts", json={"body": "hi"}).status_code == 401
    response = client.post("/api/posts", json={"body": "hi"}, headers=_auth("garbage"))
    assert response.status_code == 401


def test_too_long_post_is_422(client):
    session = _sign_up_and_login(client)

    response = client.post("/api/posts", json={"body": "x" * 141}, headers=_auth(session["token"]))

    assert response.status_code == 422
    assert response.json()["details"]["length"] == 141


def test_only_author_can_delete(client):
    author = _sign_up_and_login(client, "author@example.com")
    other = _sign_up_and_login(client, "other@example.com")
    post = client.post("/api/posts", json={"body": "mine"}, headers=_auth(author["token"])).json()

    response = client.delete(f"/api/posts/{post['id']}", headers=_auth(other["token"]))

    assert response.status_code == 403
    assert client.get(f"/api/posts/{post['id']}").status_code == 200


def test_list_filters_and_sorts(client):
    first = _sign_up_and_login(client, "first@example.com")
    second = _sign_up_and_login(client, "second@example.com")
    for session, body in [(first, "one"), (second, "two"), (first, "three")]:
        client.post("/api/posts", json={"body": body}, headers=_auth(session["token"]))

    desc = client.get("/api/posts", params={"sort": "desc"}).json()
    assert [p["id"] for p in desc] == [3, 2, 1]

    mine = client.get("/api/posts", params={"author_id": first["id"]}).json()
    assert [p["body"] for p in mine] == ["one", "three"]

    assert client.get("/api/posts", params={"sort": "random"}).status_code == 422


def test_update_user(client):
    session = _sign_up_and_login(client)

    response = client.put(
        "/api/users",
        json={"email": "new@example.com", "password": "new-pw"},
        headers=_auth(session["token"]),
    )

    assert response.status_code == 200
    assert response.json()["email"] == "new@example.com"
    relogin = client.post("/api/login", json={"email": "new@example.com", "password": "new-pw"})
    assert relogin.status_code == 200


def test_refresh_and_revoke(client):
    session = _sign_up_and_login(client)
    refresh_headers = _auth(session["refresh_token"])

    refreshed = client.post("/api/refresh", headers=refresh_headers)
    assert refreshed.status_code == 200
    new_token = refreshed.json()["token"]
    assert client.post("/api/posts", json={"body": "hi"}, headers=_auth(new_token)).status_code == 201

    assert client.post("/api/revoke", headers=refresh_headers).status_code == 204
    assert client.post("/api/refresh", headers=refresh_headers).status_code == 401


def test_payment_webhook_upgrades_user(client, monkeypatch):
    monkeypatch.setattr(settings, "WEBHOOK_API_KEY", "f271c81ff7084ee5b99a5091b42d486e")
    session = _sign_up_and_login(client)
    event = {"event": "user.upgraded", "data": {"user_id": session["id"]}}

    bad_key = client.post("/api/webhooks/payments", json=event, headers={"Authorization": "ApiKey wrong"})
    assert bad_key.status_code == 401

    headers = {"Authorization": "ApiKey f271c81ff7084ee5b99a5091b42d486e"}
    ignored = client.post(
        "/api/webhooks/payments",
        json={"event": "user.payment_failed", "data": {"user_id": session["id"]}},
        headers=headers,
    )
    assert ignored.status_code == 204

    assert client.post("/api/webhooks/payments", json=event, headers=headers).status_code == 204
    login = client.post("/api/login", json={"email": "walt@example.com", "password": "04234"})
    assert login.json()["is_upgraded"] is True

    missing = {"event": "user.upgraded", "data": {"user_id": 999}}
    assert client.post("/api/webhooks/payments", json=missing, headers=headers).status_code == 404


def test_reset_requires_debug(client, monkeypatch):
    _sign_up_and_login(client)
    assert client.post("/admin/reset").status_code == 403

    monkeypatch.setattr(settings, "DEBUG", True)
    assert client.post("/admin/reset").status_code == 200
    assert client.post("/api/login", json={"email": "walt@example.com", "password": "04234"}).status_code == 401


def test_metrics_endpoint(client):
    client.get("/api/healthz")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "postbox_http_requests_total" in response.text


def test_oversized_password_is_rejected_on_sign_up(client):
    response = client.post("/api/users", json={"email": "a@example.com", "password": "x" * 73})

    assert response.status_code == 422
    assert response.json()["details"]["errors"][0]["field"] == "body.password"
    assert client.post("/api/login", json={"email": "a@example.com", "password": "x" * 72}).status_code == 401


def test_password_limit_counts_utf8_bytes(client):
    # 36 two-byte characters fill the limit exactly
    assert client.post("/api/users", json={"email": "a@example.com", "password": "é" * 36}).status_code == 201
    assert client.post("/api/users", json={"email": "b@example.com", "password": "é" * 37}).status_code == 422


def test_oversized_password_is_rejected_on_update(client):
    session = _sign_up_and_login(client)

    response = client.put(
        "/api/users",
        json={"email": "walt@example.com", "password": "x" * 73},
        headers=_auth(session["token"]),
    )

    assert response.status_code == 422
    login = client.post("/api/login", json={"email": "walt@example.com", "password": "04234"})
    assert login.status_code == 200
