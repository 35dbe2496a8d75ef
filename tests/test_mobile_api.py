from conftest import API, MOBILE_HEADERS, login


def test_mobile_routes_are_hidden_without_key(client, create_user):
    create_user("warga", "warga@example.com")

    response = client.post(f"{API}/m/auth/login", json={"identifier": "warga", "password": "password123"})
    assert response.status_code == 404

    response = client.post(
        f"{API}/m/auth/login",
        json={"identifier": "warga", "password": "password123"},
        headers={"X-Mobile-Key": "wrong"},
    )
    assert response.status_code == 404


def test_mobile_login_returns_tokens_in_body(client, create_user):
    create_user("warga", "warga@example.com")

    response = login(client, "warga", "password123", mobile=True)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token"] and data["refresh_token"]
    assert data["user"]["role"] == "citizen"
    assert "access_token" not in response.cookies


def test_mobile_login_is_citizen_only(client):
    response = login(client, "root", "root-password", mobile=True)
    assert response.status_code == 403
    assert response.json()["error"]["message"] == "only citizen can login to this route"


def test_mobile_refresh(client, create_user):
    create_user("warga", "warga@example.com")
    tokens = login(client, "warga", "password123", mobile=True).json()["data"]

    response = client.post(
        f"{API}/m/auth/refresh", json={"refresh_token": tokens["refresh_token"]}, headers=MOBILE_HEADERS
    )
    assert response.status_code == 200
    assert response.json()["data"]["refresh_token"] != tokens["refresh_token"]


def test_mobile_me_requires_bearer(client):
    response = client.get(f"{API}/m/users/me", headers=MOBILE_HEADERS)
    assert response.status_code == 401
