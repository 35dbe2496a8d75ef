import uuid

from conftest import API, MOBILE_HEADERS, bearer, login


def test_create_user_requires_admin(client, create_user):
    assert create_user("warga", "warga@example.com").status_code == 201
    tokens = login(client, "warga", "password123", mobile=True).json()["data"]

    response = client.post(
        f"{API}/users/create",
        json={"username": "other", "email": "other@example.com", "fullname": "Other", "password": "password123"},
        headers=bearer(tokens["token"]),
    )
    assert response.status_code == 403


def test_create_user_defaults_to_citizen(create_user):
    response = create_user("warga", "warga@example.com", phone_number="08123456")
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["role"] == "citizen"
    assert data["email"] == "warga@example.com"
    assert data["phone"] == "08123456"
    assert data["status"] == "active"


def test_email_conflict_ignores_case(create_user):
    assert create_user("warga", "Warga@Example.com").status_code == 201

    response = create_user("warga2", "warga@example.com")
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ConflictError"


def test_create_user_validation(create_user):
    response = create_user("ab", "not-an-email", password="short")
    assert response.status_code == 400
    errors = response.json()["error"]["details"]["errors"]
    assert "username field does not meet minimum characters" in errors
    assert "email field is not a valid email" in errors
    assert "password field does not meet minimum characters" in errors


def test_unknown_role_is_rejected(create_user):
    response = create_user("warga", "warga@example.com", role="wizard")
    assert response.status_code == 400


def test_me_and_update_me(client, admin_headers):
    response = client.get(f"{API}/users/me", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["fullname"] == "Root Admin"

    response = client.patch(
        f"{API}/users/me",
        json={"full_name": "Root Administrator", "status": "suspended"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["fullname"] == "Root Administrator"
    assert data["status"] == "active"


def test_list_and_get_user(client, admin_headers, create_user):
    user_id = create_user("warga", "warga@example.com").json()["data"]["id"]

    response = client.get(f"{API}/users/list", params={"page": 1, "limit": 10}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 2
    assert {u["username"] for u in data["items"]} == {"root", "warga"}

    response = client.get(f"{API}/users/{user_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["username"] == "warga"


def test_get_user_not_found_and_bad_uuid(client, admin_headers):
    response = client.get(f"{API}/users/{uuid.uuid4()}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "EntityNotFoundException"

    response = client.get(f"{API}/users/not-a-uuid", headers=admin_headers)
    assert response.status_code == 400


def test_search_users(client, admin_headers, create_user):
    create_user("warga", "warga@example.com", fullname="Budi Santoso", phone_number="0811111")
    create_user("siti", "siti@example.com", fullname="Siti Aminah")

    def search(query):
        response = client.get(f"{API}/users/search", params={"query": query}, headers=admin_headers)
        assert response.status_code == 200
        return [u["username"] for u in response.json()["data"]["items"]]

    assert search("warg") == ["warga"]
    assert search("SITI@example.com") == ["siti"]
    assert search("budi santoso") == ["warga"]
    assert search("0811111") == ["warga"]
    assert search("nobody") == []


def test_update_user_conflict(client, admin_headers, create_user):
    create_user("warga", "warga@example.com")
    siti_id = create_user("siti", "siti@example.com").json()["data"]["id"]

    response = client.patch(f"{API}/users/{siti_id}", json={"username": "warga"}, headers=admin_headers)
    assert response.status_code == 409


def test_delete_and_restore_user(client, admin_headers, create_user):
    user_id = create_user("warga", "warga@example.com").json()["data"]["id"]

    response = client.delete(f"{API}/users/{user_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["id"] == user_id

    assert client.get(f"{API}/users/{user_id}", headers=admin_headers).status_code == 404
    assert login(client, "warga", "password123", mobile=True).status_code == 401

    response = client.post(f"{API}/users/restore/{user_id}", headers=admin_headers)
    assert response.status_code == 200
    assert client.get(f"{API}/users/{user_id}", headers=admin_headers).status_code == 200

    response = client.post(f"{API}/users/restore/{user_id}", headers=admin_headers)
    assert response.status_code == 404


def test_mobile_me(client, create_user):
    create_user("warga", "warga@example.com")
    tokens = login(client, "warga", "password123", mobile=True).json()["data"]

    response = client.get(f"{API}/m/users/me", headers={**MOBILE_HEADERS, **bearer(tokens["token"])})
    assert response.status_code == 200
    assert response.json()["data"]["username"] == "warga"
