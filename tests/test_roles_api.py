import uuid

from conftest import API, bearer, login


def test_builtin_roles_are_seeded(client, admin_headers):
    response = client.get(f"{API}/roles/list", headers=admin_headers)
    assert response.status_code == 200
    assert {r["name"] for r in response.json()["data"]} == {"admin", "citizen", "official"}


def test_roles_require_admin(client, create_user):
    create_user("warga", "warga@example.com")
    token = login(client, "warga", "password123", mobile=True).json()["data"]["token"]

    assert client.get(f"{API}/roles/list", headers=bearer(token)).status_code == 403
    assert client.get(f"{API}/roles/list").status_code == 401


def test_role_crud(client, admin_headers):
    response = client.post(
        f"{API}/roles/create", json={"name": "moderator", "description": "Moderates reports"}, headers=admin_headers
    )
    assert response.status_code == 201
    role_id = response.json()["data"]["id"]

    response = client.post(f"{API}/roles/create", json={"name": "moderator"}, headers=admin_headers)
    assert response.status_code == 409

    response = client.get(f"{API}/roles/id/{role_id}", headers=admin_headers)
    assert response.json()["data"]["name"] == "moderator"

    response = client.get(f"{API}/roles/name/moderator", headers=admin_headers)
    assert response.json()["data"]["id"] == role_id

    # renaming onto an existing role is a conflict
    response = client.put(f"{API}/roles/{role_id}", json={"name": "official"}, headers=admin_headers)
    assert response.status_code == 409

    response = client.put(
        f"{API}/roles/{role_id}", json={"name": "reviewer", "description": "Reviews"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "reviewer"

    response = client.delete(f"{API}/roles/{role_id}", headers=admin_headers)
    assert response.status_code == 200
    assert client.get(f"{API}/roles/id/{role_id}", headers=admin_headers).status_code == 404


def test_role_name_length_is_validated(client, admin_headers):
    response = client.post(f"{API}/roles/create", json={"name": "ab"}, headers=admin_headers)
    assert response.status_code == 400


def test_assign_and_remove_user_role(client, admin_headers, create_user):
    user_id = create_user("petugas", "petugas@example.com").json()["data"]["id"]

    response = client.post(f"{API}/roles/assign/{user_id}", json={"role_name": "official"}, headers=admin_headers)
    assert response.status_code == 200
    assert client.get(f"{API}/users/{user_id}", headers=admin_headers).json()["data"]["role"] == "official"

    # officials sign in on the web
    assert login(client, "petugas", "password123").status_code == 200

    response = client.post(f"{API}/roles/assign/{user_id}", json={"role_name": "nope"}, headers=admin_headers)
    assert response.status_code == 400

    response = client.delete(f"{API}/roles/assign/{user_id}", headers=admin_headers)
    assert response.status_code == 200
    assert client.get(f"{API}/users/{user_id}", headers=admin_headers).json()["data"]["role"] == ""


def test_assign_role_to_missing_user(client, admin_headers):
    response = client.post(
        f"{API}/roles/assign/{uuid.uuid4()}", json={"role_name": "official"}, headers=admin_headers
    )
    assert response.status_code == 404
