import uuid

from conftest import API, MOBILE_HEADERS, bearer, login


def create_category(client, headers, name, slug, **extra):
    payload = {"name": name, "slug": slug, "is_active": True, **extra}
    return client.post(f"{API}/categories/create", json=payload, headers=headers)


def test_create_and_read_category(client, admin_headers):
    response = create_category(client, admin_headers, "Jalan Rusak", "jalan-rusak", icon="road", color="#ff0000")
    assert response.status_code == 201
    category_id = response.json()["data"]["id"]

    response = client.get(f"{API}/categories/id/{category_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["slug"] == "jalan-rusak"

    response = client.get(f"{API}/categories/slug/jalan-rusak", headers=admin_headers)
    assert response.json()["data"]["id"] == category_id

    response = client.get(f"{API}/categories/list", headers=admin_headers)
    assert [c["name"] for c in response.json()["data"]] == ["Jalan Rusak"]


def test_duplicate_category(client, admin_headers):
    assert create_category(client, admin_headers, "Banjir", "banjir").status_code == 201
    assert create_category(client, admin_headers, "Banjir", "banjir-2").status_code == 409
    assert create_category(client, admin_headers, "Banjir Besar", "banjir").status_code == 409


def test_category_reads_are_open_to_citizens(client, admin_headers, create_user):
    create_category(client, admin_headers, "Sampah", "sampah")
    create_user("warga", "warga@example.com")
    token = login(client, "warga", "password123", mobile=True).json()["data"]["token"]

    response = client.get(f"{API}/categories/list", headers=bearer(token))
    assert response.status_code == 200

    response = create_category(client, bearer(token), "Lampu Jalan", "lampu-jalan")
    assert response.status_code == 403


def test_search_with_sorting(client, admin_headers):
    create_category(client, admin_headers, "Banjir", "banjir", sort_order=2)
    create_category(client, admin_headers, "Jalan Rusak", "jalan-rusak", sort_order=1)
    create_category(client, admin_headers, "Jembatan", "jembatan", sort_order=3)

    def search(**params):
        response = client.get(f"{API}/categories/search", params=params, headers=admin_headers)
        assert response.status_code == 200
        return [c["slug"] for c in response.json()["data"]]

    assert search() == ["banjir", "jalan-rusak", "jembatan"]
    assert search(search_term="j", sort_by="name", sort_order="desc") == ["jembatan", "jalan-rusak", "banjir"]
    assert search(search_term="JALAN") == ["jalan-rusak"]
    assert search(sort_by="SORT_ORDER", sort_order="ASC") == ["jalan-rusak", "banjir", "jembatan"]
    # unknown columns fall back to name
    assert search(sort_by="id; drop table categories") == ["banjir", "jalan-rusak", "jembatan"]
    # wildcards in the term are matched literally
    assert search(search_term="%") == []
    assert search(search_term="_") == []


def test_toggle_update_and_delete(client, admin_headers):
    category_id = create_category(client, admin_headers, "Banjir", "banjir").json()["data"]["id"]
    create_category(client, admin_headers, "Sampah", "sampah")

    response = client.patch(f"{API}/categories/{category_id}/toggle", headers=admin_headers)
    assert response.json()["data"] == {"id": category_id, "is_active": False}

    response = client.put(
        f"{API}/categories/{category_id}",
        json={"name": "Banjir Rob", "slug": "banjir-rob", "is_active": True, "sort_order": 5},
        headers=admin_headers,
    )
    assert response.status_code == 200
    category = client.get(f"{API}/categories/id/{category_id}", headers=admin_headers).json()["data"]
    assert category["name"] == "Banjir Rob"
    assert category["sort_order"] == 5

    response = client.put(
        f"{API}/categories/{category_id}", json={"name": "Sampah", "slug": "sampah"}, headers=admin_headers
    )
    assert response.status_code == 409

    response = client.delete(f"{API}/categories/{category_id}", headers=admin_headers)
    assert response.json()["data"]["id"] == category_id
    assert client.get(f"{API}/categories/id/{category_id}", headers=admin_headers).status_code == 404

    # the soft-deleted name can be reused
    assert create_category(client, admin_headers, "Banjir Rob", "banjir-rob").status_code == 201


def test_missing_category(client, admin_headers):
    assert client.get(f"{API}/categories/id/{uuid.uuid4()}", headers=admin_headers).status_code == 404
    assert client.get(f"{API}/categories/slug/nothing", headers=admin_headers).status_code == 404
