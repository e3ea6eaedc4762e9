# tests/test_products.py


def create_product(client, headers, **overrides):
    data = {"name": "MCB 32A", "stock": 25, "dimension": "Pc", "threshold": 5}
    data.update(overrides)
    response = client.post("/api/products", json=data, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_product_mutations_require_token(client):
    assert client.post("/api/products", json={"name": "Wire"}).status_code == 401
    assert client.put("/api/products/1", json={"stock": 1}).status_code == 401
    assert client.delete("/api/products/1").status_code == 401


def test_create_product_defaults(client, staff_headers):
    response = client.post("/api/products", json={"name": "Wire 1.5mm"}, headers=staff_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["stock"] == 0
    assert body["dimension"] == "Pc"
    assert body["threshold"] is None
    assert body["createdAt"] and body["updatedAt"]


def test_create_product_rejects_unknown_dimension(client, staff_headers):
    response = client.post("/api/products", json={"name": "Wire", "dimension": "Litre"}, headers=staff_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation error"
    assert "dimension" in body["errors"]


def test_create_product_requires_name(client, staff_headers):
    response = client.post("/api/products", json={"stock": 3}, headers=staff_headers)

    assert response.status_code == 400
    assert "name" in response.json()["errors"]


def test_read_products_is_public(client, staff_headers):
    first = create_product(client, staff_headers, name="Switch")
    second = create_product(client, staff_headers, name="Socket", dimension="Box")

    response = client.get("/api/products")
    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [second["id"], first["id"]]

    one = client.get(f"/api/products/{first['id']}")
    assert one.status_code == 200
    assert one.json()["name"] == "Switch"
    assert client.get("/api/products/9999").status_code == 404


def test_update_product_revalidates(client, staff_headers):
    product = create_product(client, staff_headers)

    response = client.put(f"/api/products/{product['id']}", json={"stock": 40}, headers=staff_headers)
    assert response.status_code == 200
    assert response.json()["stock"] == 40
    assert response.json()["name"] == "MCB 32A"
    assert response.json()["threshold"] == 5

    invalid = client.put(
        f"/api/products/{product['id']}", json={"dimension": "Barrel"}, headers=staff_headers
    )
    assert invalid.status_code == 400
    assert "dimension" in invalid.json()["errors"]

    cleared = client.put(f"/api/products/{product['id']}", json={"name": None}, headers=staff_headers)
    assert cleared.status_code == 400
    assert "name" in cleared.json()["errors"]


def test_update_missing_product(client, staff_headers):
    assert client.put("/api/products/9999", json={"stock": 1}, headers=staff_headers).status_code == 404


def test_delete_product(client, staff_headers):
    product = create_product(client, staff_headers)

    response = client.delete(f"/api/products/{product['id']}", headers=staff_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Product deleted successfully"
    assert response.json()["product"]["id"] == product["id"]

    assert client.delete(f"/api/products/{product['id']}", headers=staff_headers).status_code == 404
