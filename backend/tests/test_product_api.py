"""
Product API Backend: End-to-End Product API Tests
==================================================

What:  Full request round trips against a real SQLite products table.
How:   The `database` fixture creates the schema in a temporary SQLite file;
       requests go through the whole middleware and validation chain.

What we test:
    ✅ Create → read back identical record, availability defaults to true
    ✅ PATCH flips availability only
    ✅ PUT replaces every field
    ✅ DELETE removes the record, later reads are 404
    ✅ List returns records in id order
"""

import pytest

from app.config import settings

ORIGIN = {"Origin": settings.frontend_url}


async def _create(client, name="Monitor", price=300):
    response = await client.post("/api/products", json={"name": name, "price": price}, headers=ORIGIN)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_then_get_returns_identical_record(test_client, database):
    created = await _create(test_client)

    assert created["name"] == "Monitor"
    assert created["price"] == 300
    assert created["availability"] is True
    assert isinstance(created["id"], int)

    response = await test_client.get(f"/api/products/{created['id']}", headers=ORIGIN)
    assert response.status_code == 200
    assert response.json() == created


@pytest.mark.asyncio
async def test_create_stores_trimmed_name_and_ignores_availability(test_client, database):
    response = await test_client.post(
        "/api/products",
        json={"name": "  Keyboard  ", "price": "49.5", "availability": False},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Keyboard"
    assert body["price"] == 49.5
    assert body["availability"] is True


@pytest.mark.asyncio
async def test_patch_toggles_availability_only(test_client, database):
    created = await _create(test_client)
    url = f"/api/products/{created['id']}"

    first = await test_client.patch(url)
    second = await test_client.patch(url)

    assert first.status_code == 200
    assert first.json() == {**created, "availability": False}
    assert second.json() == created


@pytest.mark.asyncio
async def test_put_replaces_fields(test_client, database):
    created = await _create(test_client)
    url = f"/api/products/{created['id']}"

    response = await test_client.put(
        url, json={"name": "Monitor 4K", "price": 450, "availability": False}
    )

    assert response.status_code == 200
    assert response.json() == {
        "id": created["id"], "name": "Monitor 4K", "price": 450, "availability": False,
    }
    assert (await test_client.get(url)).json() == response.json()


@pytest.mark.asyncio
async def test_invalid_put_leaves_record_untouched(test_client, database):
    created = await _create(test_client)
    url = f"/api/products/{created['id']}"

    response = await test_client.put(url, json={"name": "", "price": -1, "availability": True})

    assert response.status_code == 400
    assert (await test_client.get(url)).json() == created


@pytest.mark.asyncio
async def test_delete_then_get_is_404(test_client, database):
    created = await _create(test_client)
    url = f"/api/products/{created['id']}"

    deleted = await test_client.delete(url)
    assert deleted.status_code == 200
    assert deleted.json() == "Product deleted"

    response = await test_client.get(url)
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"

    again = await test_client.delete(url)
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_missing_id_is_404_for_every_id_route(test_client, database):
    assert (await test_client.get("/api/products/999")).status_code == 404
    assert (await test_client.patch("/api/products/999")).status_code == 404
    assert (await test_client.delete("/api/products/999")).status_code == 404
    put = await test_client.put(
        "/api/products/999", json={"name": "Monitor", "price": 1, "availability": True}
    )
    assert put.status_code == 404


@pytest.mark.asyncio
async def test_list_returns_products_in_id_order(test_client, database):
    empty = await test_client.get("/api/products")
    assert empty.status_code == 200
    assert empty.json() == []

    first = await _create(test_client, name="Monitor")
    second = await _create(test_client, name="Keyboard", price=49)

    response = await test_client.get("/api/products")
    assert [p["id"] for p in response.json()] == [first["id"], second["id"]]
    assert [p["name"] for p in response.json()] == ["Monitor", "Keyboard"]


@pytest.mark.asyncio
@pytest.mark.parametrize("product_id", ["99999999999999999999", "2147483648", "-2147483649"])
async def test_id_beyond_column_range_is_404(test_client, database, product_id):
    url = f"/api/products/{product_id}"

    assert (await test_client.get(url)).status_code == 404
    assert (await test_client.patch(url)).status_code == 404
    assert (await test_client.delete(url)).status_code == 404
    put = await test_client.put(url, json={"name": "Monitor", "price": 1, "availability": True})
    assert put.status_code == 404
    assert put.json()["error"] == "not_found"
