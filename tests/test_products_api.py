"""HTTP tests for product endpoints."""

from __future__ import annotations

import asyncpg
import pytest


def _list_row(product_id: int, name: str = "Book") -> dict:
    return {
        "id": product_id,
        "name": name,
        "stock": 3,
        "price": 50000,
        "shop_id": 1,
        "shop_name": "Acme",
    }


def _product_row(product_id: int = 1, **overrides) -> dict:
    row = {
        "id": product_id,
        "name": "Blue Shirt",
        "stock": 4,
        "price": 120000,
        "images": ["a.png"],
        "shop_id": 1,
    }
    row.update(overrides)
    return row


@pytest.mark.asyncio
async def test_list_products_paginates_filtered_rows(authed_client, fake_db):
    fake_db.queue("fetch_val", 12)
    fake_db.queue("fetch_all", [_list_row(i) for i in range(6, 11)])

    resp = await authed_client.get("/products", params={"productName": "book", "limit": "5", "page": "2"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Success get products data"
    data = body["data"]
    assert data["totalData"] == 12
    assert data["totalPages"] == 3
    assert data["currentPage"] == 2
    assert len(data["products"]) == 5
    assert data["products"][0]["shop"] == {"id": 1, "name": "Acme"}

    (count_sql, count_args), = fake_db.calls_to("fetch_val")
    assert "p.name ILIKE $1" in count_sql
    assert count_args == ("%book%",)
    (data_sql, data_args), = fake_db.calls_to("fetch_all")
    assert "LIMIT $2" in data_sql and "OFFSET $3" in data_sql
    assert data_args == ("%book%", 5, 5)


@pytest.mark.asyncio
async def test_list_products_without_params_has_no_predicates(authed_client, fake_db):
    fake_db.queue("fetch_val", 0)

    resp = await authed_client.get("/products")

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data == {"totalData": 0, "totalPages": 0, "currentPage": 1, "products": []}
    (count_sql, count_args), = fake_db.calls_to("fetch_val")
    assert "WHERE" not in count_sql
    assert count_args == ()
    (_, data_args), = fake_db.calls_to("fetch_all")
    assert data_args == (10, 0)


@pytest.mark.asyncio
async def test_list_products_empty_params_are_ignored(authed_client, fake_db):
    resp = await authed_client.get("/products", params={"productName": "", "stock": "", "shopName": ""})

    assert resp.status_code == 200
    (count_sql, _), = fake_db.calls_to("fetch_val")
    assert "WHERE" not in count_sql


@pytest.mark.asyncio
async def test_list_products_filters_on_shop_and_stock(authed_client, fake_db):
    resp = await authed_client.get("/products", params={"productName": "SHIRT", "stock": "4", "shopName": "acme"})

    assert resp.status_code == 200
    (count_sql, count_args), = fake_db.calls_to("fetch_val")
    assert "p.name ILIKE $1" in count_sql
    assert "p.stock::text = $2" in count_sql
    assert "s.name ILIKE $3" in count_sql
    assert count_args == ("%SHIRT%", "4", "%acme%")


@pytest.mark.asyncio
async def test_list_products_bad_paging_falls_back(authed_client, fake_db):
    resp = await authed_client.get("/products", params={"limit": "ten", "page": "0"})

    assert resp.status_code == 200
    assert resp.json()["data"]["currentPage"] == 1
    (_, data_args), = fake_db.calls_to("fetch_all")
    assert data_args == (10, 0)


@pytest.mark.asyncio
async def test_get_product(authed_client, fake_db):
    fake_db.queue(
        "fetch_one",
        _product_row(shop_name="Acme", shop_admin_email="a@x.com", shop_user_id=7),
    )

    resp = await authed_client.get("/products/1")

    assert resp.status_code == 200
    product = resp.json()["data"]["product"]
    assert product["name"] == "Blue Shirt"
    assert product["shop"] == {"id": 1, "name": "Acme", "adminEmail": "a@x.com", "userId": 7}


@pytest.mark.asyncio
async def test_get_missing_product(authed_client):
    resp = await authed_client.get("/products/99")

    assert resp.status_code == 404
    assert resp.json()["message"] == "Data not found"


@pytest.mark.asyncio
async def test_create_product(authed_client, fake_db):
    fake_db.queue("fetch_one", _product_row(5))

    resp = await authed_client.post(
        "/products",
        json={"name": "Blue Shirt", "stock": 4, "price": 120000, "shopId": 1, "images": ["a.png"]},
    )

    assert resp.status_code == 201
    assert resp.json()["data"]["newProduct"]["id"] == 5
    (_, args), = fake_db.calls_to("fetch_one")
    assert args == ("Blue Shirt", 4, 120000, ["a.png"], 1)


@pytest.mark.asyncio
async def test_create_product_missing_fields(authed_client, fake_db):
    resp = await authed_client.post("/products", json={"name": "Blue Shirt"})

    assert resp.status_code == 400
    assert resp.json()["isSuccess"] is False
    assert fake_db.calls == []


@pytest.mark.asyncio
async def test_create_product_for_unknown_shop(authed_client, fake_db):
    fake_db.queue("fetch_one", asyncpg.exceptions.ForeignKeyViolationError("fk"))

    resp = await authed_client.post("/products", json={"name": "X", "stock": 1, "price": 1, "shopId": 42})

    assert resp.status_code == 400
    assert resp.json()["status"] == "Failed"


@pytest.mark.asyncio
async def test_update_product_is_scoped_to_id(authed_client, fake_db):
    fake_db.queue("fetch_one", {"ok": 1}, _product_row(3, name="Red Shirt"))

    resp = await authed_client.put("/products/3", json={"name": "Red Shirt"})

    assert resp.status_code == 200
    assert resp.json()["data"]["product"]["name"] == "Red Shirt"
    update_sql, update_args = fake_db.calls_to("fetch_one")[1]
    assert "WHERE id = $1" in update_sql
    assert update_args == (3, "Red Shirt", None, None, None)


@pytest.mark.asyncio
async def test_update_missing_product_does_not_write(authed_client, fake_db):
    resp = await authed_client.put("/products/99", json={"name": "Red Shirt"})

    assert resp.status_code == 404
    assert not fake_db.executed("UPDATE")


@pytest.mark.asyncio
async def test_delete_product(authed_client, fake_db):
    fake_db.queue("fetch_one", {"ok": 1})

    resp = await authed_client.delete("/products/3")

    assert resp.status_code == 200
    assert resp.json()["data"] is None
    (delete_sql, delete_args), = fake_db.calls_to("execute")
    assert "WHERE id = $1" in delete_sql
    assert delete_args == (3,)


@pytest.mark.asyncio
async def test_delete_missing_product_does_not_write(authed_client, fake_db):
    resp = await authed_client.delete("/products/99")

    assert resp.status_code == 404
    assert fake_db.calls_to("execute") == []


@pytest.mark.asyncio
async def test_non_numeric_id_is_rejected(authed_client):
    resp = await authed_client.get("/products/abc")

    assert resp.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["get", "put", "delete"])
@pytest.mark.parametrize("product_id", ["2147483648", "0", "-1"])
async def test_out_of_range_id_is_rejected_before_querying(authed_client, fake_db, method, product_id):
    kwargs = {"json": {"name": "X"}} if method == "put" else {}

    resp = await getattr(authed_client, method)(f"/products/{product_id}", **kwargs)

    assert resp.status_code == 400
    assert resp.json()["message"].startswith("product_id")
    assert fake_db.calls == []


@pytest.mark.asyncio
async def test_largest_serial_id_reaches_the_database(authed_client, fake_db):
    resp = await authed_client.get("/products/2147483647")

    assert resp.status_code == 404
    (_, args), = fake_db.calls_to("fetch_one")
    assert args == (2147483647,)


@pytest.mark.asyncio
async def test_list_products_huge_paging_is_clamped_to_bigint(authed_client, fake_db):
    resp = await authed_client.get(
        "/products",
        params={"limit": "99999999999999999999", "page": "99999999999999999999"},
    )

    assert resp.status_code == 200
    (_, data_args), = fake_db.calls_to("fetch_all")
    assert data_args == (2**63 - 1, 2**63 - 1)
