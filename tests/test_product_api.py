"""HTTP-level tests for the /api/shop catalog endpoints."""
import pytest

from shared.config.database import INTEGER_MAX
from shared.errors import ConflictError
from services.product_service import service as product_service_module
from services.product_service.models import Product


def product_body(**overrides) -> dict:
    body = {"name": "Golden Apple", "type": "Fruit", "country": "Ukraine", "price": 15}
    body.update(overrides)
    return body


class TestCreateProduct:

    async def test_requires_token(self, client, catalog):
        response = await client.post("/api/shop", json=product_body())

        assert response.status_code == 401
        assert response.json() == {"message": "Please provide a valid Authorization header"}

    async def test_creates_with_slug_alias(self, client, catalog, auth_headers):
        response = await client.post("/api/shop", json=product_body(), headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["alias"] == "golden-apple"
        assert data["typeId"] == catalog["type_id"]
        assert data["countryId"] == catalog["country_id"]
        assert data["price"] == 15

    async def test_accepts_ids_for_lookups(self, client, catalog, auth_headers):
        body = product_body(type=catalog["type_id"], country=str(catalog["country_id"]))

        response = await client.post("/api/shop", json=body, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["countryId"] == catalog["country_id"]

    async def test_same_name_gets_suffixed_alias(self, client, catalog, auth_headers):
        response = await client.post("/api/shop", json=product_body(name="Apple"), headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["alias"] == "apple-2"

    async def test_cyrillic_name(self, client, catalog, auth_headers):
        response = await client.post("/api/shop", json=product_body(name="Яблука Гала"), headers=auth_headers)

        assert response.json()["alias"] == "yabluka-gala"

    async def test_explicit_alias_is_slugged(self, client, catalog, auth_headers):
        response = await client.post(
            "/api/shop", json=product_body(alias="  Green APPLE! "), headers=auth_headers
        )

        assert response.json()["alias"] == "green-apple"

    async def test_price_defaults_to_zero(self, client, catalog, auth_headers):
        body = product_body()
        del body["price"]

        response = await client.post("/api/shop", json=body, headers=auth_headers)

        assert response.json()["price"] == 0

    async def test_empty_description_is_not_stored(self, client, catalog, auth_headers):
        response = await client.post("/api/shop", json=product_body(description=""), headers=auth_headers)

        assert response.json()["description"] is None

    @pytest.mark.parametrize("name", ["", "   "])
    async def test_missing_name(self, client, catalog, auth_headers, name):
        response = await client.post("/api/shop", json=product_body(name=name), headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"message": "Product name not specified"}

    async def test_unknown_type(self, client, catalog, auth_headers):
        response = await client.post("/api/shop", json=product_body(type="Vegetable"), headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"message": "The specified type was not found (Vegetable)."}

    async def test_unknown_country(self, client, catalog, auth_headers):
        response = await client.post("/api/shop", json=product_body(country=999), headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"message": "The specified country was not found (999)."}

    async def test_negative_price(self, client, catalog, auth_headers):
        response = await client.post("/api/shop", json=product_body(price=-1), headers=auth_headers)
        assert response.status_code == 400

    async def test_lost_alias_race_is_a_conflict(self, client, catalog, auth_headers, monkeypatch):
        async def stale_alias(db, base, **kwargs):
            # another writer took the alias after it was checked
            return "apple"

        monkeypatch.setattr(product_service_module, "generate_unique_alias", stale_alias)

        response = await client.post("/api/shop", json=product_body(), headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"message": "A product with this alias already exists"}

    async def test_alias_exhaustion_is_a_conflict(self, client, catalog, auth_headers, monkeypatch):
        async def exhausted(db, base, **kwargs):
            raise ConflictError(f"Could not generate a unique alias for '{base}'")

        monkeypatch.setattr(product_service_module, "generate_unique_alias", exhausted)

        response = await client.post("/api/shop", json=product_body(), headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"].startswith("Could not generate a unique alias")


class TestUpdateProduct:

    async def test_rename_keeps_alias(self, client, catalog, auth_headers):
        response = await client.patch(
            f"/api/shop/{catalog['apple_id']}", json={"name": "Red Apple"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Red Apple"
        assert response.json()["alias"] == "apple"

    async def test_explicit_alias_is_deduplicated(self, client, catalog, auth_headers):
        response = await client.patch(
            f"/api/shop/{catalog['apple_id']}", json={"alias": "Pear"}, headers=auth_headers
        )

        assert response.json()["alias"] == "pear-2"

    async def test_own_alias_is_not_a_collision(self, client, catalog, auth_headers):
        response = await client.patch(
            f"/api/shop/{catalog['apple_id']}", json={"alias": "apple"}, headers=auth_headers
        )

        assert response.json()["alias"] == "apple"

    async def test_price_and_lookups(self, client, catalog, auth_headers):
        await client.post("/api/country", json={"name": "Poland"})

        response = await client.patch(
            f"/api/shop/{catalog['pear_id']}",
            json={"price": 0, "country": "poland"},
            headers=auth_headers,
        )

        data = response.json()
        assert data["price"] == 0
        assert data["countryId"] != catalog["country_id"]

    async def test_clear_image_flag(self, client, catalog, auth_headers, session_factory):
        async with session_factory() as session:
            apple = await session.get(Product, catalog["apple_id"])
            apple.image = "apple.jpg"
            await session.commit()

        response = await client.patch(
            f"/api/shop/{catalog['apple_id']}", json={"clearImg": True}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["image"] is None

    async def test_price_beyond_column_range(self, client, catalog, auth_headers):
        response = await client.patch(
            f"/api/shop/{catalog['apple_id']}", json={"price": INTEGER_MAX + 1}, headers=auth_headers
        )
        assert response.status_code == 400

    async def test_unknown_type(self, client, catalog, auth_headers):
        response = await client.patch(
            f"/api/shop/{catalog['pear_id']}", json={"type": "Meat"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json() == {"message": "The specified type (Meat) was not found"}

    async def test_missing_product(self, client, auth_headers):
        response = await client.patch("/api/shop/999", json={"name": "Ghost"}, headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"message": "No product found with the specified ID (999)"}

    async def test_requires_token(self, client, catalog):
        response = await client.patch(f"/api/shop/{catalog['pear_id']}", json={"name": "Ghost"})
        assert response.status_code == 401


class TestReadProducts:

    async def test_list_all(self, client, catalog):
        response = await client.get("/api/shop")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert {row["alias"] for row in data["rows"]} == {"apple", "pear"}
        assert data["rows"][0]["type"] == {"id": catalog["type_id"], "name": "Fruit"}

    async def test_filter_by_type_name(self, client, catalog):
        response = await client.get("/api/shop", params={"type": "fruit"})
        assert response.json()["count"] == 2

    async def test_skip_ids(self, client, catalog):
        response = await client.get("/api/shop", params={"skip": f"{catalog['apple_id']},x"})

        data = response.json()
        assert data["count"] == 1
        assert [row["alias"] for row in data["rows"]] == ["pear"]

    async def test_pagination(self, client, catalog):
        response = await client.get("/api/shop", params={"page": 2, "limit": 1})

        data = response.json()
        assert data["count"] == 2
        assert len(data["rows"]) == 1

    async def test_random_order(self, client, catalog):
        response = await client.get("/api/shop", params={"random": "true"})
        assert response.json()["count"] == 2

    async def test_get_by_id(self, client, catalog):
        response = await client.get(f"/api/shop/{catalog['apple_id']}")

        assert response.status_code == 200
        assert response.json()["country"] == {"id": catalog["country_id"], "name": "Ukraine"}

    async def test_get_by_alias_is_case_insensitive(self, client, catalog):
        response = await client.get("/api/shop/alias/APPLE")

        assert response.status_code == 200
        assert response.json()["id"] == catalog["apple_id"]

    async def test_unknown_alias(self, client, catalog):
        response = await client.get("/api/shop/alias/plum")

        assert response.status_code == 404
        assert response.json() == {"message": "No product found with the specified alias (plum)"}

    async def test_unknown_id(self, client):
        response = await client.get("/api/shop/999")

        assert response.status_code == 404
        assert response.json() == {"message": "No product found with the specified ID (999)"}

    async def test_non_numeric_id(self, client):
        response = await client.get("/api/shop/abc")
        assert response.status_code == 400


class TestDeleteProduct:

    async def test_deletes(self, client, catalog, auth_headers):
        response = await client.delete(f"/api/shop/{catalog['pear_id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": "deleted"}
        assert (await client.get(f"/api/shop/{catalog['pear_id']}")).status_code == 404

    async def test_requires_token(self, client, catalog):
        response = await client.delete(f"/api/shop/{catalog['pear_id']}")
        assert response.status_code == 401

    async def test_missing_product(self, client, auth_headers):
        response = await client.delete("/api/shop/999", headers=auth_headers)
        assert response.status_code == 404
