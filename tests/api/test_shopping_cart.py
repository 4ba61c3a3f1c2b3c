"""
API Tests - Shopping Cart
"""
from sqlalchemy import func, select

from storefront.database.connection import get_db
from storefront.database.models import ShoppingCart


async def _new_cart(client) -> str:
    response = await client.get("/shoppingcart/generateUniqueId")
    return response.json()["cart_id"]


class TestShoppingCart:
    """/shoppingcart endpoints"""

    async def test_generate_id_is_public(self, client, seeded):
        response = await client.get("/shoppingcart/generateUniqueId")

        assert response.status_code == 200
        assert len(response.json()["cart_id"]) == 32

    async def test_add_and_list(self, client, auth_headers):
        cart_id = await _new_cart(client)

        response = await client.post(
            "/shoppingcart/add",
            headers=auth_headers,
            json={"cart_id": cart_id, "product_id": 2, "attributes": "M, Black", "quantity": 2},
        )

        assert response.status_code == 200
        item = response.json()
        assert item["price"] == "15.95"
        assert item["subtotal"] == "31.90"
        assert item["buy_now"] is True

        listing = await client.get(f"/shoppingcart/{cart_id}", headers=auth_headers)
        assert [i["item_id"] for i in listing.json()] == [item["item_id"]]

    async def test_buy_now_flag_from_client_is_ignored(self, client, auth_headers):
        cart_id = await _new_cart(client)

        response = await client.post(
            "/shoppingcart/add",
            headers=auth_headers,
            json={"cart_id": cart_id, "product_id": 1, "buy_now": False},
        )

        assert response.json()["buy_now"] is True
        listing = await client.get(f"/shoppingcart/{cart_id}", headers=auth_headers)
        assert [i["buy_now"] for i in listing.json()] == [True]

    async def test_add_unknown_product(self, client, auth_headers):
        cart_id = await _new_cart(client)

        response = await client.post(
            "/shoppingcart/add",
            headers=auth_headers,
            json={"cart_id": cart_id, "product_id": 999},
        )

        assert response.status_code == 404

    async def test_add_requires_token(self, client, seeded):
        response = await client.post(
            "/shoppingcart/add",
            json={"cart_id": "a" * 32, "product_id": 1},
        )

        assert response.status_code == 401

        async with get_db() as db:
            assert await db.scalar(select(func.count()).select_from(ShoppingCart)) == 0

    async def test_empty_cart_not_found(self, client, auth_headers):
        response = await client.get(f"/shoppingcart/{'0' * 32}", headers=auth_headers)

        assert response.status_code == 404

    async def test_update_quantity(self, client, auth_headers):
        cart_id = await _new_cart(client)
        added = await client.post(
            "/shoppingcart/add",
            headers=auth_headers,
            json={"cart_id": cart_id, "product_id": 1},
        )

        response = await client.put(
            f"/shoppingcart/update/{added.json()['item_id']}",
            headers=auth_headers,
            json={"quantity": 3},
        )

        assert response.status_code == 200
        assert response.json()["quantity"] == 3
        assert response.json()["subtotal"] == "44.97"

    async def test_update_rejects_zero_quantity(self, client, auth_headers):
        response = await client.put("/shoppingcart/update/1", headers=auth_headers, json={"quantity": 0})

        assert response.status_code == 400

    async def test_remove_item(self, client, auth_headers):
        cart_id = await _new_cart(client)
        added = await client.post(
            "/shoppingcart/add",
            headers=auth_headers,
            json={"cart_id": cart_id, "product_id": 1},
        )
        item_id = added.json()["item_id"]

        response = await client.delete(f"/shoppingcart/removeProduct/{item_id}", headers=auth_headers)
        assert response.json() == {"message": "successfully removed"}

        again = await client.delete(f"/shoppingcart/removeProduct/{item_id}", headers=auth_headers)
        assert again.status_code == 404

    async def test_empty(self, client, auth_headers):
        cart_id = await _new_cart(client)
        for product_id in (1, 2):
            await client.post(
                "/shoppingcart/add",
                headers=auth_headers,
                json={"cart_id": cart_id, "product_id": product_id},
            )

        response = await client.delete(f"/shoppingcart/empty/{cart_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == []
        listing = await client.get(f"/shoppingcart/{cart_id}", headers=auth_headers)
        assert listing.status_code == 404
