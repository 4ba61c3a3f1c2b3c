"""
API Tests - Orders and Checkout
"""
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config import get_settings
from storefront.database.connection import get_db
from storefront.database.models import Order, ShoppingCart
from storefront.errors import NotificationError, PaymentGatewayError
from storefront.security import issue_confirmation_token
from storefront.serving.api import create_api_app
from storefront.services.notifications import get_mailer
from storefront.services.payments import get_payment_gateway


async def _cart_with_items(client, auth_headers) -> str:
    cart_id = (await client.get("/shoppingcart/generateUniqueId")).json()["cart_id"]
    await client.post(
        "/shoppingcart/add",
        headers=auth_headers,
        json={"cart_id": cart_id, "product_id": 1, "attributes": "L, Red", "quantity": 2},
    )
    return cart_id


async def _place_order(client, auth_headers, shipping_id=1, tax_id=1) -> int:
    cart_id = await _cart_with_items(client, auth_headers)
    response = await client.post(
        "/orders",
        headers=auth_headers,
        json={"cart_id": cart_id, "shipping_id": shipping_id, "tax_id": tax_id},
    )
    assert response.status_code == 201, response.text
    return response.json()["order_id"]


class TestOrders:
    """/orders endpoints"""

    async def test_create_and_summarize(self, client, auth_headers):
        order_id = await _place_order(client, auth_headers)

        response = await client.get(f"/orders/{order_id}", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["order_id"] == order_id
        assert len(body["order_items"]) == 1
        item = body["order_items"][0]
        assert item["product_name"] == "Arc d'Triomphe"
        assert item["attributes"] == "L, Red"
        assert item["unit_cost"] == "14.99"
        assert item["subtotal"] == "29.98"

    async def test_total_includes_tax_and_shipping(self, client, auth_headers):
        order_id = await _place_order(client, auth_headers, shipping_id=1, tax_id=1)

        response = await client.get(f"/orders/shortDetail/{order_id}", headers=auth_headers)

        body = response.json()
        assert body["total_amount"] == "52.53"
        assert body["status"] == "pending"
        assert body["name"] == "Jane Doe"
        assert body["shipped_on"] is None

    async def test_customer_orders(self, client, auth_headers, customer):
        first = await _place_order(client, auth_headers)
        second = await _place_order(client, auth_headers, tax_id=2)

        response = await client.get(f"/orders/inCustomer/{customer['customer_id']}", headers=auth_headers)

        assert {o["order_id"] for o in response.json()} == {first, second}

    async def test_cart_is_kept_after_ordering(self, client, auth_headers):
        cart_id = await _cart_with_items(client, auth_headers)
        await client.post(
            "/orders",
            headers=auth_headers,
            json={"cart_id": cart_id, "shipping_id": 1, "tax_id": 1},
        )

        listing = await client.get(f"/shoppingcart/{cart_id}", headers=auth_headers)

        assert listing.status_code == 200

    async def test_create_requires_token(self, client, auth_headers):
        cart_id = await _cart_with_items(client, auth_headers)

        response = await client.post(
            "/orders",
            json={"cart_id": cart_id, "shipping_id": 1, "tax_id": 1},
        )

        assert response.status_code == 401
        async with get_db() as db:
            assert await db.scalar(select(func.count()).select_from(Order)) == 0

    async def test_empty_cart_rejected(self, client, auth_headers):
        response = await client.post(
            "/orders",
            headers=auth_headers,
            json={"cart_id": "0" * 32, "shipping_id": 1, "tax_id": 1},
        )

        assert response.status_code == 400
        assert response.json()["error"]["field"] == "cart_id"

    async def test_unknown_shipping(self, client, auth_headers):
        cart_id = await _cart_with_items(client, auth_headers)

        response = await client.post(
            "/orders",
            headers=auth_headers,
            json={"cart_id": cart_id, "shipping_id": 99, "tax_id": 1},
        )

        assert response.status_code == 404

    async def test_unknown_order(self, client, auth_headers):
        for path in ("/orders/999", "/orders/shortDetail/999"):
            response = await client.get(path, headers=auth_headers)
            assert response.status_code == 404


class TestOrderConfirmation:
    """GET /order/status/{token}"""

    async def test_token_confirms_order(self, client, auth_headers, customer):
        order_id = await _place_order(client, auth_headers)
        token = issue_confirmation_token(customer["customer_id"], order_id)

        response = await client.get(f"/order/status/{token}")

        assert response.status_code == 200
        assert response.json() == {"message": "Status updated successfully"}
        detail = await client.get(f"/orders/shortDetail/{order_id}", headers=auth_headers)
        assert detail.json()["status"] == "confirmed"

    async def test_replayed_token_is_harmless(self, client, auth_headers, customer):
        order_id = await _place_order(client, auth_headers)
        token = issue_confirmation_token(customer["customer_id"], order_id)

        await client.get(f"/order/status/{token}")
        response = await client.get(f"/order/status/{token}")

        assert response.status_code == 200

    async def test_forged_token(self, client, seeded):
        response = await client.get("/order/status/forged.token.value")

        assert response.status_code == 401
        assert response.content == b""

    async def test_token_for_missing_order(self, client, seeded):
        response = await client.get(f"/order/status/{issue_confirmation_token(1, 999)}")

        assert response.status_code == 404


class TestCheckout:
    """POST /stripe/charge"""

    async def test_charge_and_email(self, client, auth_headers, gateway, mailer):
        order_id = await _place_order(client, auth_headers)

        response = await client.post(
            "/stripe/charge",
            headers=auth_headers,
            json={"stripeToken": "tok_visa", "order_id": order_id, "email": "jane@example.com"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Successful Checkout"
        assert body["amount"] == 5253
        assert body["currency"] == "usd"
        assert body["stripeToken"] == "tok_visa"

        assert gateway.charges[0]["source"] == "tok_visa"
        assert gateway.charges[0]["metadata"] == {"order_id": str(order_id)}

        assert len(mailer.sent) == 1
        message = mailer.sent[0]
        assert message["to"] == "jane@example.com"
        assert message["subject"] == "Order Confirmation [ACTION REQUIRED]"
        assert "http://shop.test/order/status/" in message["html"]

    async def test_emailed_link_confirms_order(self, client, auth_headers, mailer):
        order_id = await _place_order(client, auth_headers)
        await client.post(
            "/stripe/charge",
            headers=auth_headers,
            json={"stripeToken": "tok_visa", "order_id": order_id, "email": "jane@example.com"},
        )
        html = mailer.sent[0]["html"]
        token = html.split("/order/status/", 1)[1].split('"', 1)[0]

        response = await client.get(f"/order/status/{token}")

        assert response.status_code == 200

    async def test_unknown_order_is_not_charged(self, client, auth_headers, gateway):
        response = await client.post(
            "/stripe/charge",
            headers=auth_headers,
            json={"stripeToken": "tok_visa", "order_id": 999, "email": "jane@example.com"},
        )

        assert response.status_code == 404
        assert gateway.charges == []

    async def test_declined_card(self, client, auth_headers, gateway, mailer):
        order_id = await _place_order(client, auth_headers)
        gateway.error = PaymentGatewayError("Your card was declined.")

        response = await client.post(
            "/stripe/charge",
            headers=auth_headers,
            json={"stripeToken": "tok_chargeDeclined", "order_id": order_id, "email": "jane@example.com"},
        )

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "UPS_01"
        assert response.json()["error"]["message"] == "Payment could not be processed"
        assert "declined" not in response.text
        assert mailer.sent == []

    async def test_mail_failure_reported(self, client, auth_headers, gateway, mailer):
        order_id = await _place_order(client, auth_headers)
        mailer.error = NotificationError("SendGrid rejected message: 401")

        response = await client.post(
            "/stripe/charge",
            headers=auth_headers,
            json={"stripeToken": "tok_visa", "order_id": order_id, "email": "jane@example.com"},
        )

        assert response.status_code == 502
        assert len(gateway.charges) == 1

    async def test_requires_token(self, client, seeded):
        response = await client.post(
            "/stripe/charge",
            json={"stripeToken": "tok_visa", "order_id": 1, "email": "jane@example.com"},
        )

        assert response.status_code == 401


class TestOrderSnapshot:
    """Orders keep their line items after the cart changes"""

    async def test_emptying_cart_keeps_order_items(self, client, auth_headers):
        cart_id = await _cart_with_items(client, auth_headers)
        created = await client.post(
            "/orders",
            headers=auth_headers,
            json={"cart_id": cart_id, "shipping_id": 2, "tax_id": 2},
        )
        order_id = created.json()["order_id"]

        await client.delete(f"/shoppingcart/empty/{cart_id}", headers=auth_headers)
        response = await client.get(f"/orders/{order_id}", headers=auth_headers)

        assert len(response.json()["order_items"]) == 1
        detail = await client.get(f"/orders/shortDetail/{order_id}", headers=auth_headers)
        assert detail.json()["total_amount"] == "39.98"


class TestCommitFailure:
    """The response is only sent after the request transaction commits"""

    async def test_failed_commit_is_reported(self, client, auth_headers, monkeypatch):
        cart_id = (await client.get("/shoppingcart/generateUniqueId")).json()["cart_id"]

        async def failing_commit(self):
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(AsyncSession, "commit", failing_commit)
        response = await client.post(
            "/shoppingcart/add",
            headers=auth_headers,
            json={"cart_id": cart_id, "product_id": 1},
        )
        monkeypatch.undo()

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "SRV_02"
        async with get_db() as db:
            assert await db.scalar(select(func.count()).select_from(ShoppingCart)) == 0


@pytest.fixture
def prefixed_app(database, gateway, mailer, monkeypatch):
    """App mounted under API_PREFIX=/api"""
    monkeypatch.setenv("API_PREFIX", "/api")
    get_settings.cache_clear()

    app = create_api_app()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_mailer] = lambda: mailer
    yield app

    monkeypatch.delenv("API_PREFIX")
    get_settings.cache_clear()


class TestCheckoutWithPrefix:
    """Confirmation links follow API_PREFIX"""

    async def test_emailed_link_reaches_prefixed_route(self, prefixed_app, seeded, mailer):
        transport = ASGITransport(app=prefixed_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            registered = await client.post(
                "/api/customers",
                json={"name": "Jane Doe", "email": "jane@example.com", "password": "s3cret-pass"},
            )
            headers = {"user-key": registered.json()["accessToken"]}

            cart_id = (await client.get("/api/shoppingcart/generateUniqueId")).json()["cart_id"]
            await client.post(
                "/api/shoppingcart/add",
                headers=headers,
                json={"cart_id": cart_id, "product_id": 1},
            )
            created = await client.post(
                "/api/orders",
                headers=headers,
                json={"cart_id": cart_id, "shipping_id": 1, "tax_id": 1},
            )
            order_id = created.json()["order_id"]

            charged = await client.post(
                "/api/stripe/charge",
                headers=headers,
                json={"stripeToken": "tok_visa", "order_id": order_id, "email": "jane@example.com"},
            )
            assert charged.status_code == 201

            link = mailer.sent[0]["html"].split('href="', 1)[1].split('"', 1)[0]
            assert link.startswith("http://shop.test/api/order/status/")

            response = await client.get(link.replace("http://shop.test", ""))
            assert response.status_code == 200

            detail = await client.get(f"/api/orders/shortDetail/{order_id}", headers=headers)
            assert detail.json()["status"] == "confirmed"
