"""
Test Suite Configuration
"""
import os

os.environ["APP_ENV"] = "testing"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-at-least-32-bytes!!"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["PUBLIC_BASE_URL"] = "http://shop.test"

from typing import AsyncGenerator, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from storefront.database.connection import close_database, get_db, init_database
from storefront.database.seed import seed_catalog
from storefront.serving.api import create_api_app
from storefront.services.notifications import get_mailer
from storefront.services.payments import ChargeResult, get_payment_gateway


class FakePaymentGateway:
    """Records charges instead of calling Stripe"""

    def __init__(self):
        self.charges: List[Dict] = []
        self.error: Optional[Exception] = None

    async def create_charge(self, amount, currency, source, metadata=None) -> ChargeResult:
        if self.error is not None:
            raise self.error
        self.charges.append({
            "amount": amount,
            "currency": currency,
            "source": source,
            "metadata": metadata,
        })
        return ChargeResult(
            id=f"ch_{len(self.charges)}",
            amount=amount,
            currency=currency,
            status="succeeded",
            description=None,
        )


class FakeMailer:
    """Keeps sent messages in memory"""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.error: Optional[Exception] = None

    async def send(self, to: str, subject: str, html: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append({"to": to, "subject": subject, "html": html})


@pytest.fixture
async def database(tmp_path):
    """Fresh SQLite database with the full schema"""
    await init_database(f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}", create_schema=True)
    yield
    await close_database()


@pytest.fixture
async def seeded(database):
    """Database loaded with the reference catalog"""
    async with get_db() as db:
        await seed_catalog(db)


@pytest.fixture
def gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def app(database, gateway, mailer):
    app = create_api_app()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_mailer] = lambda: mailer
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register_customer(client):
    """Register through the API and return the response body"""

    async def _register(name: str = "Jane Doe", email: str = "jane@example.com",
                        password: str = "s3cret-pass") -> Dict:
        response = await client.post(
            "/customers",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
async def customer(register_customer, seeded) -> Dict:
    """Registered customer with its session token"""
    body = await register_customer()
    return {
        "customer_id": body["customer"]["customer_id"],
        "token": body["accessToken"],
    }


@pytest.fixture
def auth_headers(customer) -> Dict[str, str]:
    return {"user-key": customer["token"]}
