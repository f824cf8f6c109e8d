import os
import tempfile
from datetime import timedelta
from decimal import Decimal

# configure before anything under app/ is imported
_TMP_DIR = tempfile.mkdtemp(prefix="barbershop-tests-")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DB_TYPE"] = "sqlite"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/test.db"
os.environ["CHAT_API_KEY"] = "test-chat-key"
os.environ["CLOUDINARY_CLOUD_NAME"] = "demo-cloud"
os.environ["CLOUDINARY_UPLOAD_PRESET"] = "demo-preset"

import httpx  # noqa: E402
import pytest  # noqa: E402

from app.core.db import AsyncSessionLocal, Base, engine  # noqa: E402
from app.core.security import create_access_token, hash_password  # noqa: E402
from app.models.billing_models.voucher_models import DiscountType, Voucher  # noqa: E402
from app.models.inventory_models import Product  # noqa: E402
from app.models.user_models import User  # noqa: E402
from app.utils.datetime_utils import utcnow  # noqa: E402
from main import app  # noqa: E402

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
async def reset_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


async def create_user(db, username, role="customer", password=PASSWORD):
    user = User(
        username=username,
        full_name=username.title(),
        password_hash=hash_password(password),
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(
        {"sub": user.username, "user_id": user.id, "role": user.role},
        token_version=user.token_version,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin(db):
    return await create_user(db, "admin", role="admin")


@pytest.fixture
async def cashier(db):
    return await create_user(db, "cashier", role="cashier")


@pytest.fixture
async def customer(db):
    return await create_user(db, "budi")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def cashier_headers(cashier):
    return auth_headers(cashier)


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def make_product(db):
    async def _make(name="Pomade", price="48000", stock=20, **extra):
        product = Product(name=name, price=Decimal(price), stock=stock, **extra)
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product
    return _make


@pytest.fixture
def make_voucher(db):
    async def _make(code="SAVE10", discount_type=DiscountType.PERCENTAGE, discount_value="10", **extra):
        values = {
            "min_purchase": Decimal("0"),
            "is_active": True,
            "expires_at": utcnow() + timedelta(days=7),
            "used_count": 0,
        }
        values.update(extra)
        voucher = Voucher(
            code=code,
            discount_type=discount_type,
            discount_value=Decimal(discount_value),
            **values,
        )
        db.add(voucher)
        await db.commit()
        await db.refresh(voucher)
        return voucher
    return _make


CHECKOUT_FORM = {
    "customer_name": "Budi Santoso",
    "customer_phone": "081234567890",
    "shipping_address": "Jl. Sariwangi No. 1",
}


@pytest.fixture
def place_order(client, customer_headers, make_product):
    """Fill the customer's cart with one product and check out."""
    async def _place(payment_method="transfer", price="100000", quantity=2, voucher_code=None, proof="https://img/proof.jpg"):
        product = await make_product(name=f"Product {price}-{quantity}", price=price)
        resp = await client.post(
            "/cart/items", json={"product_id": product.id, "quantity": quantity}, headers=customer_headers
        )
        assert resp.status_code == 200, resp.text
        body = dict(CHECKOUT_FORM, payment_method=payment_method, voucher_code=voucher_code)
        if payment_method == "transfer":
            body["payment_proof_url"] = proof
        resp = await client.post("/orders/checkout", json=body, headers=customer_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]
    return _place
