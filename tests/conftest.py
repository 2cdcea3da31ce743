import os
import tempfile

# Must be in place before config is imported
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="tabibiq-uploads-")
for name in ("MAIL_USERNAME", "ADMIN_NOTIFY_EMAIL", "CLOUDINARY_CLOUD_NAME", "DEFAULT_ADMIN_EMAIL"):
    os.environ[name] = ""

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from mongomock_motor import AsyncMongoMockClient  # noqa: E402

import database  # noqa: E402
from auth.auth_handler import hash_password  # noqa: E402
from main import app  # noqa: E402
from models.user import User, UserRole  # noqa: E402

PASSWORD = "secret-pass-123"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


async def login(client, email, password=PASSWORD, login_type=None):
    body = {"email": email, "password": password}
    if login_type:
        body["loginType"] = login_type
    response = await client.post("/api/auth/login", json=body)
    assert response.status_code == 200, response.text
    return response.json()


async def register_account(client, email, user_type="patient", name="Test Patient"):
    response = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": PASSWORD, "phone": "07700000000", "user_type": user_type},
    )
    assert response.status_code == 201, response.text
    tokens = await login(client, email)
    return {
        "id": response.json()["id"],
        "email": email,
        "token": tokens["access_token"],
        "headers": auth_header(tokens["access_token"]),
    }


async def create_user(email, role, name="Seeded User", password=PASSWORD):
    user = User(name=name, email=email, hashed_password=hash_password(password), role=role)
    await user.insert()
    return user


async def register_doctor(client, email, name="Dr. Test", files=None, **fields):
    form = {
        "name": name,
        "email": email,
        "password": PASSWORD,
        "phone": "07711111111",
        "specialty": "Cardiology",
        "province": "Baghdad",
    }
    form.update(fields)
    return await client.post("/api/doctors", data=form, files=files or {})


@pytest.fixture
async def client():
    await database.connect_to_mongo(AsyncMongoMockClient(), "tabibiq_test")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    database.client = None


@pytest.fixture
async def patient(client):
    return await register_account(client, "patient@tabib.iq")


@pytest.fixture
async def admin(client):
    user = await create_user("admin@tabib.iq", UserRole.ADMIN, name="Admin")
    tokens = await login(client, user.email, login_type="admin")
    return {"id": str(user.id), "headers": auth_header(tokens["access_token"])}


async def approve(client, admin, doctor_id):
    response = await client.put(f"/api/doctors/{doctor_id}/approve", headers=admin["headers"])
    assert response.status_code == 200, response.text


@pytest.fixture
async def approved_doctor(client, admin):
    response = await register_doctor(client, "doctor@tabib.iq")
    assert response.status_code == 201, response.text
    doctor_id = response.json()["doctor"]["id"]
    await approve(client, admin, doctor_id)
    tokens = await login(client, "doctor@tabib.iq", login_type="doctor")
    return {"id": doctor_id, "headers": auth_header(tokens["access_token"])}
