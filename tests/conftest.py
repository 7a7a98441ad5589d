import json
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# Ensure project root is on sys.path so `services.*` / `microservices.*` imports work
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


# Explicitly enable pytest-asyncio plugin for async tests/fixtures
pytest_plugins = ("pytest_asyncio",)


from microservices import users_service_app
from microservices.users_service_app import app as users_app


USER_RECORDS = [
    {
        "email": "a@x.com",
        "firstName": "Ann",
        "lastName": "Lee",
        "birthDate": "1990-01-01",
        "address": {"country": "US", "city": "NYC", "street": "Main", "number": "1"},
        "phone": "555-0001",
    },
    {
        "email": "b@x.com",
        "firstName": "Bob",
        "lastName": "Ray",
        "birthDate": "1985-06-15",
        "address": {"country": "UA", "city": "Kyiv", "street": "Khreshchatyk", "number": "22"},
        "phone": "555-0002",
    },
    {
        "email": "c@x.com",
        "firstName": "Cid",
        "lastName": "Moe",
        "birthDate": "2001-12-31",
        "address": {"country": "DE", "city": "Berlin", "street": "Unter den Linden", "number": "7a"},
        "phone": "555-0003",
    },
]


@pytest.fixture()
def user_records():
    return [dict(r, address=dict(r["address"])) for r in USER_RECORDS]


@pytest.fixture()
def data_file(tmp_path, user_records):
    """data.json with the sample records, written to a temp dir."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(user_records), encoding="utf-8")
    return path


@pytest_asyncio.fixture()
async def users_client():
    """Async test client for the Users microservice, with a clean store."""
    users_service_app.reset_store()
    async with AsyncClient(transport=ASGITransport(app=users_app), base_url="http://testserver") as ac:
        yield ac
    users_service_app.reset_store()
