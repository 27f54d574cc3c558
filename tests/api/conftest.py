"""Fixtures for API tests."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from jewelpos.api import create_app
from jewelpos.infrastructure.storage.sqlite import get_customer_store, get_product_store


@pytest.fixture
def app() -> FastAPI:
    return create_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def shop(migrated_db, make_product, make_customer):
    """Migrated database with two products and one customer."""
    products = await get_product_store()
    await products.create(make_product("p-ring", stock=5))
    await products.create(make_product("p-chain", stock=3, price="250"))
    await (await get_customer_store()).create(make_customer("c-1"))
    return migrated_db


@pytest.fixture
def staff() -> dict[str, str]:
    return {"X-Actor-Id": "staff-1"}
