"""Fixtures for API tests: the app wired to a domain store over a fake remote store."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from moleculex.api.dependencies import get_store
from moleculex.api.main import app


@pytest.fixture
async def api_client(domain_store) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_store] = lambda: domain_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_store, None)


@pytest.fixture
def material_payload() -> dict:
    return {
        "name": "Bergamot Oil",
        "olfactive_family": "Citrus",
        "origin": "Essential Oil",
        "note_roles": ["Top Note"],
        "cas_number": "8007-75-8",
        "ifra_max_concentration": 0.4,
        "inventory_batches": [
            {"batch_number": "B-1", "stock_amount": 10, "cost_per_gram": 0.5},
        ],
    }
