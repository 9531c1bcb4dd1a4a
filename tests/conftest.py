import pytest
from unittest.mock import AsyncMock, patch
from httpx import AsyncClient, ASGITransport

from fabric_catalog.main import app
from fabric_catalog.db.database import Database, db
from fabric_catalog.services.fabric_read_service import FabricReadService
from fabric_catalog.services.fabric_write_service import FabricWriteService


def build_variant(code: str, **overrides) -> dict:
    variant = {
        "variantCode": code,
        "variantName": f"Color {code}",
        "variantImage": f"https://files.example.com/{code}.jpg",
        "stockQuantity": 5,
        "hexColorCode": "#FFFFFF",
    }
    variant.update(overrides)
    return variant


def build_fabric(external_id: str = "TZM0151", name: str = "accent", variants=None, **overrides) -> dict:
    payload = {
        "externalId": external_id,
        "name": name,
        "baseImage": "https://files.example.com/accent.jpg",
        "composition": "%100 PES",
        "widthCm": 280,
        "weightGsm": 120,
        "isNormal": True,
        "isBlackout": True,
        "variants": variants if variants is not None else [build_variant("01"), build_variant("02")],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def fabric_payload():
    """Factory for a valid fabric submission (camelCase, as the UI sends it)."""
    return build_fabric


@pytest.fixture
def variant_payload():
    return build_variant


@pytest.fixture
async def database():
    """Fresh in-memory SQLite database with foreign keys enabled."""
    database = Database("sqlite:///:memory:", "sqlite")
    await database.create_tables()
    yield database
    await database.disconnect()


@pytest.fixture
def write_service(database):
    return FabricWriteService(database)


@pytest.fixture
def read_service(database):
    return FabricReadService(database)


@pytest.fixture
async def client(database):
    """Async test client whose services use the in-memory database."""
    original_connect = db.connect
    original_disconnect = db.disconnect
    db.connect = AsyncMock()
    db.disconnect = AsyncMock()

    with patch("fabric_catalog.routers.fabrics.fabric_write_service", FabricWriteService(database)), \
         patch("fabric_catalog.routers.fabrics.fabric_read_service", FabricReadService(database)):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test"
        ) as ac:
            yield ac

    # Restore
    db.connect = original_connect
    db.disconnect = original_disconnect
