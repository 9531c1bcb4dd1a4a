import time

import jwt
import pytest
from unittest.mock import patch
from httpx import AsyncClient, ASGITransport

from fabric_catalog.main import app
from fabric_catalog.errors import ErrorType
from fabric_catalog.exceptions import AppException
from fabric_catalog.services.upload_gate import resolve_identity

SECRET = "test-secret"


def make_token(sub="user_123", secret=SECRET, expires_in=300):
    payload = {"sub": sub, "iat": int(time.time()), "exp": int(time.time()) + expires_in}
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def configured():
    with patch("fabric_catalog.services.upload_gate.Config") as mock_config:
        mock_config.AUTH_SECRET = SECRET
        mock_config.AUTH_ALGORITHM = "HS256"
        yield mock_config


class TestResolveIdentity:
    """Tests for identity resolution from the Authorization header."""

    def test_valid_token(self, configured):
        """Test that a valid bearer token yields the user id."""
        identity = resolve_identity(f"Bearer {make_token()}")

        assert identity.user_id == "user_123"

    def test_missing_header(self, configured):
        """Test that no header means no identity."""
        assert resolve_identity(None) is None

    def test_wrong_scheme(self, configured):
        """Test that a non-Bearer scheme is ignored."""
        assert resolve_identity(f"Basic {make_token()}") is None

    def test_bad_signature(self, configured):
        """Test that a token signed with another secret is rejected."""
        assert resolve_identity(f"Bearer {make_token(secret='other-secret')}") is None

    def test_expired_token(self, configured):
        """Test that an expired token is rejected."""
        assert resolve_identity(f"Bearer {make_token(expires_in=-60)}") is None

    def test_token_without_subject(self, configured):
        """Test that a token without a subject is rejected."""
        token = jwt.encode({"exp": int(time.time()) + 60}, SECRET, algorithm="HS256")

        assert resolve_identity(f"Bearer {token}") is None

    def test_not_configured(self):
        """Test that a missing secret raises NOT_CONFIGURED."""
        with patch("fabric_catalog.services.upload_gate.Config") as mock_config:
            mock_config.AUTH_SECRET = ""

            with pytest.raises(AppException) as exc_info:
                resolve_identity(f"Bearer {make_token()}")

            assert exc_info.value.error_type == ErrorType.NOT_CONFIGURED


class TestUploadEndpoints:
    """Tests for /api/v1/uploads endpoints."""

    @pytest.mark.asyncio
    async def test_authorize_rejects_anonymous(self, configured):
        """Test authorize without a token returns 401."""
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/api/v1/uploads/authorize")

        assert response.status_code == 401
        assert response.json() == {"detail": "Unauthorized"}

    @pytest.mark.asyncio
    async def test_authorize_returns_limits(self, configured):
        """Test authorize returns the user and upload limits."""
        with patch("fabric_catalog.routers.uploads.Config") as router_config:
            router_config.UPLOAD_MAX_FILE_SIZE_MB = 4
            router_config.UPLOAD_MAX_FILE_COUNT = 40

            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.post(
                    "/api/v1/uploads/authorize",
                    headers={"Authorization": f"Bearer {make_token()}"}
                )

        assert response.status_code == 200
        assert response.json() == {"userId": "user_123", "maxFileSizeMb": 4, "maxFileCount": 40}

    @pytest.mark.asyncio
    async def test_complete_returns_url(self, configured):
        """Test complete hands back the uploaded file URL."""
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post(
                "/api/v1/uploads/complete",
                json={"url": "https://files.example.com/abc.jpg"},
                headers={"Authorization": f"Bearer {make_token()}"}
            )

        assert response.status_code == 200
        assert response.json() == {"uploadedFileUrl": "https://files.example.com/abc.jpg"}

    @pytest.mark.asyncio
    async def test_complete_rejects_anonymous(self, configured):
        """Test complete without a token returns 401."""
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post(
                "/api/v1/uploads/complete",
                json={"url": "https://files.example.com/abc.jpg"}
            )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_not_configured_returns_503(self):
        """Test that an unconfigured gate returns 503."""
        with patch("fabric_catalog.services.upload_gate.Config") as mock_config:
            mock_config.AUTH_SECRET = ""

            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.post("/api/v1/uploads/authorize")

        assert response.status_code == 503
