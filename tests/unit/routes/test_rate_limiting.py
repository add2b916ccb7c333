"""Tests for the route rate limit key."""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from application.routes.common import rate_limiting


class TestDefaultRateLimitKey:
    """Test default_rate_limit_key."""

    @pytest.mark.asyncio
    async def test_keys_by_client_address(self):
        # Arrange
        fake_request = SimpleNamespace(remote_addr="10.0.0.5")

        # Act
        with patch.object(rate_limiting, "request", fake_request):
            key = await rate_limiting.default_rate_limit_key()

        # Assert
        assert key == "10.0.0.5"

    @pytest.mark.asyncio
    async def test_missing_address_falls_back_to_unknown(self):
        fake_request = SimpleNamespace(remote_addr=None)

        with patch.object(rate_limiting, "request", fake_request):
            key = await rate_limiting.default_rate_limit_key()

        assert key == "unknown"
