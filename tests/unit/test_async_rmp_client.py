"""Unit tests for the async rating service client.

Tests search requests, response validation, error mapping and context
manager behavior.
"""

import base64

import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock, patch

from profrate.config import Config
from profrate.rmp.async_client import (
    AsyncRMPClient,
    RMPRequestError,
    RMPResponseError,
    TEACHER_SEARCH_QUERY,
    encode_school_id,
)


def _response(status_code=200, payload=None, text=""):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.text = text
    if isinstance(payload, Exception):
        mock_response.json = MagicMock(side_effect=payload)
    else:
        mock_response.json = MagicMock(return_value=payload)
    return mock_response


class TestAsyncRMPClientInit:
    """Test AsyncRMPClient initialization."""

    def test_initialization(self, test_config):
        client = AsyncRMPClient(test_config)

        assert client.config is test_config
        assert client._client is None  # Not initialized until context manager

    def test_uses_global_config_by_default(self):
        with patch("profrate.rmp.async_client.get_config") as mock_get_config:
            sentinel = MagicMock()
            mock_get_config.return_value = sentinel

            assert AsyncRMPClient().config is sentinel

    def test_headers_without_token(self, test_config):
        headers = AsyncRMPClient(test_config)._headers()

        assert headers["Content-Type"] == "application/json"
        assert "Authorization" not in headers

    def test_headers_with_token(self):
        config = Config(_env_file=None, rmp_auth_token="dGVzdDp0ZXN0")

        assert AsyncRMPClient(config)._headers()["Authorization"] == "Basic dGVzdDp0ZXN0"


class TestSchoolId:
    def test_encode_school_id(self):
        assert base64.b64decode(encode_school_id(1073)).decode() == "School-1073"

    @pytest.mark.asyncio
    async def test_get_school_id_is_constant(self, test_config):
        client = AsyncRMPClient(test_config)

        assert await client.get_school_id("Anything at all") == encode_school_id(1073)


class TestAsyncRMPClientContextManager:
    """Test context manager behavior."""

    @pytest.mark.asyncio
    async def test_context_manager_creates_client(self, test_config):
        async with AsyncRMPClient(test_config) as client:
            assert isinstance(client._client, httpx.AsyncClient)

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self, test_config):
        client = AsyncRMPClient(test_config)

        async with client:
            pass

        assert client._client is None

    @pytest.mark.asyncio
    async def test_search_outside_context_raises(self, test_config):
        with pytest.raises(RuntimeError):
            await AsyncRMPClient(test_config).search_teachers("Smith", "id")


class TestSearchTeachers:
    """Test teacher search requests."""

    @pytest.mark.asyncio
    async def test_search_success(self, test_config, sample_search_payload):
        async with AsyncRMPClient(test_config) as client:
            with patch.object(client._client, "post", new_callable=AsyncMock) as mock_post:
                mock_post.return_value = _response(200, sample_search_payload)

                candidates = await client.search_teachers("Smith", "U2Nob29sLTEwNzM=")

        assert [c.first_name for c in candidates] == ["Jane", "John"]

        call_args = mock_post.call_args
        assert call_args[0][0] == "https://www.ratemyprofessors.com/graphql"
        body = call_args[1]["json"]
        assert body["query"] == TEACHER_SEARCH_QUERY
        assert body["variables"] == {
            "q": {"text": "Smith", "schoolID": "U2Nob29sLTEwNzM=", "fallback": False},
            "first": 25,
        }

    @pytest.mark.asyncio
    async def test_search_custom_page_size(self, test_config, payload_factory):
        async with AsyncRMPClient(test_config) as client:
            with patch.object(client._client, "post", new_callable=AsyncMock) as mock_post:
                mock_post.return_value = _response(200, payload_factory([]))

                candidates = await client.search_teachers("Smith", "id", first=5)

        assert candidates == []
        assert mock_post.call_args[1]["json"]["variables"]["first"] == 5

    @pytest.mark.asyncio
    async def test_malformed_record_does_not_discard_page(self, test_config, node_factory, payload_factory):
        bad = node_factory("Jane", "Doe")
        bad["numRatings"] = "n/a"
        bad["avgDifficulty"] = "hard"
        payload = payload_factory([node_factory("John", "Smith"), bad])

        async with AsyncRMPClient(test_config) as client:
            with patch.object(client._client, "post", new_callable=AsyncMock) as mock_post:
                mock_post.return_value = _response(200, payload)

                candidates = await client.search_teachers("Smith", "id")

        assert [(c.first_name, c.last_name) for c in candidates] == [("John", "Smith")]

    @pytest.mark.asyncio
    async def test_http_error_status(self, test_config):
        async with AsyncRMPClient(test_config) as client:
            with patch.object(client._client, "post", new_callable=AsyncMock) as mock_post:
                mock_post.return_value = _response(503, None, text="Service Unavailable" * 50)

                with pytest.raises(RMPRequestError) as exc_info:
                    await client.search_teachers("Smith", "id")

        message = str(exc_info.value)
        assert message.startswith("RMP GraphQL HTTP 503: Service Unavailable")
        assert len(message) <= len("RMP GraphQL HTTP 503: ") + 200

    @pytest.mark.asyncio
    async def test_transport_error(self, test_config):
        async with AsyncRMPClient(test_config) as client:
            with patch.object(client._client, "post", new_callable=AsyncMock) as mock_post:
                mock_post.side_effect = httpx.ConnectError("Connection refused")

                with pytest.raises(RMPRequestError, match="Connection refused"):
                    await client.search_teachers("Smith", "id")

    @pytest.mark.asyncio
    async def test_invalid_json(self, test_config):
        async with AsyncRMPClient(test_config) as client:
            with patch.object(client._client, "post", new_callable=AsyncMock) as mock_post:
                mock_post.return_value = _response(200, ValueError("Expecting value"))

                with pytest.raises(RMPResponseError):
                    await client.search_teachers("Smith", "id")

    @pytest.mark.asyncio
    async def test_unexpected_payload_shape(self, test_config):
        async with AsyncRMPClient(test_config) as client:
            with patch.object(client._client, "post", new_callable=AsyncMock) as mock_post:
                mock_post.return_value = _response(200, {"data": {"newSearch": {"teachers": {"edges": "nope"}}}})

                with pytest.raises(RMPResponseError):
                    await client.search_teachers("Smith", "id")

    @pytest.mark.asyncio
    async def test_graphql_errors_without_data(self, test_config):
        async with AsyncRMPClient(test_config) as client:
            with patch.object(client._client, "post", new_callable=AsyncMock) as mock_post:
                mock_post.return_value = _response(200, {"data": None, "errors": [{"message": "Bad schoolID"}]})

                with pytest.raises(RMPRequestError, match="Bad schoolID"):
                    await client.search_teachers("Smith", "id")
