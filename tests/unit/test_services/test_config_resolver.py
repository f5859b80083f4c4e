"""Unit tests for browser target resolution."""

from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from compatbot.config.settings import Settings
from compatbot.services.config_resolver import parse_targets, resolve_config


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.github.com/repos/o/r/contents/.doiuse")
    response = httpx.Response(code, request=request)
    return httpx.HTTPStatusError(f"HTTP {code}", request=request, response=response)


@pytest.fixture
def mock_client():
    client = Mock()
    client.get_file_content = AsyncMock()
    return client


class TestParseTargets:
    """Tests for parse_targets()."""

    def test_commas_and_line_breaks(self) -> None:
        assert parse_targets("a,b\nc") == ("a", "b", "c")

    def test_strips_whitespace_and_blank_segments(self) -> None:
        text = "last 2 versions, ie >= 9\r\n\n> 1%,\n"
        assert parse_targets(text) == ("last 2 versions", "ie >= 9", "> 1%")

    def test_empty(self) -> None:
        assert parse_targets("") == ()
        assert parse_targets(" ,\n, ") == ()


class TestResolveConfig:
    """Tests for resolve_config()."""

    @pytest.mark.asyncio
    async def test_uses_repository_config(self, mock_client, test_settings) -> None:
        mock_client.get_file_content.return_value = "a,b\nc"

        targets = await resolve_config(mock_client, "fork/site", "feature", test_settings)

        assert targets == ("a", "b", "c")
        mock_client.get_file_content.assert_awaited_once_with(
            "fork/site", ".doiuse", "feature"
        )

    @pytest.mark.asyncio
    async def test_missing_file_uses_default(self, mock_client, test_settings) -> None:
        mock_client.get_file_content.side_effect = _status_error(404)

        targets = await resolve_config(mock_client, "fork/site", "feature", test_settings)

        assert targets == ("last 2 versions",)

    @pytest.mark.asyncio
    async def test_server_error_uses_default(self, mock_client, test_settings) -> None:
        mock_client.get_file_content.side_effect = _status_error(502)

        targets = await resolve_config(mock_client, "fork/site", "feature", test_settings)

        assert targets == ("last 2 versions",)

    @pytest.mark.asyncio
    async def test_transport_error_uses_default(self, mock_client, test_settings) -> None:
        mock_client.get_file_content.side_effect = httpx.ConnectError("unreachable")

        targets = await resolve_config(mock_client, "fork/site", "feature", test_settings)

        assert targets == ("last 2 versions",)

    @pytest.mark.asyncio
    async def test_empty_file_uses_default(self, mock_client, test_settings) -> None:
        mock_client.get_file_content.return_value = "\n\n"

        targets = await resolve_config(mock_client, "fork/site", "feature", test_settings)

        assert targets == ("last 2 versions",)

    @pytest.mark.asyncio
    async def test_configured_filename_and_defaults(self, mock_client) -> None:
        settings = Settings(
            _env_file=None,
            config_filename=".browserslistrc",
            default_browsers=["> 1%", "not dead"],
        )
        mock_client.get_file_content.side_effect = _status_error(404)

        targets = await resolve_config(mock_client, "o/r", "main", settings)

        assert targets == ("> 1%", "not dead")
        mock_client.get_file_content.assert_awaited_once_with(
            "o/r", ".browserslistrc", "main"
        )
