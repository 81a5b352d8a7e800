"""Tests for fitback/core/http.py - HTTP client factory."""

import httpx
import pytest

from fitback.core import http as http_module


class TestCreateHttpClient:
    @pytest.mark.asyncio
    async def test_default_timeouts_and_limits(self):
        client = http_module.create_http_client()
        try:
            assert isinstance(client, httpx.AsyncClient)
            assert client.timeout.connect == http_module.DEFAULT_CONNECT_TIMEOUT
            assert client.timeout.read == http_module.DEFAULT_READ_TIMEOUT
            assert client.timeout.write == http_module.DEFAULT_WRITE_TIMEOUT
            assert client.timeout.pool == http_module.DEFAULT_POOL_TIMEOUT
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_default_headers(self):
        client = http_module.create_http_client(headers={"User-Agent": "probe"})
        try:
            assert client.headers["User-Agent"] == "probe"
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_base_url(self):
        client = http_module.create_http_client(base_url="https://api.example.com")
        try:
            assert client.base_url.host == "api.example.com"
        finally:
            await client.aclose()


class TestGitHubClient:
    @pytest.mark.asyncio
    async def test_singleton_until_closed(self):
        await http_module.close_github_client()

        first = http_module.get_github_client()
        assert http_module.get_github_client() is first
        assert first.headers["User-Agent"] == http_module.GITHUB_USER_AGENT

        await http_module.close_github_client()
        assert first.is_closed
        assert http_module._github_client is None

        second = http_module.get_github_client()
        assert second is not first
        await http_module.close_github_client()

    @pytest.mark.asyncio
    async def test_close_without_client_is_noop(self):
        await http_module.close_github_client()
        await http_module.close_github_client()

        assert http_module._github_client is None
