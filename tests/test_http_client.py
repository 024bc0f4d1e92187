# tests/test_http_client.py
"""Tests for euctr/http_client.py - registry page fetching (no network)."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from euctr.exceptions import NetworkError
from euctr.http_client import RegistryClient, build_search_url


def _response(status_code=200, content=b"<html></html>", reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.reason = reason
    return response


class TestBuildSearchUrl:

    def test_default_base(self):
        assert build_search_url("de", 0) == (
            "https://www.clinicaltrialsregister.eu/ctr-search/search?query=&country=de&page=0"
        )

    def test_custom_base_trailing_slash(self):
        assert build_search_url("fr", 7, "http://localhost:8080/") == (
            "http://localhost:8080/ctr-search/search?query=&country=fr&page=7"
        )


class TestRegistryClient:

    def test_fetch_returns_body(self):
        client = RegistryClient()
        with patch.object(client.session, "get", return_value=_response(content=b"page")) as get:
            body = client.fetch("de", 2)

        assert body == b"page"
        get.assert_called_once_with(
            "https://www.clinicaltrialsregister.eu/ctr-search/search?query=&country=de&page=2",
            verify=True,
            timeout=None,
        )

    def test_insecure_and_timeout_forwarded(self):
        client = RegistryClient(verify=False, timeout=12.5)
        with patch.object(client.session, "get", return_value=_response()) as get:
            client.fetch("fr", 0)

        _, kwargs = get.call_args
        assert kwargs == {"verify": False, "timeout": 12.5}

    def test_insecure_logs_warning(self, caplog):
        with caplog.at_level("WARNING", logger="euctr"):
            RegistryClient(verify=False)

        assert any("DISABLED" in r.getMessage() for r in caplog.records)

    def test_secure_does_not_warn(self, caplog):
        with caplog.at_level("WARNING", logger="euctr"):
            RegistryClient()

        assert not caplog.records

    @pytest.mark.parametrize("status", [201, 301, 404, 429, 500, 503])
    def test_non_200_raises(self, status):
        client = RegistryClient()
        with patch.object(client.session, "get", return_value=_response(status, reason="Nope")):
            with pytest.raises(NetworkError) as exc_info:
                client.fetch("de", 3)

        error = exc_info.value
        assert error.status_code == status
        assert error.jurisdiction == "de"
        assert error.page == 3
        assert f"status code error: {status}" in str(error)

    def test_transport_error_raises(self):
        client = RegistryClient()
        boom = requests.ConnectionError("connection reset")
        with patch.object(client.session, "get", side_effect=boom) as get:
            with pytest.raises(NetworkError) as exc_info:
                client.fetch("de", 0)

        assert get.call_count == 1  # no retry
        assert exc_info.value.status_code is None
        assert exc_info.value.__cause__ is boom

    def test_context_manager_closes_session(self):
        client = RegistryClient()
        with patch.object(client.session, "close") as close:
            with client:
                pass
        close.assert_called_once()

    @pytest.mark.parametrize("pool_size, expected", [(16, 16), (0, 1)])
    def test_pool_sized_for_workers(self, pool_size, expected):
        with patch("requests.adapters.HTTPAdapter") as adapter:
            RegistryClient(pool_size=pool_size)

        _, kwargs = adapter.call_args
        assert kwargs["pool_maxsize"] == expected
        assert kwargs["max_retries"] == 0
