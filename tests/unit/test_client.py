"""Unit tests for the transport client and its configuration."""

import dataclasses
import json
from unittest.mock import MagicMock

import pytest
import requests
import responses

from intelx_client.client import IntelXClient, SuccessResponse, _sanitize_message
from intelx_client.config import ClientConfig, ProxyConfig
from intelx_client.context import Context
from intelx_client.errors import (
    APITimeoutError,
    ConfigurationError,
    ContextCancelled,
    DeadlineExceeded,
    HTTPStatusError,
    NetworkError,
    RequestConstructionError,
)


@pytest.fixture
def client(base_url):
    return IntelXClient(ClientConfig(url=base_url, token="secret-token"))


class TestProxyConfig:
    """Tests for proxy configuration."""

    @pytest.fixture(autouse=True)
    def no_proxy_env(self, monkeypatch):
        for name in ("HTTP_PROXY", "http_proxy", "HTTPS_PROXY", "https_proxy", "NO_PROXY", "no_proxy"):
            monkeypatch.delenv(name, raising=False)

    def test_proxy_disabled(self):
        config = ProxyConfig(enabled=False, http_proxy="http://proxy:8080")
        assert config.get_proxies() == {}

    def test_proxy_from_explicit_config(self):
        config = ProxyConfig(
            http_proxy="http://proxy:8080",
            https_proxy="https://proxy:8443",
        )
        proxies = config.get_proxies()
        assert proxies["http"] == "http://proxy:8080"
        assert proxies["https"] == "https://proxy:8443"

    def test_proxy_from_environment(self, monkeypatch):
        monkeypatch.setenv("HTTPS_PROXY", "http://envproxy:3128")
        assert ProxyConfig().get_proxies()["https"] == "http://envproxy:3128"

    def test_proxy_bypass_exact_match(self):
        config = ProxyConfig(no_proxy=("localhost", "intelx.corp"))
        assert config.should_bypass("http://localhost/api") is True
        assert config.should_bypass("https://intelx.corp/api") is True
        assert config.should_bypass("https://external.com/api") is False

    def test_proxy_bypass_suffix_match(self):
        config = ProxyConfig(no_proxy=(".internal.corp",))
        assert config.should_bypass("http://intelx.internal.corp/api") is True
        assert config.should_bypass("http://internal.corp/api") is True
        assert config.should_bypass("http://external.com/api") is False

    def test_bypassed_url_gets_no_proxies(self):
        config = ProxyConfig(http_proxy="http://proxy:8080", no_proxy=("localhost",))
        assert config.proxies_for("http://localhost/api") == {}
        assert config.proxies_for("http://intelx.example.com/api") == {"http": "http://proxy:8080"}

    def test_proxy_from_dict(self):
        config = ProxyConfig.from_dict({
            "http_proxy": "http://proxy:8080",
            "no_proxy": ["localhost"],
        })
        assert config.http_proxy == "http://proxy:8080"
        assert config.no_proxy == ("localhost",)
        assert config.enabled is True


class TestClientConfig:
    """Tests for the immutable client configuration."""

    def test_trailing_slash_stripped(self):
        config = ClientConfig(url="https://intelx.example.com/")
        assert config.url == "https://intelx.example.com"

    def test_missing_url(self):
        with pytest.raises(ConfigurationError):
            ClientConfig(url="")

    def test_invalid_url(self):
        with pytest.raises(ConfigurationError):
            ClientConfig(url="intelx.example.com")

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigurationError):
            ClientConfig(url="https://intelx.example.com", timeout=0)

    def test_is_immutable(self):
        config = ClientConfig(url="https://intelx.example.com")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.url = "https://other.example.com"

    def test_token_not_in_repr(self):
        config = ClientConfig(url="https://intelx.example.com", token="secret-token")
        assert "secret-token" not in repr(config)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("INTELX_URL", "https://intelx.example.com/")
        monkeypatch.setenv("INTELX_TOKEN", "abc")
        monkeypatch.setenv("INTELX_CERTIFICATE", "/etc/intelx/ca.pem")

        config = ClientConfig.from_env()

        assert config.url == "https://intelx.example.com"
        assert config.token == "abc"
        assert config.verify == "/etc/intelx/ca.pem"

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.setenv("INTELX_URL", "https://intelx.example.com")

        config = ClientConfig.from_env()

        assert config.token is None
        assert config.verify is True
        assert config.timeout == 30

    def test_from_env_missing_url(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ClientConfig.from_env()
        assert "INTELX_URL" in str(exc_info.value)


class TestBuildRequest:
    """Tests for request construction."""

    def test_get_carries_content_type(self, client, base_url):
        request = client.build_request(None, "GET", "application/json", None, f"{base_url}/api/x")

        assert request.method == "GET"
        assert request.url == f"{base_url}/api/x"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Accept"] == "application/json"
        assert request.body is None

    def test_token_authorization_header(self, client, base_url):
        request = client.build_request(None, "GET", "application/json", None, f"{base_url}/api/x")
        assert request.headers["Authorization"] == "Token secret-token"

    def test_no_authorization_without_token(self, base_url):
        client = IntelXClient(ClientConfig(url=base_url))
        request = client.build_request(None, "GET", "application/json", None, f"{base_url}/api/x")
        assert "Authorization" not in request.headers

    def test_json_body_serialized(self, client, base_url):
        request = client.build_request(
            None, "post", "application/json", {"tags": ["a", "b"]}, f"{base_url}/api/x"
        )
        assert request.method == "POST"
        assert json.loads(request.body) == {"tags": ["a", "b"]}

    def test_unserializable_body(self, client, base_url):
        with pytest.raises(RequestConstructionError):
            client.build_request(None, "POST", "application/json", {"x": object()}, f"{base_url}/api/x")

    @pytest.mark.parametrize("url", ["", "not a url", "ftp://intelx.example.com/x", "https://"])
    def test_malformed_url(self, client, url):
        with pytest.raises(RequestConstructionError):
            client.build_request(None, "GET", "application/json", None, url)

    def test_missing_method(self, client, base_url):
        with pytest.raises(RequestConstructionError):
            client.build_request(None, "", "application/json", None, f"{base_url}/api/x")

    def test_cancelled_context(self, client, base_url):
        ctx = Context()
        ctx.cancel()
        with pytest.raises(ContextCancelled):
            client.build_request(ctx, "GET", "application/json", None, f"{base_url}/api/x")


class TestExecute:
    """Tests for request execution and error normalization."""

    def _request(self, client, base_url):
        return client.build_request(None, "GET", "application/json", None, f"{base_url}/api/x")

    @responses.activate
    def test_success_envelope(self, client, base_url):
        responses.add(responses.GET, f"{base_url}/api/x", json={"ok": True}, status=200)

        result = client.execute(None, self._request(client, base_url))

        assert isinstance(result, SuccessResponse)
        assert result.status_code == 200
        assert json.loads(result.data) == {"ok": True}

    @responses.activate
    def test_http_error_with_detail(self, client, base_url):
        responses.add(responses.GET, f"{base_url}/api/x", json={"detail": "Not found."}, status=404)

        with pytest.raises(HTTPStatusError) as exc_info:
            client.execute(None, self._request(client, base_url))

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Not found."

    @responses.activate
    def test_http_error_with_structured_errors(self, client, base_url):
        responses.add(
            responses.GET, f"{base_url}/api/x", json={"errors": {"name": ["invalid"]}}, status=400
        )

        with pytest.raises(HTTPStatusError) as exc_info:
            client.execute(None, self._request(client, base_url))

        assert exc_info.value.status_code == 400
        assert json.loads(exc_info.value.message) == {"name": ["invalid"]}

    @responses.activate
    def test_http_error_plain_text(self, client, base_url):
        responses.add(responses.GET, f"{base_url}/api/x", body="Bad Gateway", status=502)

        with pytest.raises(HTTPStatusError) as exc_info:
            client.execute(None, self._request(client, base_url))

        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "Bad Gateway"
        assert exc_info.value.body == b"Bad Gateway"

    @responses.activate
    def test_no_retry_on_server_error(self, client, base_url):
        responses.add(responses.GET, f"{base_url}/api/x", status=500)

        with pytest.raises(HTTPStatusError):
            client.execute(None, self._request(client, base_url))

        assert len(responses.calls) == 1

    @responses.activate
    def test_connection_error(self, client, base_url):
        responses.add(
            responses.GET,
            f"{base_url}/api/x",
            body=requests.exceptions.ConnectionError("Connection refused"),
        )

        with pytest.raises(NetworkError) as exc_info:
            client.execute(None, self._request(client, base_url))

        assert not isinstance(exc_info.value, APITimeoutError)
        assert len(responses.calls) == 1

    @responses.activate
    def test_timeout(self, client, base_url):
        responses.add(
            responses.GET,
            f"{base_url}/api/x",
            body=requests.exceptions.ReadTimeout("read timed out"),
        )

        with pytest.raises(APITimeoutError):
            client.execute(None, self._request(client, base_url))

    @responses.activate
    def test_timeout_with_deadline_left_is_api_timeout(self, client, base_url):
        responses.add(
            responses.GET,
            f"{base_url}/api/x",
            body=requests.exceptions.ReadTimeout("read timed out"),
        )
        ctx = Context.with_timeout(60)

        with pytest.raises(APITimeoutError):
            client.execute(ctx, self._request(client, base_url))

        assert ctx.err() is None

    @responses.activate
    def test_timeout_after_deadline_passed(self, client, base_url):
        ctx = Context.with_timeout(60)

        def callback(request):
            ctx.deadline = 0.0
            raise requests.exceptions.ReadTimeout("read timed out")

        responses.add_callback(responses.GET, f"{base_url}/api/x", callback=callback)

        with pytest.raises(DeadlineExceeded):
            client.execute(ctx, self._request(client, base_url))

    @responses.activate
    def test_cancelled_before_send(self, client, base_url):
        responses.add(responses.GET, f"{base_url}/api/x", json={}, status=200)
        request = self._request(client, base_url)
        ctx = Context()
        ctx.cancel()

        with pytest.raises(ContextCancelled):
            client.execute(ctx, request)

        assert len(responses.calls) == 0

    @responses.activate
    def test_cancelled_in_flight(self, client, base_url):
        ctx = Context()

        def callback(request):
            ctx.cancel()
            return (200, {}, "{}")

        responses.add_callback(responses.GET, f"{base_url}/api/x", callback=callback)

        with pytest.raises(ContextCancelled):
            client.execute(ctx, self._request(client, base_url))

    @responses.activate
    def test_cancelled_during_failing_call_is_not_network_error(self, client, base_url):
        ctx = Context()

        def callback(request):
            ctx.cancel()
            raise requests.exceptions.ConnectionError("connection aborted")

        responses.add_callback(responses.GET, f"{base_url}/api/x", callback=callback)

        with pytest.raises(ContextCancelled):
            client.execute(ctx, self._request(client, base_url))

    @responses.activate
    def test_network_error_redacts_token(self, client, base_url):
        responses.add(
            responses.GET,
            f"{base_url}/api/x",
            body=requests.exceptions.ConnectionError("failed with Authorization: Token secret-token"),
        )

        with pytest.raises(NetworkError) as exc_info:
            client.execute(None, self._request(client, base_url))

        assert "secret-token" not in str(exc_info.value)
        assert "[REDACTED]" in str(exc_info.value)


class TestSanitizeMessage:
    """Tests for secret redaction."""

    def test_redacts_query_token(self):
        assert _sanitize_message("GET /x?token=abc123&y=1") == "GET /x?token=[REDACTED]&y=1"

    def test_leaves_plain_messages(self):
        assert _sanitize_message("Connection refused") == "Connection refused"


class TestClientLifecycle:
    """Tests for client construction helpers."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("INTELX_URL", "https://intelx.example.com")
        client = IntelXClient.from_env()
        assert client.config.url == "https://intelx.example.com"
        assert client.analyzer.client is client

    def test_context_manager_closes_session(self, base_url):
        session = MagicMock(spec=requests.Session)
        with IntelXClient(ClientConfig(url=base_url), session=session):
            pass
        session.close.assert_called_once()
