"""Tests for TLS policy and HTTP client construction.

No handshake is performed; these tests inspect the SSLContext and the
httpx.Client that would carry the request.
"""

import ssl

import httpx
import pytest
from pydantic import ValidationError
from pytest_mock import MockerFixture

from config.settings import GlobalConfig
from tickerpulse.transport import TLSPolicy, build_client, build_ssl_context, default_tls_policy

EXPECTED_TLS12 = (
    "ECDHE-RSA-AES128-GCM-SHA256",
    "ECDHE-ECDSA-AES128-GCM-SHA256",
    "ECDHE-RSA-AES128-SHA",
    "ECDHE-ECDSA-AES128-SHA",
    "ECDHE-RSA-AES256-SHA",
    "ECDHE-ECDSA-AES256-SHA",
    "AES128-SHA",
    "AES256-SHA",
)

EXPECTED_TLS13 = (
    "TLS_AES_128_GCM_SHA256",
    "TLS_AES_256_GCM_SHA384",
    "TLS_CHACHA20_POLY1305_SHA256",
)


class TestTLSPolicy:
    """Test suite for the policy value and its factory."""

    def test_default_policy_allow_list(self) -> None:
        policy = default_tls_policy()

        assert policy.min_version == "TLSv1.2"
        assert policy.tls12_ciphers == EXPECTED_TLS12
        assert policy.tls13_ciphers == EXPECTED_TLS13
        assert policy.allowed_ciphers == EXPECTED_TLS12 + EXPECTED_TLS13

    def test_default_policy_is_memoized(self) -> None:
        assert default_tls_policy() is default_tls_policy()

    def test_policy_is_immutable(self) -> None:
        policy = default_tls_policy()

        with pytest.raises(ValidationError):
            policy.min_version = "TLSv1.3"

    def test_cipher_string_joins_tls12_suites(self) -> None:
        policy = TLSPolicy(tls12_ciphers=("ECDHE-RSA-AES128-GCM-SHA256", "AES128-SHA"))

        assert policy.cipher_string == "ECDHE-RSA-AES128-GCM-SHA256:AES128-SHA"

    @pytest.mark.parametrize("version", ["TLSv1.0", "TLSv1.1", "SSLv3", ""])
    def test_legacy_min_version_rejected(self, version: str) -> None:
        with pytest.raises(ValidationError):
            TLSPolicy(min_version=version, tls12_ciphers=EXPECTED_TLS12)

    def test_empty_allow_list_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TLSPolicy(tls12_ciphers=())


class TestBuildSSLContext:
    """Test suite for SSLContext construction."""

    def test_verification_is_mandatory(self) -> None:
        context = build_ssl_context()

        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True

    def test_minimum_version_pinned(self) -> None:
        context = build_ssl_context()

        assert context.minimum_version == ssl.TLSVersion.TLSv1_2

    def test_tls13_minimum_version(self) -> None:
        policy = TLSPolicy(min_version="TLSv1.3", tls12_ciphers=EXPECTED_TLS12)

        assert build_ssl_context(policy).minimum_version == ssl.TLSVersion.TLSv1_3

    def test_tls12_suites_restricted_to_allow_list(self) -> None:
        context = build_ssl_context()

        tls12_names = {c["name"] for c in context.get_ciphers() if c["protocol"] != "TLSv1.3"}

        assert tls12_names
        assert tls12_names <= set(EXPECTED_TLS12)

    def test_fresh_context_per_call(self) -> None:
        assert build_ssl_context() is not build_ssl_context()

    def test_unknown_suites_raise(self) -> None:
        policy = TLSPolicy(tls12_ciphers=("NOT-A-REAL-CIPHER",))

        with pytest.raises(ssl.SSLError):
            build_ssl_context(policy)


class TestBuildClient:
    """Test suite for httpx.Client construction."""

    def test_client_uses_configured_user_agent_pool(self, mock_config: GlobalConfig) -> None:
        with build_client(mock_config) as client:
            assert client.headers["User-Agent"] in mock_config.user_agents

    def test_client_has_no_timeout_by_default(self, mock_config: GlobalConfig) -> None:
        with build_client(mock_config) as client:
            assert client.timeout.connect is None
            assert client.timeout.read is None

    def test_client_timeout_from_config(self, mock_config: GlobalConfig) -> None:
        config = mock_config.model_copy(update={"request_timeout_sec": 2.5})

        with build_client(config) as client:
            assert client.timeout.read == 2.5

    def test_client_follows_redirects(self, mock_config: GlobalConfig) -> None:
        with build_client(mock_config) as client:
            assert client.follow_redirects is True

    def test_new_client_per_call(self, mock_config: GlobalConfig) -> None:
        with build_client(mock_config) as first, build_client(mock_config) as second:
            assert first is not second

    def test_injected_transport_is_used(self, mock_config: GlobalConfig) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="ok"))

        with build_client(mock_config, transport=transport) as client:
            response = client.get("https://example.com/")

        assert response.text == "ok"

    def test_policy_context_built_when_no_transport(
        self, mock_config: GlobalConfig, mocker: MockerFixture
    ) -> None:
        spy = mocker.patch(
            "tickerpulse.transport.build_ssl_context",
            wraps=build_ssl_context,
        )
        policy = default_tls_policy()

        with build_client(mock_config, policy=policy):
            pass

        spy.assert_called_once_with(policy)
