"""Secure HTTP transport construction.

The TLS policy is an immutable value produced by a memoized factory; the
ssl.SSLContext and httpx.Client built from it are fresh per call, since a
run performs exactly one request.

OpenSSL configures TLS 1.2 and TLS 1.3 suites through separate APIs. The
standard library only exposes the TLS 1.2 one (``SSLContext.set_ciphers``),
so the TLS 1.2 allow-list is enforced here while the TLS 1.3 suites listed in
the policy are the three OpenSSL enables by default.
"""

import random
import ssl
from functools import lru_cache

import httpx
from pydantic import BaseModel, ConfigDict, Field

from config.settings import GlobalConfig, get_config
from tickerpulse.logger import get_logger

log = get_logger(__name__)

_TLS_VERSIONS: dict[str, ssl.TLSVersion] = {
    "TLSv1.2": ssl.TLSVersion.TLSv1_2,
    "TLSv1.3": ssl.TLSVersion.TLSv1_3,
}


class TLSPolicy(BaseModel):
    """Immutable TLS configuration.

    Attributes:
        min_version: Lowest protocol version accepted ("TLSv1.2" or "TLSv1.3").
        tls12_ciphers: Ordered OpenSSL names of the allowed TLS 1.2 suites.
        tls13_ciphers: Ordered IANA names of the allowed TLS 1.3 suites.
    """

    model_config = ConfigDict(frozen=True)

    min_version: str = Field(default="TLSv1.2", pattern=r"^TLSv1\.[23]$")
    tls12_ciphers: tuple[str, ...] = Field(..., min_length=1)
    tls13_ciphers: tuple[str, ...] = Field(default=())

    @property
    def cipher_string(self) -> str:
        """OpenSSL cipher list string for the TLS 1.2 allow-list."""
        return ":".join(self.tls12_ciphers)

    @property
    def allowed_ciphers(self) -> tuple[str, ...]:
        """Every allowed suite, TLS 1.2 first."""
        return self.tls12_ciphers + self.tls13_ciphers


@lru_cache(maxsize=1)
def default_tls_policy() -> TLSPolicy:
    """Return the fixed modern TLS policy (TLS 1.2+, explicit suites)."""
    return TLSPolicy(
        min_version="TLSv1.2",
        tls12_ciphers=(
            "ECDHE-RSA-AES128-GCM-SHA256",
            "ECDHE-ECDSA-AES128-GCM-SHA256",
            "ECDHE-RSA-AES128-SHA",
            "ECDHE-ECDSA-AES128-SHA",
            "ECDHE-RSA-AES256-SHA",
            "ECDHE-ECDSA-AES256-SHA",
            "AES128-SHA",
            "AES256-SHA",
        ),
        tls13_ciphers=(
            "TLS_AES_128_GCM_SHA256",
            "TLS_AES_256_GCM_SHA384",
            "TLS_CHACHA20_POLY1305_SHA256",
        ),
    )


def build_ssl_context(policy: TLSPolicy | None = None) -> ssl.SSLContext:
    """Create a verifying client SSLContext bound to ``policy``.

    Certificate and hostname verification are always on.

    Raises:
        ssl.SSLError: If the local OpenSSL supports none of the TLS 1.2 suites.
    """
    policy = policy or default_tls_policy()

    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
    context.verify_mode = ssl.CERT_REQUIRED
    context.check_hostname = True
    context.minimum_version = _TLS_VERSIONS[policy.min_version]
    context.set_ciphers(policy.cipher_string)

    log.debug(
        "TLS context built",
        min_version=policy.min_version,
        tls12_suites=len(policy.tls12_ciphers),
    )
    return context


def build_client(
    config: GlobalConfig | None = None,
    policy: TLSPolicy | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create a new httpx.Client using the secure transport.

    Args:
        config: Optional GlobalConfig. Uses singleton if not provided.
        policy: TLS policy; defaults to ``default_tls_policy()``.
        transport: Replacement transport (tests inject httpx.MockTransport).

    Returns:
        An open httpx.Client; callers close it with a ``with`` block.
    """
    config = config or get_config()

    if transport is None:
        transport = httpx.HTTPTransport(verify=build_ssl_context(policy))

    user_agent = random.choice(config.user_agents)

    return httpx.Client(
        transport=transport,
        timeout=httpx.Timeout(config.request_timeout_sec),
        follow_redirects=config.follow_redirects,
        headers={"User-Agent": user_agent},
    )
