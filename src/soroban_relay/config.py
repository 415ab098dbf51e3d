"""Configuration containers for the Soroban gas relay."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from stellar_sdk import Keypair
from stellar_sdk.exceptions import Ed25519SecretSeedInvalidError

from .constants import (
    DEFAULT_CONFIRM_INTERVAL,
    DEFAULT_CONFIRM_MAX_ATTEMPTS,
    DEFAULT_REQUEST_TIMEOUT,
)
from .exceptions import ConfigurationError, ValidationError

if TYPE_CHECKING:  # pragma: no cover - import-time only
    from .networks import NetworkProfile

# Environment variables carrying per-network endpoint overrides
RPC_URL_ENV = {
    "TESTNET": "SOROBAN_RPC_URL",
    "FUTURENET": "SOROBAN_FUTURENET_RPC_URL",
    "MAINNET": "SOROBAN_MAINNET_RPC_URL",
}
HORIZON_URL_ENV = {
    "TESTNET": "HORIZON_URL",
    "FUTURENET": "HORIZON_FUTURENET_URL",
    "MAINNET": "HORIZON_MAINNET_URL",
}


class SponsorCredential:
    """Read-only handle on the sponsor's signing keypair."""

    __slots__ = ("_keypair",)

    def __init__(self, keypair: Keypair) -> None:
        if not keypair.can_sign():
            raise ConfigurationError("Sponsor keypair must hold a secret seed")
        self._keypair = keypair

    @classmethod
    def from_secret(cls, secret: str | None) -> SponsorCredential:
        if not secret:
            raise ConfigurationError("SPONSOR_SECRET_KEY not found in environment variables")

        try:
            keypair = Keypair.from_secret(secret)
        except (Ed25519SecretSeedInvalidError, ValueError) as exc:
            raise ValidationError(
                "Invalid sponsor secret key",
                field="sponsor_secret",
                details={"error": type(exc).__name__},
            ) from exc

        return cls(keypair)

    @property
    def public_key(self) -> str:
        return self._keypair.public_key

    @property
    def keypair(self) -> Keypair:
        return self._keypair

    def __repr__(self) -> str:
        return f"SponsorCredential(public_key={self.public_key!r})"


@dataclass(frozen=True)
class RelayConfig:
    """Aggregated configuration used to construct the relay."""

    sponsor_secret: str | None = field(default=None, repr=False)
    rpc_urls: Mapping[str, str] = field(default_factory=dict)
    horizon_urls: Mapping[str, str] = field(default_factory=dict)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    confirm_max_attempts: int = DEFAULT_CONFIRM_MAX_ATTEMPTS
    confirm_interval: float = DEFAULT_CONFIRM_INTERVAL

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        dotenv_path: str | None = None,
    ) -> RelayConfig:
        """Build a configuration from environment variables.

        When ``environ`` is omitted the process environment is used, after
        loading a ``.env`` file if one is present.
        """

        if environ is None:
            load_dotenv(dotenv_path)
            environ = os.environ

        rpc_urls = {name: environ[var] for name, var in RPC_URL_ENV.items() if environ.get(var)}
        horizon_urls = {
            name: environ[var] for name, var in HORIZON_URL_ENV.items() if environ.get(var)
        }

        try:
            request_timeout = float(
                environ.get("RELAY_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)
            )
        except ValueError as exc:
            raise ValidationError(
                "RELAY_REQUEST_TIMEOUT must be a number",
                field="RELAY_REQUEST_TIMEOUT",
                value=environ.get("RELAY_REQUEST_TIMEOUT"),
            ) from exc

        return cls(
            sponsor_secret=environ.get("SPONSOR_SECRET_KEY") or None,
            rpc_urls=rpc_urls,
            horizon_urls=horizon_urls,
            request_timeout=request_timeout,
        )

    def sponsor_credential(self) -> SponsorCredential:
        """Return the sponsor credential, failing if no secret is configured."""

        return SponsorCredential.from_secret(self.sponsor_secret)

    def apply_overrides(self, key: str, profile: NetworkProfile) -> NetworkProfile:
        """Return ``profile`` with configured endpoint overrides applied."""

        rpc_url = self.rpc_urls.get(key)
        horizon_url = self.horizon_urls.get(key)
        if rpc_url is None and horizon_url is None:
            return profile

        return replace(
            profile,
            rpc_url=(rpc_url or profile.rpc_url).rstrip("/"),
            horizon_url=(horizon_url or profile.horizon_url).rstrip("/"),
        )
