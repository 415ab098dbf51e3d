"""Network profile registry for the supported Stellar networks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from stellar_sdk import Network

from .exceptions import UnsupportedNetworkError

if TYPE_CHECKING:  # pragma: no cover - import-time only
    from .config import RelayConfig


@dataclass(frozen=True)
class NetworkProfile:
    """RPC endpoint, passphrase and ledger-query endpoints of one network."""

    name: str
    rpc_url: str
    network_passphrase: str
    horizon_url: str
    explorer_url: str


TESTNET = NetworkProfile(
    name="testnet",
    rpc_url="https://soroban-testnet.stellar.org",
    network_passphrase=Network.TESTNET_NETWORK_PASSPHRASE,
    horizon_url="https://horizon-testnet.stellar.org",
    explorer_url="https://stellar.expert/explorer/testnet",
)

FUTURENET = NetworkProfile(
    name="futurenet",
    rpc_url="https://rpc-futurenet.stellar.org",
    network_passphrase=Network.FUTURENET_NETWORK_PASSPHRASE,
    horizon_url="https://horizon-futurenet.stellar.org",
    explorer_url="https://stellar.expert/explorer/futurenet",
)

MAINNET = NetworkProfile(
    name="mainnet",
    rpc_url="https://soroban-mainnet.stellar.org",
    network_passphrase=Network.PUBLIC_NETWORK_PASSPHRASE,
    horizon_url="https://horizon.stellar.org",
    explorer_url="https://stellar.expert/explorer/public",
)

NETWORKS: dict[str, NetworkProfile] = {
    "TESTNET": TESTNET,
    "FUTURENET": FUTURENET,
    "MAINNET": MAINNET,
}


def supported_networks() -> list[str]:
    """Return the registered network names."""
    return list(NETWORKS)


def resolve(name: str, config: RelayConfig | None = None) -> NetworkProfile:
    """Resolve a network profile by case-insensitive name.

    Args:
        name: Network name (e.g., "TESTNET", "mainnet")
        config: Optional relay configuration carrying endpoint overrides

    Returns:
        Network profile, with configured endpoint overrides applied

    Raises:
        UnsupportedNetworkError: If the name is not registered
    """
    key = name.upper() if isinstance(name, str) else ""
    profile = NETWORKS.get(key)
    if profile is None:
        raise UnsupportedNetworkError(str(name), details={"supported": supported_networks()})

    if config is None:
        return profile
    return config.apply_overrides(key, profile)
