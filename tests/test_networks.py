import pytest
from stellar_sdk import Network

from soroban_relay.config import RelayConfig
from soroban_relay.exceptions import UnsupportedNetworkError
from soroban_relay.networks import MAINNET, TESTNET, resolve, supported_networks


def test_supported_networks():
    assert supported_networks() == ["TESTNET", "FUTURENET", "MAINNET"]


@pytest.mark.parametrize("name", ["TESTNET", "testnet", "TestNet"])
def test_resolve_is_case_insensitive(name):
    assert resolve(name) is TESTNET


def test_passphrases():
    assert resolve("testnet").network_passphrase == Network.TESTNET_NETWORK_PASSPHRASE
    assert resolve("futurenet").network_passphrase == Network.FUTURENET_NETWORK_PASSPHRASE
    assert resolve("mainnet").network_passphrase == Network.PUBLIC_NETWORK_PASSPHRASE


@pytest.mark.parametrize("name", ["INVALID_NETWORK", "", "pubnet"])
def test_unknown_network(name):
    with pytest.raises(UnsupportedNetworkError) as excinfo:
        resolve(name)
    assert excinfo.value.message == f"Unsupported network: {name}"
    assert excinfo.value.details["supported"] == supported_networks()


def test_overrides_apply_per_network():
    config = RelayConfig(
        rpc_urls={"MAINNET": "https://rpc.example/"},
        horizon_urls={"MAINNET": "https://horizon.example"},
    )

    profile = resolve("mainnet", config)

    assert profile.rpc_url == "https://rpc.example"
    assert profile.horizon_url == "https://horizon.example"
    assert profile.network_passphrase == MAINNET.network_passphrase
    assert resolve("testnet", config) is TESTNET
