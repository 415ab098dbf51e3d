"""Tests for configuration loading and the sponsor credential."""

import pytest
from stellar_sdk import Keypair

from soroban_relay.config import RelayConfig, SponsorCredential
from soroban_relay.exceptions import ConfigurationError, ValidationError


class TestRelayConfig:
    def test_defaults(self):
        config = RelayConfig.from_env({})
        assert config.sponsor_secret is None
        assert config.rpc_urls == {}
        assert config.request_timeout == 10.0
        assert config.confirm_max_attempts == 15
        assert config.confirm_interval == 3.0

    def test_reads_endpoint_overrides(self):
        config = RelayConfig.from_env(
            {
                "SOROBAN_RPC_URL": "https://rpc.test",
                "SOROBAN_MAINNET_RPC_URL": "https://rpc.main",
                "HORIZON_FUTURENET_URL": "https://horizon.future",
                "RELAY_REQUEST_TIMEOUT": "2.5",
            }
        )
        assert config.rpc_urls == {"TESTNET": "https://rpc.test", "MAINNET": "https://rpc.main"}
        assert config.horizon_urls == {"FUTURENET": "https://horizon.future"}
        assert config.request_timeout == 2.5

    def test_invalid_timeout(self):
        with pytest.raises(ValidationError):
            RelayConfig.from_env({"RELAY_REQUEST_TIMEOUT": "soon"})

    def test_secret_hidden_from_repr(self):
        secret = Keypair.random().secret
        config = RelayConfig.from_env({"SPONSOR_SECRET_KEY": secret})
        assert secret not in repr(config)

    def test_loads_dotenv_file(self, tmp_path, monkeypatch):
        keypair = Keypair.random()
        monkeypatch.delenv("SPONSOR_SECRET_KEY", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text(f"SPONSOR_SECRET_KEY={keypair.secret}\n")

        config = RelayConfig.from_env(dotenv_path=str(env_file))

        assert config.sponsor_credential().public_key == keypair.public_key
        monkeypatch.delenv("SPONSOR_SECRET_KEY", raising=False)


class TestSponsorCredential:
    def test_from_secret(self):
        keypair = Keypair.random()
        credential = SponsorCredential.from_secret(keypair.secret)
        assert credential.public_key == keypair.public_key
        assert keypair.secret not in repr(credential)
        assert keypair.public_key in repr(credential)

    def test_missing_secret(self):
        with pytest.raises(ConfigurationError):
            SponsorCredential.from_secret(None)

    def test_invalid_secret(self):
        with pytest.raises(ValidationError) as excinfo:
            SponsorCredential.from_secret("SNOTAVALIDSECRET")
        assert excinfo.value.field == "sponsor_secret"

    def test_public_only_keypair(self):
        public = Keypair.from_public_key(Keypair.random().public_key)
        with pytest.raises(ConfigurationError):
            SponsorCredential(public)
