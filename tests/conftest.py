from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
from requests import Session
from stellar_sdk import Account, Keypair, StrKey, xdr
from stellar_sdk.soroban_rpc import SendTransactionStatus

from soroban_relay.config import SponsorCredential
from soroban_relay.networks import NetworkProfile
from soroban_relay.soroban.connections import SorobanConnections


class DummyResponse:
    def __init__(self, payload: Any = None, *, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class DummySession(Session):
    """Session replaying queued responses (or exceptions) for every GET."""

    def __init__(self, responses: list[DummyResponse | Exception]) -> None:
        super().__init__()
        self._responses = list(responses)
        self.calls: list[tuple[str, float]] = []

    def get(self, url: str, timeout: float) -> DummyResponse:  # type: ignore[override]
        self.calls.append((url, timeout))
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response


class FakeServer:
    """Stand-in for ``SorobanServer`` recording every RPC call in order."""

    def __init__(
        self,
        *,
        simulation_error: str | None = None,
        result: xdr.SCVal | None = None,
        status: SendTransactionStatus = SendTransactionStatus.PENDING,
        tx_hash: str = "ab" * 32,
        empty_results: bool = False,
    ) -> None:
        self.simulation_error = simulation_error
        self.empty_results = empty_results
        self.result = result if result is not None else xdr.SCVal(xdr.SCValType.SCV_VOID)
        self.status = status
        self.tx_hash = tx_hash
        self.calls: list[str] = []
        self.envelopes: list[Any] = []

    def load_account(self, account_id: str) -> Account:
        self.calls.append("load_account")
        return Account(account_id, 100)

    def simulate_transaction(self, envelope: Any) -> SimpleNamespace:
        self.calls.append("simulate_transaction")
        self.envelopes.append(envelope)
        results = [SimpleNamespace(xdr=self.result.to_xdr())]
        if self.simulation_error or self.empty_results:
            results = None
        return SimpleNamespace(
            error=self.simulation_error,
            results=results,
            latest_ledger=1234,
            min_resource_fee=5000,
        )

    def prepare_transaction(self, envelope: Any, simulation: Any) -> Any:
        self.calls.append("prepare_transaction")
        return envelope

    def send_transaction(self, envelope: Any) -> SimpleNamespace:
        self.calls.append("send_transaction")
        self.envelopes.append(envelope)
        error_xdr = None
        if self.status is SendTransactionStatus.ERROR:
            error_xdr = "AAAAAAAAAGT////7AAAAAA=="
        return SimpleNamespace(status=self.status, hash=self.tx_hash, error_result_xdr=error_xdr)


class FakeConnections(SorobanConnections):
    def __init__(self, server: FakeServer, session: Session) -> None:
        super().__init__(request_timeout=1.0, session=session)
        self.server = server
        self.rpc_networks: list[str] = []

    def rpc_server(self, network: NetworkProfile) -> FakeServer:  # type: ignore[override]
        self.rpc_networks.append(network.name)
        return self.server


def horizon_success(successful: bool = True, result_code: str | None = None) -> DummyResponse:
    payload: dict[str, Any] = {"hash": "ab" * 32, "successful": successful, "ledger": 42}
    if result_code is not None:
        payload["result_codes"] = {"transaction": result_code}
    return DummyResponse(payload)


def not_found() -> DummyResponse:
    return DummyResponse({"status": 404}, status_code=404)


@pytest.fixture
def account_address() -> str:
    return Keypair.random().public_key


@pytest.fixture
def contract_address() -> str:
    return StrKey.encode_contract(bytes(range(32)))


@pytest.fixture
def credential() -> SponsorCredential:
    return SponsorCredential(Keypair.random())


@pytest.fixture
def order_id() -> str:
    return "0x" + "11" * 32


@pytest.fixture
def sleeps() -> list[float]:
    return []
