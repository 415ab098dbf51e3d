"""Sponsored transaction pipeline and read-only contract invocation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from stellar_sdk import Account, Keypair, TransactionBuilder, TransactionEnvelope, xdr
from stellar_sdk.soroban_rpc import SendTransactionStatus, SimulateTransactionResponse

from ..codec import EncodedValue, to_native, validate_address
from ..config import SponsorCredential
from ..constants import BASE_FEE, READ_ONLY_TX_TIMEOUT, SPONSORED_TX_TIMEOUT
from ..exceptions import (
    PipelineStateError,
    RelayError,
    SimulationError,
    SubmissionError,
    TransportError,
    ValidationError,
)
from ..networks import NetworkProfile
from ..types import TransactionResult
from ..utils import parse_contract_error

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .connections import SorobanConnections
    from .reconciler import ConfirmationReconciler

logger = logging.getLogger(__name__)

_REJECTED_STATUSES = (SendTransactionStatus.ERROR, SendTransactionStatus.TRY_AGAIN_LATER)


@dataclass(frozen=True)
class ContractCallRequest:
    """A single contract invocation to relay on behalf of ``source_account``."""

    contract_id: str
    method: str
    args: tuple[EncodedValue | xdr.SCVal, ...]
    source_account: str | None
    network: NetworkProfile

    @classmethod
    def create(
        cls,
        contract_id: str,
        method: str,
        args: Sequence[EncodedValue | xdr.SCVal],
        source_account: str | None,
        network: NetworkProfile,
    ) -> ContractCallRequest:
        validate_address(contract_id, "contract", prefixes=("C",))
        if source_account is not None:
            validate_address(source_account, "caller")
        if not isinstance(method, str) or not method:
            raise ValidationError(
                "Contract method name must be a non-empty string",
                field="method",
                value=method,
                details={"rule": "empty_string"},
            )
        return cls(contract_id, method, tuple(args), source_account, network)

    def wire_args(self) -> list[xdr.SCVal]:
        return [arg.sc_val if isinstance(arg, EncodedValue) else arg for arg in self.args]


class AttemptStage(Enum):
    """Stages of one build/simulate/submit cycle, in order."""

    UNBUILT = "unbuilt"
    BUILT = "built"
    SIMULATED = "simulated"
    PREPARED = "prepared"
    SIGNED = "signed"
    SUBMITTED = "submitted"


_NEXT_STAGE = {
    AttemptStage.UNBUILT: AttemptStage.BUILT,
    AttemptStage.BUILT: AttemptStage.SIMULATED,
    AttemptStage.SIMULATED: AttemptStage.PREPARED,
    AttemptStage.PREPARED: AttemptStage.SIGNED,
    AttemptStage.SIGNED: AttemptStage.SUBMITTED,
}


@dataclass
class TransactionAttempt:
    """Ephemeral record of one relay attempt."""

    stage: AttemptStage = AttemptStage.UNBUILT
    envelope: TransactionEnvelope | None = None
    simulation: SimulateTransactionResponse | None = None
    tx_hash: str | None = None

    def advance(self, stage: AttemptStage, **updates: Any) -> None:
        if _NEXT_STAGE.get(self.stage) is not stage:
            raise PipelineStateError(self.stage, stage)

        for name, value in updates.items():
            setattr(self, name, value)
        self.stage = stage


def _simulate(server: Any, envelope: TransactionEnvelope, network: NetworkProfile):
    try:
        simulation = server.simulate_transaction(envelope)
    except Exception as exc:
        raise TransportError(
            f"Simulation request failed: {exc}",
            endpoint=network.rpc_url,
            details={"error": str(exc)},
        ) from exc

    if simulation.error:
        contract_error = parse_contract_error(simulation.error)
        raise SimulationError(
            f"Simulation failed: {simulation.error}",
            contract_error=contract_error,
            details={"latest_ledger": simulation.latest_ledger, "contract_error": contract_error},
        )

    if not simulation.results:
        raise SimulationError("Simulation returned no result")

    return simulation


class SponsoredTransactionPipeline:
    """Build, simulate, prepare, sign and submit sponsor-funded invocations."""

    def __init__(
        self,
        credential: SponsorCredential,
        connections: SorobanConnections,
        reconciler: ConfirmationReconciler,
        *,
        base_fee: int = BASE_FEE,
        timeout: int = SPONSORED_TX_TIMEOUT,
    ) -> None:
        self._credential = credential
        self._connections = connections
        self._reconciler = reconciler
        self._base_fee = base_fee
        self._timeout = timeout

    def submit_sponsored(self, request: ContractCallRequest) -> TransactionResult:
        """Relay ``request`` and return its reconciled outcome.

        Never raises: failures at any stage are returned as an unsuccessful
        result carrying the failure message and the network name.
        """
        network = request.network
        attempt = TransactionAttempt()

        try:
            self.execute(request, attempt)
            return self._reconciler.reconcile(attempt.tx_hash, network)
        except RelayError as exc:
            logger.error(
                "Sponsored %s failed at stage %s: %s", request.method, attempt.stage.value, exc
            )
            return TransactionResult(
                success=False,
                message=exc.message,
                network=network.name,
                tx_hash=attempt.tx_hash,
                error=type(exc).__name__,
                raw_response={"stage": attempt.stage.value, "details": exc.details},
            )
        except Exception as exc:
            logger.exception("Unexpected failure relaying %s", request.method)
            return TransactionResult(
                success=False,
                message=str(exc) or "Transaction failed",
                network=network.name,
                tx_hash=attempt.tx_hash,
                error=type(exc).__name__,
                raw_response={"stage": attempt.stage.value},
            )

    def execute(self, request: ContractCallRequest, attempt: TransactionAttempt) -> None:
        """Run every stage up to submission, advancing ``attempt`` in place."""

        network = request.network
        server = self._connections.rpc_server(network)
        logger.info("Using RPC %s for %s.%s", network.rpc_url, request.contract_id, request.method)
        logger.info("Sponsor %s", self._credential.public_key)

        try:
            sponsor_account = server.load_account(self._credential.public_key)
        except Exception as exc:
            raise TransportError(
                f"Failed to load sponsor account: {exc}",
                endpoint=network.rpc_url,
                details={"error": str(exc)},
            ) from exc

        envelope = (
            TransactionBuilder(sponsor_account, network.network_passphrase, base_fee=self._base_fee)
            .append_invoke_contract_function_op(
                contract_id=request.contract_id,
                function_name=request.method,
                parameters=request.wire_args(),
            )
            .set_timeout(self._timeout)
            .build()
        )
        attempt.advance(AttemptStage.BUILT, envelope=envelope)

        logger.info("Simulating %s", request.method)
        simulation = _simulate(server, envelope, network)
        attempt.advance(AttemptStage.SIMULATED, simulation=simulation)
        logger.info("Simulation successful (min_resource_fee=%s)", simulation.min_resource_fee)

        try:
            prepared = server.prepare_transaction(envelope, simulation)
        except Exception as exc:
            raise SimulationError(
                f"Failed to prepare transaction: {exc}", details={"error": str(exc)}
            ) from exc
        attempt.advance(AttemptStage.PREPARED, envelope=prepared)

        prepared.sign(self._credential.keypair)
        attempt.advance(AttemptStage.SIGNED)

        logger.info("Submitting %s", request.method)
        try:
            response = server.send_transaction(prepared)
        except Exception as exc:
            raise TransportError(
                f"Submission request failed: {exc}",
                endpoint=network.rpc_url,
                details={"error": str(exc)},
            ) from exc

        if response.status in _REJECTED_STATUSES:
            status = response.status.value
            raise SubmissionError(
                f"Submission failed: {response.error_result_xdr or status}",
                status=status,
                error_result_xdr=response.error_result_xdr,
                details={"hash": response.hash},
            )

        attempt.advance(AttemptStage.SUBMITTED, tx_hash=response.hash)
        logger.info("Transaction submitted, hash=%s status=%s", response.hash, response.status)


class ReadOnlyInvoker:
    """Simulate non-mutating contract methods without submitting."""

    def __init__(
        self,
        connections: SorobanConnections,
        *,
        base_fee: int = BASE_FEE,
        timeout: int = READ_ONLY_TX_TIMEOUT,
    ) -> None:
        self._connections = connections
        self._base_fee = base_fee
        self._timeout = timeout

    def call(self, request: ContractCallRequest) -> Any:
        """Return the simulated return value of ``request`` as plain Python."""

        network = request.network
        server = self._connections.rpc_server(network)

        # Throwaway unfunded source; simulation does not check the sequence
        source = Account(Keypair.random().public_key, 0)
        envelope = (
            TransactionBuilder(source, network.network_passphrase, base_fee=self._base_fee)
            .append_invoke_contract_function_op(
                contract_id=request.contract_id,
                function_name=request.method,
                parameters=request.wire_args(),
            )
            .set_timeout(self._timeout)
            .build()
        )

        simulation = _simulate(server, envelope, network)
        return to_native(simulation.results[0].xdr)
