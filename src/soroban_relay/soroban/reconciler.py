"""Post-submission confirmation of sponsored transactions via Horizon."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import requests

from ..constants import (
    DEFAULT_CONFIRM_INTERVAL,
    DEFAULT_CONFIRM_MAX_ATTEMPTS,
    DEFAULT_REQUEST_TIMEOUT,
    UNRESOLVED_MESSAGE,
)
from ..exceptions import TransportError, ValidationError
from ..networks import NetworkProfile
from ..types import ReconcileOutcome, TransactionResult
from ..utils import explorer_tx_url

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .connections import SorobanConnections

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerTransaction:
    """Final state of a transaction as indexed by Horizon."""

    tx_hash: str
    successful: bool
    result_code: str | None = None
    ledger: int | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False)


def _is_conclusive(observation: LedgerTransaction | None) -> bool:
    return observation is not None


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded fixed-interval polling schedule."""

    max_attempts: int = DEFAULT_CONFIRM_MAX_ATTEMPTS
    interval: float = DEFAULT_CONFIRM_INTERVAL
    sleep: Callable[[float], None] = time.sleep
    classify: Callable[[Any], bool] = _is_conclusive

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValidationError(
                "max_attempts must be at least 1", field="max_attempts", value=self.max_attempts
            )
        if self.interval < 0:
            raise ValidationError(
                "interval must be non-negative", field="interval", value=self.interval
            )

    def attempts(self) -> Iterator[int]:
        """Yield attempt numbers, sleeping between consecutive attempts."""

        for attempt in range(1, self.max_attempts + 1):
            yield attempt
            if attempt < self.max_attempts:
                self.sleep(self.interval)

    def delays(self) -> list[float]:
        return [self.interval] * (self.max_attempts - 1)

    @property
    def budget(self) -> float:
        return (self.max_attempts - 1) * self.interval


class HorizonQuery:
    """Fetch transactions by hash from a Horizon ledger-query endpoint."""

    def __init__(
        self,
        horizon_url: str,
        session: requests.Session,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._horizon_url = horizon_url.rstrip("/")
        self._session = session
        self._request_timeout = request_timeout

    def fetch_transaction(self, tx_hash: str) -> LedgerTransaction | None:
        """Return the indexed transaction, or None while Horizon reports 404."""

        url = f"{self._horizon_url}/transactions/{tx_hash}"
        try:
            response = self._session.get(url, timeout=self._request_timeout)
        except requests.RequestException as exc:
            raise TransportError(
                f"Horizon API error: {exc}", endpoint=url, details={"error": str(exc)}
            ) from exc

        if response.status_code == 404:
            return None

        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"Horizon API error: HTTP {response.status_code}",
                endpoint=url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(
                "Horizon API error: response is not JSON",
                endpoint=url,
                status_code=response.status_code,
            ) from exc

        if not isinstance(payload, Mapping) or "successful" not in payload:
            raise TransportError(
                "Horizon API error: unexpected transaction payload",
                endpoint=url,
                status_code=response.status_code,
            )

        result_codes = payload.get("result_codes")
        result_code = (
            result_codes.get("transaction") if isinstance(result_codes, Mapping) else None
        )

        return LedgerTransaction(
            tx_hash=tx_hash,
            successful=bool(payload["successful"]),
            result_code=result_code,
            ledger=payload.get("ledger"),
            raw=payload,
        )


class ConfirmationReconciler:
    """Poll Horizon until a submitted transaction reaches a final state."""

    def __init__(
        self,
        connections: SorobanConnections,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._connections = connections
        self._policy = policy or RetryPolicy()

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def reconcile(self, tx_hash: str, network: NetworkProfile) -> TransactionResult:
        query = self._connections.horizon_query(network)
        explorer_url = explorer_tx_url(network.explorer_url, tx_hash)
        policy = self._policy

        # 404s and transport faults are both inconclusive; they are counted apart
        not_found = 0
        transport_errors = 0
        attempts = 0

        for attempt in policy.attempts():
            attempts = attempt
            logger.debug("Checking status of %s (%s/%s)", tx_hash, attempt, policy.max_attempts)

            try:
                observation = query.fetch_transaction(tx_hash)
            except TransportError as exc:
                transport_errors += 1
                logger.warning(
                    "Horizon check failed for %s (attempt %s/%s): %s",
                    tx_hash,
                    attempt,
                    policy.max_attempts,
                    exc,
                )
                continue

            if not policy.classify(observation):
                not_found += 1
                logger.debug("Transaction %s not found yet", tx_hash)
                continue

            context = {"attempts": attempts, "ledger": observation.ledger}
            if observation.successful:
                logger.info("Transaction %s confirmed after %s attempt(s)", tx_hash, attempts)
                return TransactionResult(
                    success=True,
                    message="Transaction successful (Horizon)",
                    network=network.name,
                    tx_hash=tx_hash,
                    explorer_url=explorer_url,
                    raw_response={"outcome": ReconcileOutcome.CONFIRMED_SUCCESS.value, **context},
                )

            logger.info(
                "Transaction %s failed on-chain (result=%s)", tx_hash, observation.result_code
            )
            return TransactionResult(
                success=False,
                message=f"Transaction failed: {observation.result_code or 'Unknown error'}",
                network=network.name,
                tx_hash=tx_hash,
                explorer_url=explorer_url,
                error=observation.result_code,
                raw_response={"outcome": ReconcileOutcome.CONFIRMED_FAILURE.value, **context},
            )

        logger.warning(
            "Confirmation unresolved for %s after %s attempts (not_found=%s, errors=%s)",
            tx_hash,
            attempts,
            not_found,
            transport_errors,
        )
        return TransactionResult(
            success=True,
            message=UNRESOLVED_MESSAGE,
            network=network.name,
            tx_hash=tx_hash,
            explorer_url=explorer_url,
            raw_response={
                "outcome": ReconcileOutcome.UNRESOLVED.value,
                "attempts": attempts,
                "not_found": not_found,
                "transport_errors": transport_errors,
            },
        )
