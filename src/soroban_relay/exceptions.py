"""Exception hierarchy for the Soroban gas relay."""

from typing import Any


class RelayError(Exception):
    """Base exception for all relay errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(RelayError):
    """Raised when required configuration (e.g. the sponsor secret) is missing."""

    pass


class ValidationError(RelayError):
    """Raised when a value fails its type's validation predicate."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value

    @property
    def rule(self) -> str | None:
        return self.details.get("rule")


class UnsupportedNetworkError(RelayError):
    """Raised when a network name is not one of the registered profiles."""

    def __init__(self, network: str, details: dict | None = None):
        super().__init__(f"Unsupported network: {network}", details)
        self.network = network


class SimulationError(RelayError):
    """Raised when the network rejects the dry run of a transaction."""

    def __init__(
        self,
        message: str,
        contract_error: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.contract_error = contract_error


class SubmissionError(RelayError):
    """Raised when the network rejects a signed transaction."""

    def __init__(
        self,
        message: str,
        status: str | None = None,
        error_result_xdr: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.status = status
        self.error_result_xdr = error_result_xdr


class TransportError(RelayError):
    """Raised when the RPC or ledger-query service cannot be reached."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


class PipelineStateError(RuntimeError):
    """Raised on a disallowed transaction stage transition."""

    def __init__(self, current: Any, requested: Any):
        super().__init__(f"Cannot move transaction attempt from {current} to {requested}")
        self.current = current
        self.requested = requested
