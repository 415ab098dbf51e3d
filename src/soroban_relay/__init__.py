"""Soroban Gas Relay - sponsor-paid contract calls on Stellar.

This library relays liquidity provider contract invocations on Soroban,
paying network fees from a sponsor account and reconciling each submitted
transaction against Horizon.
"""

from .base import RelayBase
from .codec import ArgType, EncodedValue, decode, encode, encode_order_params, to_native
from .config import RelayConfig, SponsorCredential
from .constants import ContractError, ContractMethod, get_contract_error_name
from .exceptions import (
    ConfigurationError,
    PipelineStateError,
    RelayError,
    SimulationError,
    SubmissionError,
    TransportError,
    UnsupportedNetworkError,
    ValidationError,
)
from .networks import NETWORKS, NetworkProfile, resolve, supported_networks
from .soroban import SorobanRelay
from .types import (
    LpNode,
    Order,
    OrderParams,
    ReconcileOutcome,
    TransactionResult,
    ViewResult,
)

__version__ = "0.1.0"

__all__ = [
    # Relay
    "RelayBase",
    "SorobanRelay",
    # Configuration and networks
    "RelayConfig",
    "SponsorCredential",
    "NetworkProfile",
    "NETWORKS",
    "resolve",
    "supported_networks",
    # Codec
    "ArgType",
    "EncodedValue",
    "encode",
    "decode",
    "encode_order_params",
    "to_native",
    # Types and enums
    "ContractMethod",
    "ContractError",
    "get_contract_error_name",
    "LpNode",
    "Order",
    "OrderParams",
    "ReconcileOutcome",
    "TransactionResult",
    "ViewResult",
    # Exceptions
    "RelayError",
    "ConfigurationError",
    "ValidationError",
    "UnsupportedNetworkError",
    "SimulationError",
    "SubmissionError",
    "TransportError",
    "PipelineStateError",
]
