"""Soroban implementation of the gas relay."""

from .client import SorobanRelay, parse_order_params
from .connections import SorobanConnections
from .reconciler import ConfirmationReconciler, HorizonQuery, LedgerTransaction, RetryPolicy
from .transactions import (
    AttemptStage,
    ContractCallRequest,
    ReadOnlyInvoker,
    SponsoredTransactionPipeline,
    TransactionAttempt,
)

__all__ = [
    "SorobanRelay",
    "parse_order_params",
    "SorobanConnections",
    "ConfirmationReconciler",
    "HorizonQuery",
    "LedgerTransaction",
    "RetryPolicy",
    "AttemptStage",
    "ContractCallRequest",
    "ReadOnlyInvoker",
    "SponsoredTransactionPipeline",
    "TransactionAttempt",
]
