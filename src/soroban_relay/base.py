"""Soroban gas relay base interface."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from .constants import DEFAULT_NETWORK
from .types import OrderParams, TransactionResult, ViewResult


class RelayBase(ABC):
    """Sponsored liquidity provider contract operations."""

    @abstractmethod
    def create_order(
        self,
        contract_address: str,
        order_params: OrderParams | Mapping[str, Any],
        network_name: str = DEFAULT_NETWORK,
    ) -> TransactionResult:
        pass

    @abstractmethod
    def settle(
        self,
        contract_address: str,
        order_id: str,
        liquidity_provider: str,
        settle_percent: int | str,
        caller: str,
        network_name: str = DEFAULT_NETWORK,
    ) -> TransactionResult:
        pass

    @abstractmethod
    def refund(
        self,
        contract_address: str,
        order_id: str,
        fee: int | str,
        caller: str,
        network_name: str = DEFAULT_NETWORK,
    ) -> TransactionResult:
        pass

    @abstractmethod
    def register_lp_node(
        self,
        contract_address: str,
        lp_node_id: str,
        capacity: int | str,
        caller: str,
        network_name: str = DEFAULT_NETWORK,
    ) -> TransactionResult:
        pass

    @abstractmethod
    def get_order_id(
        self, contract_address: str, order_id: str, network_name: str = DEFAULT_NETWORK
    ) -> ViewResult:
        pass

    @abstractmethod
    def get_order_info(
        self, contract_address: str, order_id: str, network_name: str = DEFAULT_NETWORK
    ) -> ViewResult:
        pass

    @abstractmethod
    def get_token_balance(
        self, contract_address: str, user_address: str, network_name: str = DEFAULT_NETWORK
    ) -> ViewResult:
        pass

    @abstractmethod
    def get_lp_fee_details(
        self, contract_address: str, network_name: str = DEFAULT_NETWORK
    ) -> ViewResult:
        pass

    @abstractmethod
    def info(self) -> dict[str, Any]:
        pass
