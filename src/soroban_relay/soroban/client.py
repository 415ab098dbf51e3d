"""Soroban gas relay routing liquidity provider contract calls through a sponsor."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from stellar_sdk import xdr

from ..base import RelayBase
from ..codec import (
    ArgType,
    EncodedValue,
    coerce_integer,
    decode_bytes32,
    encode,
    encode_order_params,
    validate_address,
)
from ..config import RelayConfig, SponsorCredential
from ..constants import DEFAULT_NETWORK, ContractMethod
from ..exceptions import ConfigurationError, RelayError, ValidationError
from ..networks import resolve, supported_networks
from ..types import LpNode, Order, OrderParams, TransactionResult, ViewResult
from .connections import SorobanConnections
from .reconciler import ConfirmationReconciler, RetryPolicy
from .transactions import ContractCallRequest, ReadOnlyInvoker, SponsoredTransactionPipeline

logger = logging.getLogger(__name__)

ArgsBuilder = Callable[[], Sequence[EncodedValue | xdr.SCVal]]


def parse_order_params(raw: OrderParams | Mapping[str, Any]) -> OrderParams:
    """Validate raw ``create_order`` input and apply the relay's defaults.

    ``sender_fee_recipient`` and ``refund_address`` default to ``sender``;
    ``sender_fee`` and ``rate`` default to zero.

    Raises:
        ValidationError: If a required field is missing or malformed
    """
    if isinstance(raw, OrderParams):
        raw = raw.as_fields()
    if not isinstance(raw, Mapping):
        raise ValidationError(
            "Missing required order parameters (sender, order_id, token, amount)",
            field="order_params",
            value=raw,
            details={"rule": "missing_field"},
        )

    sender = raw.get("sender")
    order_id = raw.get("order_id")
    token = raw.get("token")
    amount = raw.get("amount")
    if not sender or not order_id or not token or amount is None:
        raise ValidationError(
            "Missing required order parameters (sender, order_id, token, amount)",
            field="order_params",
            details={"rule": "missing_field"},
        )

    sender_fee_recipient = raw.get("sender_fee_recipient") or sender
    refund_address = raw.get("refund_address") or sender
    for field, address in (
        ("sender", sender),
        ("token", token),
        ("sender_fee_recipient", sender_fee_recipient),
        ("refund_address", refund_address),
    ):
        validate_address(address, field)

    decode_bytes32(order_id, "order_id")

    amount_value = coerce_integer(amount, "amount")
    if amount_value < 1:
        raise ValidationError(
            "amount must be >= 1", field="amount", value=amount, details={"rule": "out_of_range"}
        )

    sender_fee = coerce_integer(raw.get("sender_fee") or 0, "sender_fee")
    if sender_fee < 0:
        raise ValidationError(
            "sender_fee must be >= 0",
            field="sender_fee",
            value=sender_fee,
            details={"rule": "out_of_range"},
        )

    rate = coerce_integer(raw.get("rate") or 0, "rate")

    message_hash = raw.get("message_hash")
    if not isinstance(message_hash, str) or not message_hash:
        raise ValidationError(
            "Invalid message_hash: must be a non-empty string",
            field="message_hash",
            value=message_hash,
            details={"rule": "empty_string"},
        )

    return OrderParams(
        order_id=order_id,
        token=token,
        sender=sender,
        amount=amount_value,
        rate=rate,
        sender_fee_recipient=sender_fee_recipient,
        sender_fee=sender_fee,
        refund_address=refund_address,
        message_hash=message_hash,
    )


class SorobanRelay(RelayBase):
    """Relay liquidity provider contract calls with sponsor-paid fees."""

    def __init__(
        self,
        credential: SponsorCredential | None = None,
        *,
        config: RelayConfig | None = None,
        connections: SorobanConnections | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._config = config or RelayConfig()
        self._credential = credential
        self._connections = connections or SorobanConnections(
            request_timeout=self._config.request_timeout
        )
        policy = retry_policy or RetryPolicy(
            max_attempts=self._config.confirm_max_attempts,
            interval=self._config.confirm_interval,
        )
        self._reconciler = ConfirmationReconciler(self._connections, policy)
        self._invoker = ReadOnlyInvoker(self._connections)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        dotenv_path: str | None = None,
        **kwargs: Any,
    ) -> SorobanRelay:
        """Construct a relay from ``SPONSOR_SECRET_KEY`` and endpoint variables.

        A missing secret still yields a relay able to serve read-only calls;
        a malformed secret raises ``ValidationError``.
        """

        config = RelayConfig.from_env(environ, dotenv_path=dotenv_path)
        credential = config.sponsor_credential() if config.sponsor_secret else None
        if credential is None:
            logger.warning("SPONSOR_SECRET_KEY is not set; sponsored calls will fail")
        return cls(credential, config=config, **kwargs)

    @property
    def sponsor_public_key(self) -> str | None:
        return self._credential.public_key if self._credential is not None else None

    # ------------------------------------------------------------------
    # Sponsored calls
    # ------------------------------------------------------------------
    def create_order(
        self,
        contract_address: str,
        order_params: OrderParams | Mapping[str, Any],
        network_name: str = DEFAULT_NETWORK,
    ) -> TransactionResult:
        caller: dict[str, str] = {}

        def build_args() -> list[xdr.SCVal]:
            params = parse_order_params(order_params)
            caller["sender"] = params.sender
            return [encode_order_params(params)]

        return self._relay(
            contract_address,
            ContractMethod.CREATE_ORDER,
            build_args,
            lambda: caller.get("sender"),
            network_name,
        )

    def settle(
        self,
        contract_address: str,
        order_id: str,
        liquidity_provider: str,
        settle_percent: int | str,
        caller: str,
        network_name: str = DEFAULT_NETWORK,
    ) -> TransactionResult:
        return self._relay(
            contract_address,
            ContractMethod.SETTLE,
            lambda: [
                encode(order_id, ArgType.BYTES32, field="order_id"),
                encode(liquidity_provider, ArgType.ADDRESS, field="liquidity_provider"),
                encode(settle_percent, ArgType.I128, field="settle_percent"),
            ],
            lambda: caller,
            network_name,
        )

    def refund(
        self,
        contract_address: str,
        order_id: str,
        fee: int | str,
        caller: str,
        network_name: str = DEFAULT_NETWORK,
    ) -> TransactionResult:
        return self._relay(
            contract_address,
            ContractMethod.REFUND,
            lambda: [
                encode(order_id, ArgType.BYTES32, field="order_id"),
                encode(fee, ArgType.I128, field="fee"),
            ],
            lambda: caller,
            network_name,
        )

    def register_lp_node(
        self,
        contract_address: str,
        lp_node_id: str,
        capacity: int | str,
        caller: str,
        network_name: str = DEFAULT_NETWORK,
    ) -> TransactionResult:
        node = LpNode(lp_node_id=lp_node_id, capacity=capacity)
        return self._relay(
            contract_address,
            ContractMethod.REGISTER_LP_NODE,
            lambda: [
                encode(node.lp_node_id, ArgType.BYTES32, field="lp_node_id"),
                encode(node.capacity, ArgType.I128, field="capacity"),
            ],
            lambda: caller,
            network_name,
        )

    # ------------------------------------------------------------------
    # Read-only calls
    # ------------------------------------------------------------------
    def get_order_id(
        self, contract_address: str, order_id: str, network_name: str = DEFAULT_NETWORK
    ) -> ViewResult:
        return self._view(
            contract_address,
            ContractMethod.GET_ORDER_ID,
            lambda: [encode(order_id, ArgType.BYTES32, field="order_id")],
            network_name,
        )

    def get_order_info(
        self, contract_address: str, order_id: str, network_name: str = DEFAULT_NETWORK
    ) -> ViewResult:
        return self._view(
            contract_address,
            ContractMethod.GET_ORDER_INFO,
            lambda: [encode(order_id, ArgType.BYTES32, field="order_id")],
            network_name,
            transform=_order_from_native,
        )

    def get_token_balance(
        self, contract_address: str, user_address: str, network_name: str = DEFAULT_NETWORK
    ) -> ViewResult:
        return self._view(
            contract_address,
            ContractMethod.GET_TOKEN_BALANCE,
            lambda: [encode(user_address, ArgType.ADDRESS, field="user")],
            network_name,
            transform=lambda value: None if value is None else str(value),
        )

    def get_lp_fee_details(
        self, contract_address: str, network_name: str = DEFAULT_NETWORK
    ) -> ViewResult:
        return self._view(
            contract_address,
            ContractMethod.GET_LP_FEE_DETAILS,
            lambda: [],
            network_name,
            transform=_fee_details_from_native,
        )

    def info(self) -> dict[str, Any]:
        return {
            "success": True,
            "message": "Soroban Gas Relayer is running",
            "sponsor": self.sponsor_public_key,
            "networks": supported_networks(),
        }

    # ------------------------------------------------------------------
    # Internal plumbing
    # ------------------------------------------------------------------
    def _relay(
        self,
        contract_address: str,
        method: ContractMethod,
        build_args: ArgsBuilder,
        source_account: Callable[[], str | None],
        network_name: str,
    ) -> TransactionResult:
        try:
            network = resolve(network_name, self._config)
            args = build_args()
            request = ContractCallRequest.create(
                contract_address, method.value, args, source_account(), network
            )
            pipeline = self._pipeline()
        except RelayError as exc:
            logger.error("Rejected %s request: %s", method.value, exc)
            return TransactionResult(
                success=False,
                message=exc.message,
                network=str(network_name).lower(),
                error=type(exc).__name__,
                raw_response={"details": exc.details},
            )
        except Exception as exc:
            logger.exception("Unexpected failure preparing %s", method.value)
            return TransactionResult(
                success=False,
                message=str(exc) or f"{method.value} failed",
                network=str(network_name).lower(),
                error=type(exc).__name__,
            )

        return pipeline.submit_sponsored(request)

    def _view(
        self,
        contract_address: str,
        method: ContractMethod,
        build_args: ArgsBuilder,
        network_name: str,
        *,
        transform: Callable[[Any], Any] | None = None,
    ) -> ViewResult:
        try:
            network = resolve(network_name, self._config)
            request = ContractCallRequest.create(
                contract_address, method.value, build_args(), None, network
            )
            value = self._invoker.call(request)
            data = transform(value) if transform is not None else value
        except RelayError as exc:
            logger.error("%s failed: %s", method.value, exc)
            return ViewResult(
                success=False, network=str(network_name).lower(), message=exc.message
            )
        except Exception as exc:
            logger.exception("Unexpected %s failure", method.value)
            return ViewResult(
                success=False,
                network=str(network_name).lower(),
                message=str(exc) or f"{method.value} failed",
            )

        return ViewResult(success=True, network=network.name, data=data)

    def _pipeline(self) -> SponsoredTransactionPipeline:
        if self._credential is None:
            raise ConfigurationError("SPONSOR_SECRET_KEY not found in environment variables")
        return SponsoredTransactionPipeline(self._credential, self._connections, self._reconciler)


def _order_from_native(value: Any) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        raise RelayError(f"Unexpected response type: {value!r}")
    try:
        return Order.from_native(value).as_dict()
    except KeyError as exc:
        raise RelayError(str(exc.args[0])) from exc


def _fee_details_from_native(value: Any) -> dict[str, int]:
    if not isinstance(value, list) or len(value) != 2:
        raise RelayError(f"Unexpected response type: {value!r}")

    protocol_fee_percent, max_bps = value
    return {
        "protocol_fee_percent": int(protocol_fee_percent),
        "max_bps": int(max_bps),
    }
