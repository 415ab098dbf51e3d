"""Type definitions and data models for the Soroban gas relay."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ReconcileOutcome(Enum):
    """Terminal states of a confirmation reconciliation."""

    CONFIRMED_SUCCESS = "confirmed_success"
    CONFIRMED_FAILURE = "confirmed_failure"
    UNRESOLVED = "unresolved"


@dataclass
class TransactionResult:
    """Caller-facing outcome of a sponsored contract call."""

    success: bool
    message: str
    network: str
    tx_hash: str | None = None
    explorer_url: str | None = None
    error: str | None = None
    raw_response: dict[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return the JSON shape exposed by the relay endpoints."""

        payload: dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "network": self.network,
        }
        if self.tx_hash is not None:
            payload["txHash"] = self.tx_hash
        if self.explorer_url is not None:
            payload["explorerUrl"] = self.explorer_url
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass
class ViewResult:
    """Outcome of a read-only (simulated) contract call."""

    success: bool
    network: str
    data: Any = None
    message: str | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success, "network": self.network}
        if self.success:
            payload["data"] = self.data
        else:
            payload["message"] = self.message
        return payload


@dataclass(frozen=True)
class OrderParams:
    """Parameters of the liquidity provider contract's ``create_order``."""

    order_id: str
    token: str
    sender: str
    amount: int
    rate: int
    sender_fee_recipient: str
    sender_fee: int
    refund_address: str
    message_hash: str

    def as_fields(self) -> dict[str, Any]:
        return {
            "amount": self.amount,
            "message_hash": self.message_hash,
            "order_id": self.order_id,
            "rate": self.rate,
            "refund_address": self.refund_address,
            "sender": self.sender,
            "sender_fee": self.sender_fee,
            "sender_fee_recipient": self.sender_fee_recipient,
            "token": self.token,
        }


@dataclass(frozen=True)
class LpNode:
    """Liquidity provider node registration payload."""

    lp_node_id: str
    capacity: int


@dataclass
class Order:
    """Order record as returned by ``get_order_info``."""

    order_id: str
    sender: str
    token: str
    amount: str
    sender_fee_recipient: str
    sender_fee: str
    protocol_fee: str
    is_fulfilled: bool
    is_refunded: bool
    refund_address: str
    current_bps: str
    rate: str
    message_hash: str
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_native(cls, data: Mapping[str, Any]) -> "Order":
        """Construct an order from a translated contract return value."""

        known = {name for name in cls.__dataclass_fields__ if name != "extra"}
        missing = sorted(name for name in known if name not in data)
        if missing:
            raise KeyError(f"Order payload missing fields: {', '.join(missing)}")

        return cls(
            **{name: data[name] for name in known},
            extra={key: value for key, value in data.items() if key not in known},
        )

    def as_dict(self) -> dict[str, Any]:
        data = {name: getattr(self, name) for name in self.__dataclass_fields__ if name != "extra"}
        data.update(self.extra)
        return data
