"""Constants and mappings for the Soroban gas relay."""

from enum import Enum, IntEnum

# Fee and validity windows (seconds) for built transactions
BASE_FEE = 100
SPONSORED_TX_TIMEOUT = 300
READ_ONLY_TX_TIMEOUT = 30

# Confirmation polling against Horizon
DEFAULT_CONFIRM_MAX_ATTEMPTS = 15
DEFAULT_CONFIRM_INTERVAL = 3.0
DEFAULT_REQUEST_TIMEOUT = 10.0

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

DEFAULT_NETWORK = "TESTNET"

UNRESOLVED_MESSAGE = "Transaction submitted - check explorer for confirmation"


class ContractMethod(str, Enum):
    """Liquidity provider contract entry points invoked by the relay."""

    CREATE_ORDER = "create_order"
    SETTLE = "settle"
    REFUND = "refund"
    REGISTER_LP_NODE = "register_lp_node"
    GET_ORDER_ID = "get_order_id"
    GET_ORDER_INFO = "get_order_info"
    GET_TOKEN_BALANCE = "get_token_balance"
    GET_LP_FEE_DETAILS = "get_lp_fee_details"


class ContractError(IntEnum):
    """Error codes raised by the liquidity provider contract."""

    INVALID_AMOUNT = 1
    ZERO_ADDRESS = 2
    INVALID_SENDER_FEE_RECIPIENT = 3
    INVALID_MESSAGE_HASH = 4
    INVALID_SETTLE_PERCENT = 5
    ORDER_ALREADY_EXISTS = 6
    ORDER_NOT_FOUND = 7
    ORDER_FULFILLED = 8
    ORDER_REFUNDED = 9
    FEE_EXCEEDS_PROTOCOL_FEE = 10
    PAUSED = 11
    UNAUTHORIZED = 12
    TRANSFER_FAILED = 13
    ADDRESS_ALREADY_SET = 14
    INVALID_PARAMETER = 15
    INVALID_LP_NODE_PARAMETERS = 16
    LP_NODE_ID_ALREADY_EXISTS = 17
    SETTINGS_CONTRACT_NOT_SET = 18
    USDC_NOT_SET = 19


def get_contract_error_name(code: int) -> str | None:
    """Get the contract error name for a numeric code.

    Args:
        code: Error number reported as ``Error(Contract, #code)``

    Returns:
        Error name (e.g., "OrderNotFound"), or None if the code is unknown
    """
    try:
        error = ContractError(code)
    except ValueError:
        return None
    return "".join(part.capitalize() for part in error.name.split("_"))
