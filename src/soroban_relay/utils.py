"""Utility functions for the Soroban gas relay."""

import re

from .constants import get_contract_error_name

_CONTRACT_ERROR_RE = re.compile(r"Error\(Contract, #(\d+)\)")


def strip_hex_prefix(value: str) -> str:
    """Remove an optional ``0x`` prefix from a hex string."""
    if value.startswith("0x"):
        return value[2:]
    return value


def explorer_tx_url(explorer_url: str, tx_hash: str) -> str:
    """Build the block explorer link for a transaction hash."""
    return f"{explorer_url.rstrip('/')}/tx/{tx_hash}"


def parse_contract_error(diagnostic: str | None) -> str | None:
    """Extract the contract error name from a simulation diagnostic."""
    if not diagnostic:
        return None

    match = _CONTRACT_ERROR_RE.search(diagnostic)
    if match is None:
        return None

    code = int(match.group(1))
    return get_contract_error_name(code) or f"ContractError#{code}"

