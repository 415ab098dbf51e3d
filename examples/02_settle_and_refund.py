"""Settle and Refund example for the Soroban Gas Relay.

This example demonstrates:
- Settling an existing order for a liquidity provider
- Refunding an order with a fee
"""

import os
import sys

from dotenv import load_dotenv

from soroban_relay import SorobanRelay

load_dotenv()


def example_settle_and_refund(order_id: str):
    """Settle half of an order, then refund it."""

    contract_address = os.getenv("LP_CONTRACT_ADDRESS")
    provider = os.getenv("LP_PROVIDER_ADDRESS")
    if not contract_address or not provider:
        raise ValueError("LP_CONTRACT_ADDRESS and LP_PROVIDER_ADDRESS must be set")

    relay = SorobanRelay.from_env()

    settle_result = relay.settle(contract_address, order_id, provider, 50000, provider)
    if settle_result.success:
        print(f"✅ Settled: {settle_result.explorer_url}")
    else:
        print(f"❌ Settle failed: {settle_result.message}")

    refund_result = relay.refund(contract_address, order_id, 0, provider)
    if refund_result.success:
        print(f"✅ Refunded: {refund_result.explorer_url}")
    else:
        print(f"❌ Refund failed: {refund_result.message}")


def main():
    print("=" * 50)
    print("Soroban Gas Relay - Example 02")
    print("🤝 Settle and Refund")
    print("=" * 50)

    if len(sys.argv) != 2:
        print("Usage: python 02_settle_and_refund.py <order_id>")
        sys.exit(1)

    example_settle_and_refund(sys.argv[1])


if __name__ == "__main__":
    main()
