"""Read-only queries example for the Soroban Gas Relay.

No sponsor key is needed: views are simulated and never submitted.
"""

import os
import sys

from dotenv import load_dotenv

from soroban_relay import SorobanRelay

load_dotenv()


def example_queries(order_id: str):
    contract_address = os.getenv("LP_CONTRACT_ADDRESS")
    if not contract_address:
        raise ValueError("LP_CONTRACT_ADDRESS not found in environment variables")

    relay = SorobanRelay.from_env()
    print(f"ℹ️  {relay.info()}")

    fees = relay.get_lp_fee_details(contract_address)
    if fees.success:
        print(f"✅ Fee details: {fees.data}")
    else:
        print(f"❌ Fee details failed: {fees.message}")

    order = relay.get_order_info(contract_address, order_id)
    if order.success:
        print("✅ Order info:")
        for key, value in order.data.items():
            print(f"   {key}: {value}")
    else:
        print(f"❌ Order lookup failed: {order.message}")


def main():
    print("=" * 50)
    print("Soroban Gas Relay - Example 03")
    print("🔍 Read-only Queries")
    print("=" * 50)

    if len(sys.argv) != 2:
        print("Usage: python 03_read_only_queries.py <order_id>")
        sys.exit(1)

    example_queries(sys.argv[1])


if __name__ == "__main__":
    main()
