"""Create Order example for the Soroban Gas Relay.

This example demonstrates:
- Loading the sponsor key from the environment
- Relaying a sponsored create_order call
- Reading the reconciled transaction result
"""

import logging
import os

from dotenv import load_dotenv

from soroban_relay import SorobanRelay

load_dotenv()


def example_create_order():
    """Example of a sponsored order creation on testnet."""

    contract_address = os.getenv("LP_CONTRACT_ADDRESS")
    sender = os.getenv("SENDER_ADDRESS")
    token = os.getenv("TOKEN_ADDRESS")
    if not contract_address or not sender or not token:
        raise ValueError("LP_CONTRACT_ADDRESS, SENDER_ADDRESS and TOKEN_ADDRESS must be set")

    relay = SorobanRelay.from_env()

    result = relay.create_order(
        contract_address,
        {
            "sender": sender,
            "order_id": os.urandom(32).hex(),
            "token": token,
            "amount": "10000000",
            "rate": 1,
            "message_hash": "QmExampleMessageHash",
        },
        network_name="TESTNET",
    )

    if result.success:
        print("✅ Order relayed!")
        print(f"   Tx hash: {result.tx_hash}")
        print(f"   Explorer: {result.explorer_url}")
        print(f"   Status: {result.message}")
    else:
        print(f"❌ Order failed: {result.message}")


def main():
    """Run the create order example."""

    logging.basicConfig(level=logging.INFO)

    print("=" * 50)
    print("Soroban Gas Relay - Example 01")
    print("🧾 Create Order")
    print("=" * 50)

    example_create_order()


if __name__ == "__main__":
    main()
