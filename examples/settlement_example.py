"""
asb-transport - Settlement Example

Receives messages from an endpoint queue and settles them through the
SettlementCoordinator, enlisting each settlement in a caller-owned
transaction.

Requirements:
    pip install -e .

Usage:
    asb-transport endpoint create orders
    python examples/settlement_example.py
"""

import asyncio
import os

from azure.servicebus.aio import ServiceBusClient

from asb_transport.settlement import (
    SettlementCoordinator,
    TransactionHandle,
    TransportTransactionMode,
)


CONNECTION_STRING = os.environ.get("AzureServiceBus_ConnectionString", "")
QUEUE_NAME = "orders"


class UnitOfWork:
    """Stand-in for the handler's storage transaction."""

    def __init__(self, name: str):
        self.name = name

    def commit(self):
        print(f"  ✓ {self.name} committed")

    def rollback(self):
        print(f"  ✗ {self.name} rolled back")


async def main():
    async with ServiceBusClient.from_connection_string(CONNECTION_STRING) as client:
        receiver = client.get_queue_receiver(QUEUE_NAME)

        async with receiver:
            coordinator = SettlementCoordinator(receiver)
            received = await receiver.receive_messages(max_message_count=10, max_wait_time=5)

            for msg in received:
                print(f"\nMessage {msg.message_id}: {str(msg)}")
                work = UnitOfWork(f"handler for {msg.message_id}")
                transaction = TransactionHandle(on_commit=work.commit, on_rollback=work.rollback)

                if msg.delivery_count and msg.delivery_count > 3:
                    await coordinator.abandon(msg, TransportTransactionMode.RECEIVE_ONLY, transaction)
                else:
                    await coordinator.complete(msg, TransportTransactionMode.RECEIVE_ONLY, transaction)


if __name__ == "__main__":
    asyncio.run(main())
