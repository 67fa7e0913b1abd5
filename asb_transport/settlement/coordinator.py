"""
Settlement Coordinator

Completes or abandons received messages according to the endpoint's
transport transaction mode. In any mode other than NONE the remote call is
wrapped in a TransactionScope so the caller's transaction commits only
together with a successful acknowledgment.

Author: asb-transport Contributors
Date: 2026-10-18
"""

import asyncio
import contextlib
import logging
import time
from typing import Any, Awaitable, Callable, Optional, Protocol

from asb_transport.core.logging_config import log_with_context

from .metrics import SettlementMetrics, get_metrics
from .transaction import TransactionHandle, TransactionScope, TransportTransactionMode

logger = logging.getLogger(__name__)


class MessageReceiver(Protocol):
    """Runtime-plane operations used for settlement (satisfied by ServiceBusReceiver)."""

    async def complete_message(self, message: Any) -> None:
        ...

    async def abandon_message(self, message: Any) -> None:
        ...


def _raise_if_cancelled(cancellation: Optional[asyncio.Event]) -> None:
    if cancellation is not None and cancellation.is_set():
        raise asyncio.CancelledError("Settlement cancelled before the remote call was issued")


async def _run_cancellable(call: Awaitable[Any], cancellation: Optional[asyncio.Event]) -> Any:
    """Await a remote call, abandoning it if the cancellation event fires first."""
    if cancellation is None:
        return await call

    call_task = asyncio.ensure_future(call)
    cancel_task = asyncio.ensure_future(cancellation.wait())
    try:
        done, _ = await asyncio.wait(
            {call_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        call_task.cancel()
        raise
    finally:
        cancel_task.cancel()

    if call_task in done:
        return call_task.result()

    call_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await call_task
    raise asyncio.CancelledError("Settlement cancelled while the remote call was in flight")


class SettlementCoordinator:
    """
    Settles messages received through a single receiver.

    Args:
        receiver: Receiver the messages were taken from
        scope_factory: Builds the scope bound to a (possibly absent) transaction
        metrics: Metrics collector (uses the global collector if None)
    """

    def __init__(
        self,
        receiver: MessageReceiver,
        scope_factory: Callable[[Optional[TransactionHandle]], TransactionScope] = TransactionScope,
        metrics: Optional[SettlementMetrics] = None,
    ):
        self._receiver = receiver
        self._scope_factory = scope_factory
        self._metrics = metrics or get_metrics()

    async def complete(
        self,
        message: Any,
        mode: TransportTransactionMode,
        transaction: Optional[TransactionHandle] = None,
        cancellation: Optional[asyncio.Event] = None,
    ) -> None:
        """
        Complete a message, removing it from the queue.

        No-op when ``mode`` is NONE. Failures of the remote call propagate
        and leave the transaction uncommitted.
        """
        await self._settle(
            "complete", self._receiver.complete_message, message, mode, transaction, cancellation
        )

    async def abandon(
        self,
        message: Any,
        mode: TransportTransactionMode,
        transaction: Optional[TransactionHandle] = None,
        cancellation: Optional[asyncio.Event] = None,
    ) -> None:
        """
        Abandon a message, returning it to the queue for redelivery.

        No-op when ``mode`` is NONE. Failures of the remote call propagate
        and leave the transaction uncommitted.
        """
        await self._settle(
            "abandon", self._receiver.abandon_message, message, mode, transaction, cancellation
        )

    async def _settle(
        self,
        operation: str,
        call: Callable[[Any], Awaitable[Any]],
        message: Any,
        mode: TransportTransactionMode,
        transaction: Optional[TransactionHandle],
        cancellation: Optional[asyncio.Event],
    ) -> None:
        if not mode.settles_explicitly:
            self._metrics.track_skipped(operation)
            return

        _raise_if_cancelled(cancellation)

        with self._scope_factory(transaction) as scope:
            start = time.perf_counter()
            try:
                await _run_cancellable(call(message), cancellation)
            except Exception as e:
                self._metrics.track_error(operation, type(e).__name__)
                logger.warning(f"Failed to {operation} message: {e}")
                raise
            duration = time.perf_counter() - start
            scope.complete()
        self._metrics.track_settled(operation, mode.value, duration)

        log_with_context(
            logger,
            logging.DEBUG,
            f"Message settled: {operation}",
            lock_token=getattr(message, "lock_token", None),
            mode=mode.value,
            enlisted=transaction is not None,
        )
