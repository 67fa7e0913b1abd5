"""
Transaction modes and scopes for message settlement.

The receive pump owns the transaction; settlement only enlists the outcome
of a single remote call through a TransactionScope.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TransportTransactionMode(str, Enum):
    """Delivery guarantee an endpoint runs with."""
    NONE = "none"
    RECEIVE_ONLY = "receive_only"
    SENDS_ATOMIC_WITH_RECEIVE = "sends_atomic_with_receive"
    TRANSACTION_SCOPE = "transaction_scope"

    @property
    def settles_explicitly(self) -> bool:
        """Whether messages received in this mode are completed/abandoned by the transport."""
        return self is not TransportTransactionMode.NONE


@dataclass(frozen=True)
class TransactionHandle:
    """
    Caller-owned transaction, exposed as a commit/rollback callback pair.

    Attributes:
        on_commit: Invoked when the enlisted settlement succeeded
        on_rollback: Invoked when the enlisted settlement did not succeed
    """
    on_commit: Callable[[], None]
    on_rollback: Callable[[], None]


class TransactionScope:
    """
    Scope around a single settlement call.

    On exit the bound transaction is committed only if ``complete()`` was
    called and no exception is propagating; otherwise it is rolled back. A
    rollback failure during a propagating exception is logged, not raised.
    Without a transaction the scope is local and exit has no side effects.
    Exceptions are never suppressed.
    """

    def __init__(self, transaction: Optional[TransactionHandle] = None):
        self.transaction = transaction
        self.completed = False

    def complete(self) -> None:
        """Mark the scope successful."""
        self.completed = True

    def __enter__(self) -> "TransactionScope":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if self.transaction is None:
            return False
        if self.completed and exc_type is None:
            logger.debug("Settlement scope completed, committing transaction")
            self.transaction.on_commit()
        elif exc_type is None:
            logger.debug("Settlement scope not completed, rolling back transaction")
            self.transaction.on_rollback()
        else:
            logger.debug("Settlement failed, rolling back transaction")
            try:
                self.transaction.on_rollback()
            except Exception:
                # the settlement failure keeps propagating
                logger.exception("Transaction rollback failed")
        return False
