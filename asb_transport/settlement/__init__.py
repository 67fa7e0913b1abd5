"""Transaction-mode-aware message settlement."""

from .coordinator import MessageReceiver, SettlementCoordinator
from .metrics import SettlementMetrics, get_metrics
from .transaction import TransactionHandle, TransactionScope, TransportTransactionMode

__all__ = [
    "MessageReceiver",
    "SettlementCoordinator",
    "SettlementMetrics",
    "TransactionHandle",
    "TransactionScope",
    "TransportTransactionMode",
    "get_metrics",
]
