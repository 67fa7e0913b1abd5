"""
Broker topology provisioning.

Creates and idempotently reconciles the queues, topics, subscriptions and
rules an endpoint needs.
"""

from .exceptions import (
    ConfigurationError,
    EntityNotFoundError,
    ProvisionError,
    RemoteOperationError,
)
from .management import AzureManagementClient, ManagementClient, ManagementOutcome, ManagementResult
from .models import (
    ProvisioningReport,
    ProvisioningStep,
    QueueSpec,
    StepOutcome,
    SubscriptionSpec,
    TopicSpec,
)
from .options import ProvisioningOptions
from .orchestrator import ProvisioningOrchestrator

__all__ = [
    "AzureManagementClient",
    "ConfigurationError",
    "EntityNotFoundError",
    "ManagementClient",
    "ManagementOutcome",
    "ManagementResult",
    "ProvisionError",
    "ProvisioningOptions",
    "ProvisioningOrchestrator",
    "ProvisioningReport",
    "ProvisioningStep",
    "QueueSpec",
    "RemoteOperationError",
    "StepOutcome",
    "SubscriptionSpec",
    "TopicSpec",
]
