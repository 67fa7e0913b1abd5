"""
Management Plane Client

Abstraction over the broker's management plane. Every call returns a
ManagementResult instead of raising, so callers match on the outcome to
decide what is benign.

Author: asb-transport Contributors
Date: 2026-10-18
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.servicebus.aio.management import ServiceBusAdministrationClient

from .exceptions import ConfigurationError
from .constants import CONNECTION_STRING_ENV_VAR
from .models import QueueSpec, SubscriptionSpec, TopicSpec

logger = logging.getLogger(__name__)


class ManagementOutcome(str, Enum):
    """Outcome of a management-plane call."""
    OK = "ok"
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    OTHER = "other"


@dataclass(frozen=True)
class ManagementResult:
    """Outcome of a management-plane call plus the broker's detail text."""
    outcome: ManagementOutcome
    detail: Optional[str] = None

    @classmethod
    def ok(cls) -> "ManagementResult":
        return cls(ManagementOutcome.OK)

    @classmethod
    def already_exists(cls, detail: Optional[str] = None) -> "ManagementResult":
        return cls(ManagementOutcome.ALREADY_EXISTS, detail)

    @classmethod
    def not_found(cls, detail: Optional[str] = None) -> "ManagementResult":
        return cls(ManagementOutcome.NOT_FOUND, detail)

    @classmethod
    def other(cls, detail: str) -> "ManagementResult":
        return cls(ManagementOutcome.OTHER, detail)

    @property
    def succeeded(self) -> bool:
        return self.outcome is ManagementOutcome.OK


class ManagementClient(ABC):
    """Create/delete operations the provisioning orchestrator relies on."""

    @abstractmethod
    async def create_queue(self, spec: QueueSpec) -> ManagementResult:
        ...

    @abstractmethod
    async def create_topic(self, spec: TopicSpec) -> ManagementResult:
        ...

    @abstractmethod
    async def create_subscription(self, spec: SubscriptionSpec) -> ManagementResult:
        ...

    @abstractmethod
    async def delete_rule(
        self, topic_name: str, subscription_name: str, rule_name: str
    ) -> ManagementResult:
        ...

    @abstractmethod
    async def delete_queue(self, name: str) -> ManagementResult:
        ...

    async def close(self) -> None:
        """Release any resources held by the client."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class AzureManagementClient(ManagementClient):
    """
    ManagementClient backed by the azure-servicebus administration client.

    The SDK client is created lazily on the first call, so a missing
    connection string surfaces as a ConfigurationError at that point.

    Args:
        connection_string: Service Bus connection string
        client_factory: Builds the SDK client from a connection string
    """

    def __init__(
        self,
        connection_string: Optional[str],
        client_factory: Callable[[str], Any] = ServiceBusAdministrationClient.from_connection_string,
    ):
        self._connection_string = connection_string
        self._client_factory = client_factory
        self._client: Optional[Any] = None

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._connection_string:
                raise ConfigurationError(
                    "No connection string provided. Use --connection-string or set "
                    f"the '{CONNECTION_STRING_ENV_VAR}' environment variable.",
                    details={"environment_variable": CONNECTION_STRING_ENV_VAR},
                )
            try:
                self._client = self._client_factory(self._connection_string)
            except ValueError as e:
                raise ConfigurationError(f"Invalid connection string: {e}") from e
        return self._client

    async def _invoke(self, operation: str, call: Callable[[Any], Awaitable[Any]]) -> ManagementResult:
        """Run an SDK call and translate its exceptions into a result."""
        client = self._get_client()
        try:
            await call(client)
        except ResourceExistsError as e:
            logger.debug(f"{operation}: entity already exists ({e.message})")
            return ManagementResult.already_exists(e.message)
        except ResourceNotFoundError as e:
            logger.debug(f"{operation}: entity not found ({e.message})")
            return ManagementResult.not_found(e.message)
        except (AzureError, ValueError) as e:
            logger.debug(f"{operation}: failed ({e})")
            return ManagementResult.other(str(e))
        return ManagementResult.ok()

    async def create_queue(self, spec: QueueSpec) -> ManagementResult:
        return await self._invoke(
            "create_queue",
            lambda client: client.create_queue(
                spec.name,
                max_size_in_megabytes=spec.max_size_in_megabytes,
                enable_partitioning=spec.enable_partitioning,
                enable_batched_operations=spec.enable_batched_operations,
                lock_duration=spec.lock_duration,
                max_delivery_count=spec.max_delivery_count,
            ),
        )

    async def create_topic(self, spec: TopicSpec) -> ManagementResult:
        return await self._invoke(
            "create_topic",
            lambda client: client.create_topic(
                spec.name,
                max_size_in_megabytes=spec.max_size_in_megabytes,
                enable_partitioning=spec.enable_partitioning,
                enable_batched_operations=spec.enable_batched_operations,
            ),
        )

    async def create_subscription(self, spec: SubscriptionSpec) -> ManagementResult:
        return await self._invoke(
            "create_subscription",
            lambda client: client.create_subscription(
                spec.topic_name,
                spec.subscription_name,
                lock_duration=spec.lock_duration,
                forward_to=spec.forward_to,
                dead_lettering_on_filter_evaluation_exceptions=spec.dead_lettering_on_filter_evaluation_exceptions,
                max_delivery_count=spec.max_delivery_count,
            ),
        )

    async def delete_rule(
        self, topic_name: str, subscription_name: str, rule_name: str
    ) -> ManagementResult:
        return await self._invoke(
            "delete_rule",
            lambda client: client.delete_rule(topic_name, subscription_name, rule_name),
        )

    async def delete_queue(self, name: str) -> ManagementResult:
        return await self._invoke(
            "delete_queue",
            lambda client: client.delete_queue(name),
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
