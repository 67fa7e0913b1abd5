"""
Unit Tests for the Azure management client adapter.

The SDK client is replaced with an AsyncMock so exception translation can be
exercised without a namespace.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
    ServiceRequestError,
)

from asb_transport.provisioning.exceptions import ConfigurationError
from asb_transport.provisioning.management import (
    AzureManagementClient,
    ManagementOutcome,
    ManagementResult,
)
from asb_transport.provisioning.models import QueueSpec, SubscriptionSpec, TopicSpec


CONNECTION_STRING = "Endpoint=sb://test.servicebus.windows.net/;SharedAccessKeyName=Root;SharedAccessKey=secret"


@pytest.fixture
def sdk_client():
    client = MagicMock()
    client.create_queue = AsyncMock()
    client.create_topic = AsyncMock()
    client.create_subscription = AsyncMock()
    client.delete_rule = AsyncMock()
    client.delete_queue = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def factory(sdk_client):
    return MagicMock(return_value=sdk_client)


@pytest.fixture
def client(factory):
    return AzureManagementClient(CONNECTION_STRING, client_factory=factory)


class TestManagementResult:
    """Tests for result variants."""

    def test_ok(self):
        result = ManagementResult.ok()
        assert result.outcome == ManagementOutcome.OK
        assert result.succeeded

    def test_failure_variants(self):
        assert ManagementResult.already_exists("x").outcome == ManagementOutcome.ALREADY_EXISTS
        assert ManagementResult.not_found("x").outcome == ManagementOutcome.NOT_FOUND
        other = ManagementResult.other("boom")
        assert other.outcome == ManagementOutcome.OTHER
        assert other.detail == "boom"
        assert not other.succeeded


class TestAzureManagementClient:
    """Tests for SDK call mapping and exception translation."""

    @pytest.mark.asyncio
    async def test_create_queue_passes_fixed_settings(self, client, sdk_client):
        """Test queue settings are forwarded to the SDK."""
        result = await client.create_queue(
            QueueSpec(name="orders", max_size_in_megabytes=10240, enable_partitioning=True)
        )

        assert result.succeeded
        sdk_client.create_queue.assert_awaited_once_with(
            "orders",
            max_size_in_megabytes=10240,
            enable_partitioning=True,
            enable_batched_operations=True,
            lock_duration=timedelta(minutes=5),
            max_delivery_count=2147483647,
        )

    @pytest.mark.asyncio
    async def test_create_topic(self, client, sdk_client):
        await client.create_topic(TopicSpec(max_size_in_megabytes=2048))

        sdk_client.create_topic.assert_awaited_once_with(
            "bundle-1",
            max_size_in_megabytes=2048,
            enable_partitioning=False,
            enable_batched_operations=True,
        )

    @pytest.mark.asyncio
    async def test_create_subscription(self, client, sdk_client):
        spec = SubscriptionSpec(topic_name="sales", subscription_name="orders-sub", forward_to="orders")

        await client.create_subscription(spec)

        sdk_client.create_subscription.assert_awaited_once_with(
            "sales",
            "orders-sub",
            lock_duration=timedelta(minutes=5),
            forward_to="orders",
            dead_lettering_on_filter_evaluation_exceptions=False,
            max_delivery_count=2147483647,
        )

    @pytest.mark.asyncio
    async def test_delete_rule_and_queue(self, client, sdk_client):
        await client.delete_rule("sales", "orders-sub", "$Default")
        await client.delete_queue("orders")

        sdk_client.delete_rule.assert_awaited_once_with("sales", "orders-sub", "$Default")
        sdk_client.delete_queue.assert_awaited_once_with("orders")

    @pytest.mark.asyncio
    async def test_resource_exists_maps_to_already_exists(self, client, sdk_client):
        sdk_client.create_queue.side_effect = ResourceExistsError("Entity already exists")

        result = await client.create_queue(QueueSpec(name="orders"))

        assert result.outcome == ManagementOutcome.ALREADY_EXISTS
        assert result.detail == "Entity already exists"

    @pytest.mark.asyncio
    async def test_resource_not_found_maps_to_not_found(self, client, sdk_client):
        sdk_client.delete_rule.side_effect = ResourceNotFoundError("Rule not found")

        result = await client.delete_rule("sales", "orders-sub", "$Default")

        assert result.outcome == ManagementOutcome.NOT_FOUND

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        HttpResponseError("Quota exceeded"),
        ServiceRequestError("Connection refused"),
    ])
    async def test_other_errors_map_to_other(self, client, sdk_client, error):
        sdk_client.create_topic.side_effect = error

        result = await client.create_topic(TopicSpec())

        assert result.outcome == ManagementOutcome.OTHER
        assert result.detail

    @pytest.mark.asyncio
    async def test_unexpected_exceptions_propagate(self, client, sdk_client):
        """Test programming errors are not converted into results."""
        sdk_client.delete_queue.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await client.delete_queue("orders")

    @pytest.mark.asyncio
    async def test_client_created_lazily_once(self, client, factory):
        factory.assert_not_called()

        await client.delete_queue("a")
        await client.delete_queue("b")

        factory.assert_called_once_with(CONNECTION_STRING)

    @pytest.mark.asyncio
    async def test_missing_connection_string_fails_on_first_call(self, factory):
        client = AzureManagementClient(None, client_factory=factory)

        with pytest.raises(ConfigurationError) as exc_info:
            await client.create_queue(QueueSpec(name="orders"))

        assert "AzureServiceBus_ConnectionString" in exc_info.value.message
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_connection_string(self):
        factory = MagicMock(side_effect=ValueError("Connection string is either blank or malformed."))
        client = AzureManagementClient("nonsense", client_factory=factory)

        with pytest.raises(ConfigurationError):
            await client.delete_queue("orders")

    @pytest.mark.asyncio
    async def test_context_manager_closes_sdk_client(self, client, sdk_client):
        async with client:
            await client.delete_queue("orders")

        sdk_client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_without_calls_is_noop(self, client, factory):
        async with client:
            pass

        factory.assert_not_called()
