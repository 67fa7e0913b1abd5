"""
Provisioning Orchestrator

Reconciles the broker's entity set for an endpoint or a standalone queue
with the desired state. Every create is interpreted as create-if-absent by
matching on the broker's already-exists outcome rather than checking first,
so concurrent runs against the same namespace are safe.

Author: asb-transport Contributors
Date: 2026-10-18
"""

import logging
from typing import Optional

from .options import ProvisioningOptions

from .constants import (
    DEFAULT_RULE_NAME,
    NOTE_QUEUE_EXISTS,
    NOTE_SUBSCRIPTION_EXISTS,
    NOTE_TOPIC_EXISTS,
)
from .exceptions import EntityNotFoundError, RemoteOperationError
from .management import ManagementClient, ManagementOutcome, ManagementResult
from .models import (
    ProvisioningReport,
    ProvisioningStep,
    QueueSpec,
    StepOutcome,
    SubscriptionSpec,
    TopicSpec,
)

logger = logging.getLogger(__name__)


class ProvisioningOrchestrator:
    """
    Drives the management plane into the desired topology.

    Steps run strictly in sequence; each one is individually idempotent, so
    a run aborted part-way can simply be repeated.
    """

    def __init__(self, client: ManagementClient):
        self._client = client

    async def create_queue(self, spec: QueueSpec) -> ProvisioningStep:
        """
        Create a queue, treating an existing queue as success.

        Raises:
            ProvisionError: The broker rejected the create for another reason
        """
        result = await self._client.create_queue(spec)
        return self._interpret_create(result, "queue", spec.name, NOTE_QUEUE_EXISTS)

    async def create_endpoint_topology(
        self,
        endpoint_name: str,
        options: Optional[ProvisioningOptions] = None,
    ) -> ProvisioningReport:
        """
        Provision queue, topic, forwarding subscription and rule cleanup for an endpoint.

        Order matters: the subscription references the topic and forwards to
        the queue, so both must exist before it is created.

        Args:
            endpoint_name: Endpoint name, used as queue and forward-to name
            options: Size, partitioning and naming overrides

        Returns:
            Report of every step performed

        Raises:
            ProvisionError: A step failed; later steps are not attempted
        """
        options = options or ProvisioningOptions()
        queue_spec = options.queue_spec(endpoint_name)
        topic_spec = options.topic_spec()
        subscription_spec = options.subscription_spec(endpoint_name)

        logger.info(
            f"Provisioning endpoint '{endpoint_name}' "
            f"(topic='{topic_spec.name}', subscription='{subscription_spec.subscription_name}')"
        )

        report = ProvisioningReport()
        report.record(await self.create_queue(queue_spec))
        report.record(await self._create_topic(topic_spec))
        report.record(await self._create_subscription(subscription_spec))
        report.record(await self._delete_default_rule(subscription_spec))

        logger.info(f"Endpoint '{endpoint_name}' provisioned")
        return report

    async def delete_queue(self, name: str) -> ProvisioningStep:
        """
        Delete a queue.

        A missing queue is reported as an error: asking to delete something
        that never existed is a signal the operator should see.

        Raises:
            EntityNotFoundError: Queue does not exist
            ProvisionError: The broker rejected the delete for another reason
        """
        result = await self._client.delete_queue(name)
        self._raise_unless_ok(result, "delete", "queue", name)
        logger.info(f"Queue '{name}' deleted")
        return ProvisioningStep(entity_type="queue", entity_name=name, outcome=StepOutcome.DELETED)

    async def _create_topic(self, spec: TopicSpec) -> ProvisioningStep:
        result = await self._client.create_topic(spec)
        return self._interpret_create(result, "topic", spec.name, NOTE_TOPIC_EXISTS)

    async def _create_subscription(self, spec: SubscriptionSpec) -> ProvisioningStep:
        result = await self._client.create_subscription(spec)
        return self._interpret_create(
            result, "subscription", spec.subscription_name, NOTE_SUBSCRIPTION_EXISTS
        )

    async def _delete_default_rule(self, spec: SubscriptionSpec) -> ProvisioningStep:
        result = await self._client.delete_rule(
            spec.topic_name, spec.subscription_name, DEFAULT_RULE_NAME
        )
        if result.outcome is ManagementOutcome.NOT_FOUND:
            logger.debug(
                f"Rule '{DEFAULT_RULE_NAME}' not present on subscription "
                f"'{spec.subscription_name}'"
            )
            return ProvisioningStep(
                entity_type="rule", entity_name=DEFAULT_RULE_NAME, outcome=StepOutcome.ABSENT
            )
        self._raise_unless_ok(result, "delete", "rule", DEFAULT_RULE_NAME)
        logger.debug(f"Rule '{DEFAULT_RULE_NAME}' removed from '{spec.subscription_name}'")
        return ProvisioningStep(
            entity_type="rule", entity_name=DEFAULT_RULE_NAME, outcome=StepOutcome.DELETED
        )

    def _interpret_create(
        self, result: ManagementResult, entity_type: str, entity_name: str, note: str
    ) -> ProvisioningStep:
        if result.outcome is ManagementOutcome.ALREADY_EXISTS:
            logger.info(f"{entity_type.capitalize()} '{entity_name}' already exists, skipping creation")
            return ProvisioningStep(
                entity_type=entity_type,
                entity_name=entity_name,
                outcome=StepOutcome.SKIPPED,
                note=note,
            )
        self._raise_unless_ok(result, "create", entity_type, entity_name)
        logger.info(f"{entity_type.capitalize()} '{entity_name}' created")
        return ProvisioningStep(
            entity_type=entity_type, entity_name=entity_name, outcome=StepOutcome.CREATED
        )

    @staticmethod
    def _raise_unless_ok(
        result: ManagementResult, operation: str, entity_type: str, entity_name: str
    ) -> None:
        if result.succeeded:
            return
        if operation == "delete" and result.outcome is ManagementOutcome.NOT_FOUND:
            raise EntityNotFoundError(entity_type, entity_name)
        detail = result.detail or result.outcome.value
        logger.error(f"Failed to {operation} {entity_type} '{entity_name}': {detail}")
        raise RemoteOperationError(operation, entity_type, entity_name, detail)
