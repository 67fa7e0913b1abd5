"""
Shared fixtures: an in-memory broker standing in for the management plane.
"""

from typing import Dict, List, Optional, Tuple

import pytest

from asb_transport.provisioning.constants import DEFAULT_RULE_NAME
from asb_transport.provisioning.management import ManagementClient, ManagementResult
from asb_transport.provisioning.models import QueueSpec, SubscriptionSpec, TopicSpec


class InMemoryBroker(ManagementClient):
    """
    Management plane backed by dictionaries.

    Mirrors the broker's behaviour: creating an existing entity reports
    already-exists, subscriptions get an implicit '$Default' rule, and
    deleting a missing entity reports not-found. ``faults`` maps an
    operation name to the result it should return instead.
    """

    def __init__(self):
        self.queues: Dict[str, QueueSpec] = {}
        self.topics: Dict[str, TopicSpec] = {}
        self.subscriptions: Dict[Tuple[str, str], SubscriptionSpec] = {}
        self.rules: Dict[Tuple[str, str], List[str]] = {}
        self.faults: Dict[str, ManagementResult] = {}
        self.calls: List[Tuple[str, str]] = []
        self.closed = False
        self.connection_string: Optional[str] = None

    def _fault(self, operation: str) -> Optional[ManagementResult]:
        return self.faults.get(operation)

    async def create_queue(self, spec: QueueSpec) -> ManagementResult:
        self.calls.append(("create_queue", spec.name))
        if fault := self._fault("create_queue"):
            return fault
        if spec.name in self.queues:
            return ManagementResult.already_exists(f"Queue '{spec.name}' already exists")
        self.queues[spec.name] = spec
        return ManagementResult.ok()

    async def create_topic(self, spec: TopicSpec) -> ManagementResult:
        self.calls.append(("create_topic", spec.name))
        if fault := self._fault("create_topic"):
            return fault
        if spec.name in self.topics:
            return ManagementResult.already_exists(f"Topic '{spec.name}' already exists")
        self.topics[spec.name] = spec
        return ManagementResult.ok()

    async def create_subscription(self, spec: SubscriptionSpec) -> ManagementResult:
        self.calls.append(("create_subscription", spec.subscription_name))
        if fault := self._fault("create_subscription"):
            return fault
        if spec.topic_name not in self.topics:
            return ManagementResult.not_found(f"Topic '{spec.topic_name}' not found")
        key = (spec.topic_name, spec.subscription_name)
        if key in self.subscriptions:
            return ManagementResult.already_exists(
                f"Subscription '{spec.subscription_name}' already exists"
            )
        self.subscriptions[key] = spec
        self.rules[key] = [DEFAULT_RULE_NAME]
        return ManagementResult.ok()

    async def delete_rule(
        self, topic_name: str, subscription_name: str, rule_name: str
    ) -> ManagementResult:
        self.calls.append(("delete_rule", rule_name))
        if fault := self._fault("delete_rule"):
            return fault
        rules = self.rules.get((topic_name, subscription_name), [])
        if rule_name not in rules:
            return ManagementResult.not_found(f"Rule '{rule_name}' not found")
        rules.remove(rule_name)
        return ManagementResult.ok()

    async def delete_queue(self, name: str) -> ManagementResult:
        self.calls.append(("delete_queue", name))
        if fault := self._fault("delete_queue"):
            return fault
        if name not in self.queues:
            return ManagementResult.not_found(f"Queue '{name}' not found")
        del self.queues[name]
        return ManagementResult.ok()

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def broker():
    """Fresh in-memory broker for each test."""
    return InMemoryBroker()
