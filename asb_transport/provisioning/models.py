"""
Provisioning Models

Pydantic models describing the broker entities an endpoint needs, and the
report produced by a provisioning run.

Author: asb-transport Contributors
Date: 2026-10-18
"""

from datetime import timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .constants import (
    DEAD_LETTERING_ON_FILTER_EVALUATION_EXCEPTIONS,
    DEFAULT_SIZE_IN_GB,
    DEFAULT_TOPIC_NAME,
    ENABLE_BATCHED_OPERATIONS,
    LOCK_DURATION,
    MAX_DELIVERY_COUNT,
    MEGABYTES_PER_GIGABYTE,
)

DEFAULT_MAX_SIZE_IN_MEGABYTES = DEFAULT_SIZE_IN_GB * MEGABYTES_PER_GIGABYTE


def _require_name(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} cannot be empty")
    return value


class QueueSpec(BaseModel):
    """Desired state of a transport queue."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    name: str
    max_size_in_megabytes: int = Field(default=DEFAULT_MAX_SIZE_IN_MEGABYTES, ge=1)
    enable_partitioning: bool = False

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_name(v, "Queue name")

    @computed_field
    @property
    def enable_batched_operations(self) -> bool:
        return ENABLE_BATCHED_OPERATIONS

    @computed_field
    @property
    def lock_duration(self) -> timedelta:
        return LOCK_DURATION

    @computed_field
    @property
    def max_delivery_count(self) -> int:
        return MAX_DELIVERY_COUNT


class TopicSpec(BaseModel):
    """Desired state of the topic events are published to."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    name: str = DEFAULT_TOPIC_NAME
    max_size_in_megabytes: int = Field(default=DEFAULT_MAX_SIZE_IN_MEGABYTES, ge=1)
    enable_partitioning: bool = False

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_name(v, "Topic name")

    @computed_field
    @property
    def enable_batched_operations(self) -> bool:
        return ENABLE_BATCHED_OPERATIONS


class SubscriptionSpec(BaseModel):
    """
    Desired state of an endpoint's subscription.

    The subscription forwards everything it receives into the endpoint's
    own queue, so ``forward_to`` is always the endpoint name.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    topic_name: str
    subscription_name: str
    forward_to: str

    @field_validator('topic_name', 'subscription_name', 'forward_to')
    @classmethod
    def validate_names(cls, v: str) -> str:
        return _require_name(v, "Entity name")

    @computed_field
    @property
    def lock_duration(self) -> timedelta:
        return LOCK_DURATION

    @computed_field
    @property
    def max_delivery_count(self) -> int:
        return MAX_DELIVERY_COUNT

    @computed_field
    @property
    def dead_lettering_on_filter_evaluation_exceptions(self) -> bool:
        return DEAD_LETTERING_ON_FILTER_EVALUATION_EXCEPTIONS


class StepOutcome(str, Enum):
    """What a single provisioning step did to the broker."""
    CREATED = "created"
    SKIPPED = "skipped"
    DELETED = "deleted"
    ABSENT = "absent"


class ProvisioningStep(BaseModel):
    """Result of one provisioning step."""
    model_config = ConfigDict(frozen=True)

    entity_type: str
    entity_name: str
    outcome: StepOutcome
    note: Optional[str] = None


class ProvisioningReport(BaseModel):
    """Ordered record of the steps a provisioning run performed."""

    steps: List[ProvisioningStep] = Field(default_factory=list)

    def record(self, step: ProvisioningStep) -> ProvisioningStep:
        self.steps.append(step)
        return step

    @property
    def notes(self) -> List[str]:
        """Informational notes, in step order."""
        return [step.note for step in self.steps if step.note]
