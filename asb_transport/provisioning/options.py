"""
Provisioning options.

Validated once at the CLI boundary and handed to the orchestrator as an
immutable value.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_SIZE_IN_GB, DEFAULT_TOPIC_NAME, MEGABYTES_PER_GIGABYTE
from .models import QueueSpec, SubscriptionSpec, TopicSpec


class ProvisioningOptions(BaseModel):
    """
    Size, partitioning and naming overrides for a provisioning run.

    Attributes:
        size_in_gb: Maximum entity size in GB (defaults to 5)
        partitioned: Enable partitioning on queue and topic
        topic_name: Topic to subscribe to (defaults to 'bundle-1')
        subscription_name: Subscription name (defaults to the endpoint name)
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    size_in_gb: int = Field(default=DEFAULT_SIZE_IN_GB, ge=1)
    partitioned: bool = False
    topic_name: str = DEFAULT_TOPIC_NAME
    subscription_name: Optional[str] = None

    @field_validator('topic_name')
    @classmethod
    def validate_topic_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Topic name cannot be empty")
        return v

    @field_validator('subscription_name')
    @classmethod
    def validate_subscription_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Subscription name cannot be empty")
        return v

    @property
    def max_size_in_megabytes(self) -> int:
        return self.size_in_gb * MEGABYTES_PER_GIGABYTE

    def queue_spec(self, name: str) -> QueueSpec:
        return QueueSpec(
            name=name,
            max_size_in_megabytes=self.max_size_in_megabytes,
            enable_partitioning=self.partitioned,
        )

    def topic_spec(self) -> TopicSpec:
        return TopicSpec(
            name=self.topic_name,
            max_size_in_megabytes=self.max_size_in_megabytes,
            enable_partitioning=self.partitioned,
        )

    def subscription_spec(self, endpoint_name: str) -> SubscriptionSpec:
        return SubscriptionSpec(
            topic_name=self.topic_name,
            subscription_name=self.subscription_name or endpoint_name,
            forward_to=endpoint_name,
        )
