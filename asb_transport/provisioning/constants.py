"""
Provisioning Constants

Transport-wide entity settings and defaults. The fixed values are not
configurable per invocation.

Author: asb-transport Contributors
Date: 2026-10-18
"""

from datetime import timedelta

# Connection
CONNECTION_STRING_ENV_VAR = "AzureServiceBus_ConnectionString"

# Defaults
DEFAULT_SIZE_IN_GB = 5
DEFAULT_TOPIC_NAME = "bundle-1"
DEFAULT_RULE_NAME = "$Default"
MEGABYTES_PER_GIGABYTE = 1024

# Fixed entity settings
LOCK_DURATION = timedelta(minutes=5)
MAX_DELIVERY_COUNT = 2147483647  # int32 max, unlimited redelivery
ENABLE_BATCHED_OPERATIONS = True
DEAD_LETTERING_ON_FILTER_EVALUATION_EXCEPTIONS = False

# Informational notes
NOTE_QUEUE_EXISTS = "Queue already exists, skipping creation"
NOTE_TOPIC_EXISTS = "Topic already exists, skipping creation"
NOTE_SUBSCRIPTION_EXISTS = "Subscription already exists, skipping creation"
