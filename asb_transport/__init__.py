"""
asb-transport: Azure Service Bus transport tooling

Provisions the broker topology an endpoint needs and settles received
messages according to the endpoint's transaction mode.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
