#
#
#

"""Write strategies for the adapter.

A strategy turns one value of an endpoint into (at most) one appliance
call. The live strategy issues the call, the dry-run strategy only reports
what it would have done.
"""

from typing import Protocol

from .clients import DNSClient
from .endpoint import Endpoint


class ApplyStrategy(Protocol):
    """Protocol for single-value record writes."""

    def create(self, client: DNSClient, endpoint: Endpoint, value: str) -> None:
        """Create one value of an endpoint.

        Args:
            client: DNS client instance
            endpoint: Endpoint the value belongs to
            value: Single target value
        """
        ...

    def delete(self, client: DNSClient, endpoint: Endpoint, value: str) -> None:
        """Delete one value of an endpoint.

        Args:
            client: DNS client instance
            endpoint: Endpoint the value belongs to
            value: Single target value
        """
        ...


class LiveStrategy:
    """Strategy that writes to the appliance."""

    def __init__(self, log):
        self.log = log

    def create(self, client, endpoint, value):
        self.log.info(
            "Creating %s record named '%s' to '%s' for EfficientIP",
            endpoint.record_type,
            endpoint.dns_name,
            value,
        )
        client.rr_add(
            endpoint.dns_name, endpoint.record_type, endpoint.ttl, value
        )

    def delete(self, client, endpoint, value):
        self.log.info(
            "Deleting %s record named '%s' to '%s' for EfficientIP",
            endpoint.record_type,
            endpoint.dns_name,
            value,
        )
        # TTL is not part of the match on deletion
        client.rr_delete(endpoint.dns_name, endpoint.record_type, value)


class DryRunStrategy:
    """Strategy that only logs, no call ever reaches the client."""

    def __init__(self, log):
        self.log = log

    def create(self, client, endpoint, value):
        self.log.info(
            "Would create %s record named '%s' to '%s' for EfficientIP",
            endpoint.record_type,
            endpoint.dns_name,
            value,
        )

    def delete(self, client, endpoint, value):
        self.log.info(
            "Would delete %s record named '%s' to '%s' for EfficientIP",
            endpoint.record_type,
            endpoint.dns_name,
            value,
        )
