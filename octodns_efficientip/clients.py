#
#
#

"""Protocol definition for the SOLIDserver client.

The adapter only needs four appliance operations. Keeping them behind a
structural type (PEP 544) lets tests hand the adapter any object with the
same methods instead of a real HTTP client.
"""

from typing import Dict, List, Protocol


class DNSClient(Protocol):
    """Operations the adapter performs against a SOLIDserver appliance.

    Read operations raise on any failure, write operations raise too and
    leave it to the caller to decide whether that aborts anything.
    """

    def zone_list(self) -> List[Dict]:
        """List all DNS zones.

        Returns:
            List of zone dicts with at least 'zone_id', 'zone_name' and
            'zone_type' keys
        """
        ...

    def rr_list(self, zone_id: str) -> List[Dict]:
        """List the resource records of a zone ordered by full name.

        Args:
            zone_id: Zone identifier

        Returns:
            List of record dicts with 'rr_full_name', 'rr_type', 'rr_ttl'
            and 'rr_all_value' keys
        """
        ...

    def rr_add(self, name: str, _type: str, ttl: int, value: str) -> None:
        """Create a single-valued resource record.

        Args:
            name: Fully qualified record name, without trailing dot
            _type: Record type (A, TXT, etc.)
            ttl: Time to live in seconds
            value: Record value
        """
        ...

    def rr_delete(self, name: str, _type: str, value: str) -> None:
        """Delete the resource record holding exactly this value.

        Args:
            name: Fully qualified record name, without trailing dot
            _type: Record type
            value: Record value
        """
        ...
