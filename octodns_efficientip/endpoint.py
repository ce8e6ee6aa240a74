#
#
#

"""Normalized record model shared between the adapter and its controller.

An ``Endpoint`` groups one or more values of the same record type under a
single fully qualified name. ``DomainFilter`` and ``ZoneIDFilter`` decide
which appliance zones the adapter is allowed to manage.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

RECORD_TYPE_A = 'A'
RECORD_TYPE_NS = 'NS'


@dataclass
class Endpoint:
    dns_name: str
    record_type: str
    ttl: int = 0
    targets: List[str] = field(default_factory=list)

    @classmethod
    def with_ttl(cls, dns_name, record_type, ttl, *targets):
        return cls(dns_name, record_type, ttl, list(targets))


def _normalize_domain(domain: str) -> str:
    return domain.strip().rstrip('.').lower()


def _normalize_filters(filters: Iterable[str]) -> List[str]:
    # a single name from YAML config is one entry, not a list of characters
    if isinstance(filters, str):
        filters = [filters]
    ret = []
    for f in filters or ():
        f = _normalize_domain(f)
        if f:
            ret.append(f)
    return ret


def _match_filter(filters: List[str], domain: str, empty_value: bool) -> bool:
    if not filters:
        return empty_value

    stripped = _normalize_domain(domain)
    for f in filters:
        if f.startswith('.'):
            # leading dot only ever matches subdomains
            if stripped.endswith(f):
                return True
        elif stripped.count('.') == f.count('.'):
            if stripped == f:
                return True
        elif stripped.endswith(f'.{f}'):
            return True
    return False


class DomainFilter:
    """Allow-list of zone names.

    With no filters every domain matches. Entries match the domain itself
    and its subdomains, entries starting with ``.`` match subdomains only.
    When ``regex`` or ``regex_exclusion`` is given the plain lists are
    ignored and matching is done on the normalized name instead.
    """

    def __init__(
        self,
        filters: Iterable[str] = (),
        exclude: Iterable[str] = (),
        regex: Optional[str] = None,
        regex_exclusion: Optional[str] = None,
    ):
        self.filters = _normalize_filters(filters)
        self.exclude = _normalize_filters(exclude)
        self.regex = re.compile(regex) if regex else None
        self.regex_exclusion = (
            re.compile(regex_exclusion) if regex_exclusion else None
        )

    def match(self, domain: str) -> bool:
        if self.regex is not None or self.regex_exclusion is not None:
            return self._match_regex(domain)
        return _match_filter(self.filters, domain, True) and not _match_filter(
            self.exclude, domain, False
        )

    def _match_regex(self, domain: str) -> bool:
        stripped = _normalize_domain(domain)
        if self.regex_exclusion is not None and self.regex_exclusion.search(
            stripped
        ):
            return False
        if self.regex is None:
            return True
        return self.regex.search(stripped) is not None

    def __repr__(self):
        regex = self.regex.pattern if self.regex else None
        regex_exclusion = (
            self.regex_exclusion.pattern if self.regex_exclusion else None
        )
        return (
            f'DomainFilter(filters={self.filters!r}, exclude={self.exclude!r}, '
            f'regex={regex!r}, regex_exclusion={regex_exclusion!r})'
        )


class ZoneIDFilter:
    '''Allow-list of appliance zone ids, matched as suffixes.'''

    def __init__(self, zone_ids: Iterable[str] = ()):
        if isinstance(zone_ids, (str, int)):
            zone_ids = [zone_ids]
        self.zone_ids = [str(z) for z in zone_ids or ()]

    def match(self, zone_id: str) -> bool:
        if not self.zone_ids:
            return True
        zone_id = str(zone_id)
        for _id in self.zone_ids:
            if _id == '' or zone_id.endswith(_id):
                return True
        return False

    def __repr__(self):
        return f'ZoneIDFilter({self.zone_ids!r})'
