#
#
#

"""Zone/record adapter between a reconciliation controller and SOLIDserver.

Reads fail fast: any appliance error aborts ``zones``/``records`` and is
raised to the caller. Writes are best effort: a failing create or delete is
logged and the rest of the batch is still applied, the next read shows the
controller what actually happened.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from requests import RequestException

from .endpoint import RECORD_TYPE_A, DomainFilter, Endpoint, ZoneIDFilter
from .exceptions import EfficientIPClientException
from .plan import Changes


@dataclass
class EfficientIPConfig:
    domain_filter: DomainFilter = field(default_factory=DomainFilter)
    zone_id_filter: ZoneIDFilter = field(default_factory=ZoneIDFilter)
    dry_run: bool = False
    host: str = ''
    port: int = 443
    username: str = ''
    password: str = ''
    ssl_verify: bool = True

    def __post_init__(self):
        if not self.host:
            raise ValueError('EfficientIP host is required')
        try:
            self.port = int(self.port)
        except (TypeError, ValueError):
            raise ValueError(f'Invalid EfficientIP port {self.port!r}')
        if not 0 < self.port < 65536:
            raise ValueError(f'Invalid EfficientIP port {self.port}')


@dataclass
class ZoneAuth:
    name: str
    type: str
    id: str

    @classmethod
    def from_zone(cls, zone: Dict) -> 'ZoneAuth':
        return cls(
            name=zone.get('zone_name', ''),
            type=zone.get('zone_type', ''),
            id=str(zone.get('zone_id', '')),
        )


class EfficientIPAdapter:
    def __init__(self, config: EfficientIPConfig, client=None, log=None):
        self.log = log or logging.getLogger('EfficientIPAdapter')
        self.log.debug(
            '__init__: host=%s, port=%s, username=%s, password=***, '
            'ssl_verify=%s, dry_run=%s, domain_filter=%r, zone_id_filter=%r',
            config.host,
            config.port,
            config.username,
            config.ssl_verify,
            config.dry_run,
            config.domain_filter,
            config.zone_id_filter,
        )
        self.domain_filter = config.domain_filter
        self.zone_id_filter = config.zone_id_filter
        self.dry_run = config.dry_run

        self._client = client or self._create_client(config)
        self._strategy = self._create_strategy(config.dry_run)

    def _create_client(self, config):
        from .sds_client import SOLIDserverClient

        return SOLIDserverClient(
            config.host,
            config.username,
            config.password,
            port=config.port,
            ssl_verify=config.ssl_verify,
        )

    def _create_strategy(self, dry_run):
        from .strategies import DryRunStrategy, LiveStrategy

        if dry_run:
            return DryRunStrategy(self.log)
        return LiveStrategy(self.log)

    def _ttl(self, rr):
        raw = rr.get('rr_ttl')
        try:
            return int(raw)
        except (TypeError, ValueError):
            self.log.warning(
                '_ttl: unparsable TTL %r on %s, using 0',
                raw,
                rr.get('rr_full_name'),
            )
            return 0

    def zones(self) -> List[ZoneAuth]:
        ret = []
        for zone in self._client.zone_list():
            name = zone.get('zone_name', '')
            zone_id = str(zone.get('zone_id', ''))
            if not self.domain_filter.match(name):
                self.log.debug('Ignore zone [%s] by domainFilter', name)
                continue
            if not self.zone_id_filter.match(zone_id):
                self.log.debug(
                    'Ignore zone [%s][%s] by zoneIDFilter', name, zone_id
                )
                continue
            ret.append(ZoneAuth.from_zone(zone))
        return ret

    def zone_records(self, zone: ZoneAuth) -> List[Endpoint]:
        ret = []
        hosts = {}
        for rr in self._client.rr_list(zone.id):
            name = rr.get('rr_full_name', '')
            _type = rr.get('rr_type', '')
            value = rr.get('rr_all_value', '')
            ttl = self._ttl(rr)
            self.log.debug('Found %s Record : %s -> %s', _type, name, value)

            if _type == RECORD_TYPE_A:
                key = f'{name}:{_type}'
                if key in hosts:
                    hosts[key].targets.append(value)
                else:
                    hosts[key] = Endpoint.with_ttl(name, _type, ttl, value)
            else:
                ret.append(Endpoint.with_ttl(name, _type, ttl, value))

        ret.extend(hosts.values())
        return ret

    def records(self) -> List[Endpoint]:
        self.log.debug('Get Record list from EfficientIP SOLIDserver')
        try:
            zones = self.zones()
        except Exception:
            self.log.error(
                'Failed to get Zone list from EfficientIP SOLIDserver'
            )
            raise

        endpoints = []
        for zone in zones:
            try:
                endpoints.extend(self.zone_records(zone))
            except Exception:
                self.log.error('Failed to get RRs for zone [%s]', zone.name)
                raise
        return endpoints

    def _delete(self, endpoint: Endpoint):
        for value in endpoint.targets:
            try:
                self._strategy.delete(self._client, endpoint, value)
            except (EfficientIPClientException, RequestException) as e:
                self.log.error(
                    'Deletion of the RR %s %s -> %s : failed! %s',
                    endpoint.record_type,
                    endpoint.dns_name,
                    value,
                    e,
                )

    def _create(self, endpoint: Endpoint):
        for value in endpoint.targets:
            try:
                self._strategy.create(self._client, endpoint, value)
            except (EfficientIPClientException, RequestException) as e:
                self.log.error(
                    'Creation of the RR %s %s [%s] -> %s : failed! %s',
                    endpoint.record_type,
                    endpoint.dns_name,
                    endpoint.ttl,
                    value,
                    e,
                )

    def apply_changes(self, changes: Changes) -> None:
        if not changes.has_changes():
            self.log.debug('apply_changes: nothing to do')
            return

        self.log.debug(
            'apply_changes: create=%d, update=%d, delete=%d, dry_run=%s',
            len(changes.create),
            len(changes.update_new),
            len(changes.delete),
            self.dry_run,
        )
        # The appliance has no atomic update, updates are delete then create
        for endpoint in changes.delete:
            self._delete(endpoint)
        for endpoint in changes.update_old:
            self._delete(endpoint)
        for endpoint in changes.update_new:
            self._create(endpoint)
        for endpoint in changes.create:
            self._create(endpoint)

    def property_values_equal(
        self, name: str, previous: Optional[str], current: Optional[str]
    ) -> bool:
        return previous == current

    def adjust_endpoints(self, endpoints: List[Endpoint]) -> List[Endpoint]:
        return endpoints
