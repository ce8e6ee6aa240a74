#
#
#

import logging
import shlex
from collections import defaultdict

from octodns.provider.base import BaseProvider
from octodns.record import Record

__version__ = __VERSION__ = '0.1.0'

from .adapter import EfficientIPAdapter, EfficientIPConfig, ZoneAuth
from .endpoint import RECORD_TYPE_NS, DomainFilter, Endpoint, ZoneIDFilter
from .exceptions import (
    EfficientIPClientException,
    EfficientIPClientNotFound,
    EfficientIPClientUnauthorized,
    EfficientIPRequestFailed,
)
from .plan import Changes

__all__ = [
    'Changes',
    'DomainFilter',
    'EfficientIPAdapter',
    'EfficientIPClientException',
    'EfficientIPClientNotFound',
    'EfficientIPClientUnauthorized',
    'EfficientIPConfig',
    'EfficientIPProvider',
    'EfficientIPRequestFailed',
    'Endpoint',
    'ZoneAuth',
    'ZoneIDFilter',
]


class EfficientIPProvider(BaseProvider):
    SUPPORTS_GEO = False
    SUPPORTS_DYNAMIC = False
    SUPPORTS_ROOT_NS = False
    SUPPORTS = set(
        ('A', 'AAAA', 'CAA', 'CNAME', 'MX', 'NS', 'PTR', 'SRV', 'TXT')
    )

    def __init__(
        self,
        id,
        host,
        username,
        password,
        port=443,
        ssl_verify=True,
        domain_filter=None,
        exclude_domains=None,
        zone_id_filter=None,
        dry_run=False,
        **kwargs,
    ):
        self.log = logging.getLogger(f'EfficientIPProvider[{id}]')
        self.log.debug(
            '__init__: id=%s, host=%s, port=%s, username=%s, password=***, '
            'ssl_verify=%s, dry_run=%s',
            id,
            host,
            port,
            username,
            ssl_verify,
            dry_run,
        )
        super().__init__(id, **kwargs)

        config = EfficientIPConfig(
            domain_filter=DomainFilter(
                domain_filter or (), exclude=exclude_domains or ()
            ),
            zone_id_filter=ZoneIDFilter(zone_id_filter or ()),
            dry_run=dry_run,
            host=host,
            port=port,
            username=username,
            password=password,
            ssl_verify=ssl_verify,
        )
        self._adapter = EfficientIPAdapter(config, log=self.log)

    def _append_dot(self, value):
        if value == '@' or value[-1] == '.':
            return value
        return f'{value}.'

    def _strip_dot(self, value):
        return value[:-1] if value.endswith('.') else value

    def _hostname(self, zone, dns_name):
        zone_name = zone.name[:-1].lower()
        fqdn = self._strip_dot(dns_name).lower()
        if fqdn == zone_name:
            return ''
        if fqdn.endswith(f'.{zone_name}'):
            return fqdn[: -len(zone_name) - 1]
        return None

    def _zone_auth(self, zone_name):
        zone_name = zone_name[:-1].lower()
        for zone_auth in self._adapter.zones():
            if self._strip_dot(zone_auth.name).lower() == zone_name:
                return zone_auth
        return None

    def _values(self, endpoints):
        return [target for e in endpoints for target in e.targets]

    def _data_for_multiple(self, _type, endpoints):
        return {
            'ttl': endpoints[0].ttl,
            'type': _type,
            'values': self._values(endpoints),
        }

    _data_for_A = _data_for_multiple
    _data_for_AAAA = _data_for_multiple

    def _data_for_TXT(self, _type, endpoints):
        values = [v.replace(';', '\\;') for v in self._values(endpoints)]
        return {'ttl': endpoints[0].ttl, 'type': _type, 'values': values}

    def _data_for_CAA(self, _type, endpoints):
        values = []
        for raw in self._values(endpoints):
            try:
                flags, tag, value = shlex.split(raw)
                values.append(
                    {'flags': int(flags), 'tag': tag, 'value': value}
                )
            except ValueError as e:
                self.log.warning(
                    '_data_for_CAA: failed to parse CAA record %r: %s, '
                    'using fallback values (flags=0, tag=issue)',
                    raw,
                    e,
                )
                values.append({'flags': 0, 'tag': 'issue', 'value': raw})
        return {'ttl': endpoints[0].ttl, 'type': _type, 'values': values}

    def _data_for_single(self, _type, endpoints):
        return {
            'ttl': endpoints[0].ttl,
            'type': _type,
            'value': self._append_dot(endpoints[0].targets[0]),
        }

    _data_for_CNAME = _data_for_single
    _data_for_PTR = _data_for_single

    def _data_for_MX(self, _type, endpoints):
        values = []
        for raw in self._values(endpoints):
            try:
                preference, exchange = raw.split()
                values.append(
                    {
                        'preference': int(preference),
                        'exchange': self._append_dot(exchange),
                    }
                )
            except ValueError as e:
                self.log.warning(
                    '_data_for_MX: skipping unparsable MX value %r: %s', raw, e
                )
        return {'ttl': endpoints[0].ttl, 'type': _type, 'values': values}

    def _data_for_NS(self, _type, endpoints):
        values = [self._append_dot(v) for v in self._values(endpoints)]
        return {'ttl': endpoints[0].ttl, 'type': _type, 'values': values}

    def _data_for_SRV(self, _type, endpoints):
        values = []
        for raw in self._values(endpoints):
            try:
                priority, weight, port, target = raw.split()
                values.append(
                    {
                        'port': int(port),
                        'priority': int(priority),
                        'target': self._append_dot(target),
                        'weight': int(weight),
                    }
                )
            except ValueError as e:
                self.log.warning(
                    '_data_for_SRV: skipping unparsable SRV value %r: %s',
                    raw,
                    e,
                )
        return {'ttl': endpoints[0].ttl, 'type': _type, 'values': values}

    def list_zones(self):
        self.log.debug('list_zones:')
        return sorted(
            f'{self._strip_dot(z.name)}.' for z in self._adapter.zones()
        )

    def populate(self, zone, target=False, lenient=False):
        self.log.debug(
            'populate: name=%s, target=%s, lenient=%s',
            zone.name,
            target,
            lenient,
        )

        zone_auth = self._zone_auth(zone.name)
        if zone_auth is None:
            self.log.info('populate:   found 0 records, exists=False')
            return False

        values = defaultdict(lambda: defaultdict(list))
        for endpoint in self._adapter.zone_records(zone_auth):
            _type = endpoint.record_type
            if _type not in self.SUPPORTS:
                self.log.warning(
                    'populate: skipping unsupported %s record', _type
                )
                continue
            name = self._hostname(zone, endpoint.dns_name)
            if name is None:
                self.log.warning(
                    'populate: skipping %s outside of %s',
                    endpoint.dns_name,
                    zone.name,
                )
                continue
            if _type == RECORD_TYPE_NS and name == '':
                self.log.debug('populate: skipping root NS')
                continue
            values[name][_type].append(endpoint)

        before = len(zone.records)
        for name, types in values.items():
            for _type, endpoints in types.items():
                data_for = getattr(self, f'_data_for_{_type}')
                data = data_for(_type, endpoints)
                if 'values' in data and not data['values']:
                    self.log.warning(
                        'populate: skipping %s %s, no usable values',
                        name,
                        _type,
                    )
                    continue
                record = Record.new(
                    zone,
                    name,
                    data,
                    source=self,
                    lenient=lenient,
                )
                zone.add_record(record, lenient=lenient)

        self.log.info(
            'populate:   found %s records, exists=True',
            len(zone.records) - before,
        )
        return True

    def _params_for_multiple(self, record):
        for value in record.values:
            yield value.replace('\\;', ';')

    _params_for_A = _params_for_multiple
    _params_for_AAAA = _params_for_multiple
    _params_for_TXT = _params_for_multiple

    def _params_for_CAA(self, record):
        for value in record.values:
            yield f'{value.flags} {value.tag} {value.value}'

    def _params_for_single(self, record):
        yield self._strip_dot(record.value)

    _params_for_CNAME = _params_for_single
    _params_for_PTR = _params_for_single

    def _params_for_MX(self, record):
        for value in record.values:
            yield f'{value.preference} {self._strip_dot(value.exchange)}'

    def _params_for_NS(self, record):
        for value in record.values:
            yield self._strip_dot(value)

    def _params_for_SRV(self, record):
        for value in record.values:
            yield (
                f'{value.priority} {value.weight} {value.port} '
                f'{self._strip_dot(value.target)}'
            )

    def _endpoint_for(self, record):
        params_for = getattr(self, f'_params_for_{record._type}')
        return Endpoint(
            self._strip_dot(record.fqdn),
            record._type,
            record.ttl,
            list(params_for(record)),
        )

    def _apply_Create(self, changes, change):
        changes.create.append(self._endpoint_for(change.new))

    def _apply_Update(self, changes, change):
        changes.update_old.append(self._endpoint_for(change.existing))
        changes.update_new.append(self._endpoint_for(change.new))

    def _apply_Delete(self, changes, change):
        changes.delete.append(self._endpoint_for(change.existing))

    def _apply(self, plan):
        desired = plan.desired
        self.log.debug(
            '_apply: zone=%s, len(changes)=%d', desired.name, len(plan.changes)
        )
        if not plan.exists:
            self.log.warning(
                '_apply: zone %s does not exist on SOLIDserver, record '
                'creation will fail',
                desired.name,
            )

        changes = Changes()
        for change in plan.changes:
            class_name = change.__class__.__name__
            getattr(self, f'_apply_{class_name}')(changes, change)

        self._adapter.apply_changes(changes)
