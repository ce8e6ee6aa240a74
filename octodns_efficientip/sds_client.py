#
#
#

import logging

import urllib3
from requests import Session

from octodns import __VERSION__ as octodns_version

from . import __version__ as package_version
from .exceptions import (
    EfficientIPClientNotFound,
    EfficientIPClientUnauthorized,
    EfficientIPRequestFailed,
)

# Number of rr_valueN fields a value is split into, types not listed here
# carry their whole value in rr_value1
RR_VALUE_FIELDS = {'MX': 2, 'CAA': 3, 'SRV': 4}


def rr_values(_type, value):
    count = RR_VALUE_FIELDS.get(_type, 1)
    if count == 1:
        parts = [value]
    else:
        parts = value.split(None, count - 1)
    return {f'rr_value{i}': part for i, part in enumerate(parts, start=1)}


class SOLIDserverClient(object):
    BASE_PATH = '/api/v2.0'
    PAGE_SIZE = 1000

    def __init__(self, host, username, password, port=443, ssl_verify=True):
        self.log = logging.getLogger(f'SOLIDserverClient[{host}]')
        self.base_url = f'https://{host}:{port}{self.BASE_PATH}'

        session = Session()
        session.auth = (username, password)
        session.headers.update(
            {
                'Accept': 'application/json',
                'User-Agent': f'octodns/{octodns_version} octodns-efficientip/{package_version}',
            }
        )
        if not ssl_verify:
            self.log.warning(
                '__init__: certificate validation disabled for %s', host
            )
            session.verify = False
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        self._session = session

    def _do(self, method, path, params=None, data=None):
        url = f'{self.base_url}{path}'
        response = self._session.request(method, url, params=params, json=data)
        if response.status_code == 401:
            raise EfficientIPClientUnauthorized()
        if response.status_code == 404:
            raise EfficientIPClientNotFound(path)
        response.raise_for_status()
        return response

    def _do_json(self, method, path, params=None, data=None):
        response = self._do(method, path, params, data)
        # SOLIDserver answers empty result sets with 204 and no body
        if response.status_code == 204 or not response.content:
            return {'success': True, 'data': []}
        payload = response.json()
        if not payload.get('success', True):
            raise EfficientIPRequestFailed(
                path,
                payload.get('message') or 'request failed',
                response.status_code,
            )
        return payload

    def _paginate(self, path, params=None):
        ret = []
        offset = 0
        while True:
            page = dict(params or {}, limit=self.PAGE_SIZE, offset=offset)
            data = self._do_json('GET', path, page).get('data') or []
            ret += data
            if len(data) < self.PAGE_SIZE:
                break
            offset += len(data)
        return ret

    def zone_list(self):
        return self._paginate('/dns/zone/list')

    def rr_list(self, zone_id):
        params = {'where': f"zone_id='{zone_id}'", 'orderby': 'rr_full_name'}
        return self._paginate('/dns/rr/list', params)

    def rr_add(self, name, _type, ttl, value):
        data = {'rr_name': name, 'rr_type': _type, 'rr_ttl': ttl}
        data.update(rr_values(_type, value))
        self._do_json('POST', '/dns/rr/add', data=data)

    def rr_delete(self, name, _type, value):
        params = {'rr_name': name, 'rr_type': _type}
        params.update(rr_values(_type, value))
        self._do_json('DELETE', '/dns/rr/delete', params=params)
