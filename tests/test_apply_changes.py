#
# Tests for change application: ordering, per-value calls, dry-run and the
# best-effort failure policy
#

from unittest import TestCase
from unittest.mock import Mock, call

from requests.exceptions import ConnectionError as RequestsConnectionError

from octodns_efficientip.adapter import EfficientIPAdapter, EfficientIPConfig
from octodns_efficientip.endpoint import Endpoint
from octodns_efficientip.exceptions import EfficientIPRequestFailed
from octodns_efficientip.plan import Changes


class FakeClient:
    '''Records every write, fails on the (op, value) pairs it is told to.'''

    def __init__(self, failures=()):
        self.calls = []
        self.failures = set(failures)

    def zone_list(self):
        return []

    def rr_list(self, zone_id):
        return []

    def rr_add(self, name, _type, ttl, value):
        self.calls.append(('add', name, _type, ttl, value))
        if ('add', value) in self.failures:
            raise EfficientIPRequestFailed('/dns/rr/add', 'rejected')

    def rr_delete(self, name, _type, value):
        self.calls.append(('delete', name, _type, value))
        if ('delete', value) in self.failures:
            raise EfficientIPRequestFailed('/dns/rr/delete', 'rejected')


def _adapter(client, dry_run=False):
    config = EfficientIPConfig(host='sds.unit.tests', dry_run=dry_run)
    return EfficientIPAdapter(config, client=client, log=Mock())


class TestApplyChanges(TestCase):
    def test_one_delete_per_target(self):
        client = FakeClient()
        changes = Changes(
            delete=[Endpoint('a.tests', 'A', 300, ['1.1.1.1', '2.2.2.2'])]
        )
        self.assertIsNone(_adapter(client).apply_changes(changes))
        self.assertEqual(
            [
                ('delete', 'a.tests', 'A', '1.1.1.1'),
                ('delete', 'a.tests', 'A', '2.2.2.2'),
            ],
            client.calls,
        )

    def test_one_create_per_target(self):
        client = FakeClient()
        changes = Changes(
            create=[Endpoint('t.tests', 'TXT', 60, ['one', 'two'])]
        )
        _adapter(client).apply_changes(changes)
        self.assertEqual(
            [
                ('add', 't.tests', 'TXT', 60, 'one'),
                ('add', 't.tests', 'TXT', 60, 'two'),
            ],
            client.calls,
        )

    def test_order(self):
        client = FakeClient()
        changes = Changes(
            create=[Endpoint('create.tests', 'A', 300, ['4.4.4.4'])],
            update_old=[Endpoint('update.tests', 'A', 300, ['2.2.2.2'])],
            update_new=[Endpoint('update.tests', 'A', 600, ['3.3.3.3'])],
            delete=[Endpoint('delete.tests', 'A', 300, ['1.1.1.1'])],
        )
        _adapter(client).apply_changes(changes)
        self.assertEqual(
            [
                ('delete', 'delete.tests', 'A', '1.1.1.1'),
                ('delete', 'update.tests', 'A', '2.2.2.2'),
                ('add', 'update.tests', 'A', 600, '3.3.3.3'),
                ('add', 'create.tests', 'A', 300, '4.4.4.4'),
            ],
            client.calls,
        )

    def test_failure_does_not_stop_batch(self):
        client = FakeClient(
            failures=[('delete', '1.1.1.1'), ('add', '5.5.5.5')]
        )
        changes = Changes(
            create=[
                Endpoint('c.tests', 'A', 300, ['5.5.5.5']),
                Endpoint('d.tests', 'A', 300, ['6.6.6.6']),
            ],
            delete=[
                Endpoint('a.tests', 'A', 300, ['1.1.1.1', '2.2.2.2']),
                Endpoint('b.tests', 'A', 300, ['3.3.3.3']),
            ],
        )
        adapter = _adapter(client)
        self.assertIsNone(adapter.apply_changes(changes))
        self.assertEqual(
            [
                ('delete', 'a.tests', 'A', '1.1.1.1'),
                ('delete', 'a.tests', 'A', '2.2.2.2'),
                ('delete', 'b.tests', 'A', '3.3.3.3'),
                ('add', 'c.tests', 'A', 300, '5.5.5.5'),
                ('add', 'd.tests', 'A', 300, '6.6.6.6'),
            ],
            client.calls,
        )
        self.assertEqual(2, adapter.log.error.call_count)

    def test_transport_failure_swallowed(self):
        client = Mock()
        client.rr_add.side_effect = [RequestsConnectionError('reset'), None]
        changes = Changes(
            create=[Endpoint('a.tests', 'A', 300, ['1.1.1.1', '2.2.2.2'])]
        )
        adapter = _adapter(client)
        adapter.apply_changes(changes)
        client.rr_add.assert_has_calls(
            [
                call('a.tests', 'A', 300, '1.1.1.1'),
                call('a.tests', 'A', 300, '2.2.2.2'),
            ]
        )
        adapter.log.error.assert_called_once()

    def test_dry_run(self):
        client = Mock()
        changes = Changes(
            create=[Endpoint('a.tests', 'A', 300, ['1.1.1.1'])],
            update_old=[Endpoint('b.tests', 'TXT', 60, ['old'])],
            update_new=[Endpoint('b.tests', 'TXT', 60, ['new'])],
            delete=[Endpoint('c.tests', 'A', 300, ['2.2.2.2', '3.3.3.3'])],
        )
        adapter = _adapter(client, dry_run=True)
        self.assertIsNone(adapter.apply_changes(changes))
        self.assertEqual([], client.mock_calls)
        adapter.log.info.assert_any_call(
            "Would delete %s record named '%s' to '%s' for EfficientIP",
            'A',
            'c.tests',
            '3.3.3.3',
        )
        adapter.log.info.assert_any_call(
            "Would create %s record named '%s' to '%s' for EfficientIP",
            'TXT',
            'b.tests',
            'new',
        )
        self.assertEqual(5, adapter.log.info.call_count)

    def test_empty_batch(self):
        client = FakeClient()
        adapter = _adapter(client)
        adapter.apply_changes(Changes())
        self.assertEqual([], client.calls)
        adapter.log.debug.assert_called_with('apply_changes: nothing to do')
