"""Tests for ExpenseFeed.core.sync.

Two test-case classes are included:

1. **SyncControllerTest**
   – subscription lifecycle, snapshot application and error handling against
   an immediate in-memory store

2. **SyncCancellationTest**
   – late callbacks from released subscriptions, with queued delivery
"""
import unittest

from ExpenseFeed.core.criteria import ALL, CriteriaModel
from ExpenseFeed.core.remote import InMemoryRemoteStore
from ExpenseFeed.core.session import Session
from ExpenseFeed.core.store import RecordStore
from ExpenseFeed.core.sync import SyncController
from tests.base import (
    BaseTestCase,
    COLLECTION,
    FailingRemoteStore,
    OTHER_USER_ID,
    SignalRecorder,
    USER_ID,
    make_fields,
    process_events_until,
)


class SyncControllerTest(BaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.remote = FailingRemoteStore()
        self.remote.add(COLLECTION, key='a', **make_fields(date='2024-01-05', amount=12.5, category='food'))
        self.remote.add(COLLECTION, key='b', **make_fields(date='2024-01-10', amount=7.0, category='transport'))
        self.remote.add(COLLECTION, key='c', **make_fields(date='2024-02-01', amount=3.0, category='food'))
        self.remote.add(COLLECTION, key='x', **make_fields(date='2024-01-20', owner_id=OTHER_USER_ID))

        self.session = Session(self.remote)
        self.criteria = CriteriaModel(month=1, year=2024)
        self.store = RecordStore()
        self.sync = SyncController(self.session, self.criteria, self.store)

    def tearDown(self) -> None:
        self.sync.stop()
        super().tearDown()

    def ids(self):
        return [r.id for r in self.store]

    def test_does_nothing_until_started(self):
        self.session.sign_in(USER_ID)
        self.assertFalse(self.sync.is_subscribed())
        self.assertTrue(self.store.is_empty())
        self.assertTrue(self.sync.loading)

    def test_unauthenticated_stays_loading_without_subscription(self):
        self.sync.start()
        self.assertFalse(self.sync.is_subscribed())
        self.assertEqual(self.remote.subscriptions(), [])
        self.assertTrue(self.sync.loading)
        self.assertTrue(self.store.is_empty())

    def test_applies_snapshot_in_canonical_order(self):
        applied = SignalRecorder(self.sync.snapshotApplied)
        self.session.sign_in(USER_ID)
        self.sync.start()

        self.assertTrue(self.sync.is_subscribed())
        self.assertEqual(self.ids(), ['b', 'a'])
        self.assertFalse(self.sync.loading)
        self.assertEqual(self.sync.error, '')
        self.assertEqual(applied.calls, [(2,)])

    def test_sign_in_after_start_subscribes(self):
        self.sync.start()
        self.session.sign_in(USER_ID)
        self.assertEqual(self.ids(), ['b', 'a'])

    def test_criteria_change_replaces_subscription(self):
        self.session.sign_in(USER_ID)
        self.sync.start()
        first = self.remote.subscriptions()[0]

        self.criteria.set_criteria(month=ALL, category='food')
        self.assertFalse(first.active)
        self.assertEqual(len(self.remote.subscriptions()), 1)
        self.assertEqual(self.ids(), ['c', 'a'])

    def test_remote_changes_flow_into_store(self):
        self.session.sign_in(USER_ID)
        self.sync.start()

        self.remote.add(COLLECTION, key='d', **make_fields(date='2024-01-31'))
        self.assertEqual(self.ids(), ['d', 'b', 'a'])

        self.remote.delete_by_key(COLLECTION, 'b')
        self.assertEqual(self.ids(), ['d', 'a'])

    def test_sign_out_clears_store(self):
        self.session.sign_in(USER_ID)
        self.sync.start()
        self.session.sign_out()

        self.assertEqual(self.remote.subscriptions(), [])
        self.assertTrue(self.store.is_empty())
        self.assertTrue(self.sync.loading)

    def test_switch_user(self):
        self.session.sign_in(USER_ID)
        self.sync.start()
        self.session.sign_in(OTHER_USER_ID)
        self.assertEqual(self.ids(), ['x'])
        self.assertEqual(len(self.remote.subscriptions()), 1)

    def test_invalid_snapshot_preserves_previous_contents(self):
        self.session.sign_in(USER_ID)
        self.sync.start()
        version = self.store.version
        errors = SignalRecorder(self.sync.errorChanged)

        self.remote.add(COLLECTION, key='bad', **make_fields(date='not a date'))

        self.assertEqual(self.ids(), ['b', 'a'])
        self.assertEqual(self.store.version, version)
        self.assertIn('bad', self.sync.error)
        self.assertFalse(self.sync.loading)
        self.assertEqual(errors.count, 1)

        # The next valid snapshot recovers
        self.remote.delete_by_key(COLLECTION, 'bad')
        self.assertEqual(self.sync.error, '')
        self.assertEqual(self.ids(), ['b', 'a'])

    def test_subscription_failure_sets_error(self):
        self.remote.fail_subscribe = True
        self.session.sign_in(USER_ID)
        self.sync.start()

        self.assertFalse(self.sync.is_subscribed())
        self.assertIn('Subscription refused', self.sync.error)
        self.assertFalse(self.sync.loading)

    def test_stop_releases_subscription(self):
        self.session.sign_in(USER_ID)
        self.sync.start()
        version = self.store.version
        self.sync.stop()

        self.assertEqual(self.remote.subscriptions(), [])
        self.remote.add(COLLECTION, key='d', **make_fields(date='2024-01-31'))
        self.assertEqual(self.store.version, version)

        # Changes after stop do not resubscribe
        self.criteria.set_criteria(month=2)
        self.assertEqual(self.remote.subscriptions(), [])

    def test_loading_signal(self):
        loading = SignalRecorder(self.sync.loadingChanged)
        self.session.sign_in(USER_ID)
        self.sync.start()
        self.assertEqual(loading.calls, [(False,)])

        self.criteria.set_criteria(month=2)
        self.assertEqual(loading.calls, [(False,), (True,), (False,)])


class SyncCancellationTest(BaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.remote = InMemoryRemoteStore(queued=True)
        self.remote.add(COLLECTION, key='a', **make_fields(date='2024-01-05', category='food'))
        self.remote.add(COLLECTION, key='b', **make_fields(date='2024-01-10', category='transport'))

        self.session = Session(self.remote, user_id=USER_ID)
        self.criteria = CriteriaModel(month=1, year=2024)
        self.store = RecordStore()
        self.sync = SyncController(self.session, self.criteria, self.store)

    def tearDown(self) -> None:
        self.sync.stop()
        super().tearDown()

    def test_snapshot_arrives_asynchronously(self):
        self.sync.start()
        self.assertTrue(self.sync.loading)
        self.assertTrue(self.store.is_empty())

        self.assertTrue(process_events_until(lambda: not self.sync.loading))
        self.assertEqual([r.id for r in self.store], ['b', 'a'])

    def test_stale_snapshot_is_ignored_after_criteria_change(self):
        self.sync.start()
        # Supersede the first subscription before its snapshot is delivered
        self.criteria.set_criteria(category='transport')

        self.assertTrue(process_events_until(lambda: not self.sync.loading))
        process_events_until(lambda: False, timeout=50)
        self.assertEqual([r.id for r in self.store], ['b'])
        self.assertEqual(self.store.version, 1)

    def test_stale_callback_cannot_mutate_store(self):
        self.sync.start()
        self.assertTrue(process_events_until(lambda: not self.sync.loading))
        version = self.store.version

        # Capture the live callback, then release its subscription
        callback = self.remote.subscriptions()[0].callback
        self.sync.stop()

        callback([('z', make_fields(date='2024-01-30'))])
        self.assertEqual(self.store.version, version)
        self.assertIsNone(self.store.get('z'))

    def test_no_snapshot_after_stop(self):
        self.sync.start()
        self.sync.stop()
        process_events_until(lambda: False, timeout=50)
        self.assertTrue(self.store.is_empty())
        self.assertEqual(self.store.version, 0)


if __name__ == '__main__':
    unittest.main()
