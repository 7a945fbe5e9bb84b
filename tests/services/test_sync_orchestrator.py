import pytest
from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace
from unittest.mock import MagicMock

from codevance.services.sync.orchestrator import SyncOrchestrator, SyncReport
from codevance.services.sync.outcomes import SyncOutcomeKind
from codevance.services.sync.ports import PlatformFetchError
from codevance.services.sync.reconciler import Reconciler
from codevance.services.sync.state import SyncState
from codevance.tasks.executor import get_executor

USER_ID = 'user-1'

def account(platform='LeetCode', username='alice', account_id='acc-1'):
    return SimpleNamespace(id=account_id, user_id=USER_ID, platform=platform, username=username)

@pytest.fixture
def sync_state():
    return SyncState()

@pytest.fixture
def build(sync_state, problem_store, account_store, notifier, inline_executor):
    """Build an orchestrator around in-memory collaborators."""
    def _build(fetchers, executor=None, user=object(), **kwargs):
        return SyncOrchestrator(
            sync_state,
            fetchers,
            problem_store,
            account_store,
            notifier,
            lambda user_id: user,
            reconciler=Reconciler(problem_store, batch_size=10, sync_state=sync_state),
            executor=executor or inline_executor,
            **kwargs
        )
    return _build

def test_successful_sync_inserts_and_notifies(build, static_fetcher, problems, problem_store,
                                              account_store, notifier, sync_state):
    fetcher = static_fetcher('LeetCode', result={'problems': problems(25)})
    on_complete = MagicMock()
    settled = MagicMock()
    orchestrator = build({'LeetCode': fetcher}, on_sync_settled=settled)

    future = orchestrator.start_sync(account(), on_complete=on_complete)
    report = future.result()

    assert report.outcome is SyncOutcomeKind.SUCCESS
    assert report.synced_count == 25
    assert fetcher.calls == ['alice']
    assert problem_store.delete_calls == [(USER_ID, 'LeetCode', True)]
    assert [update[0] for update in account_store.updates] == ['acc-1']
    assert len(notifier.notices) == 1
    kind, title, message = notifier.notices[0]
    assert (kind, title) == ('success', 'Sync Complete')
    assert message.startswith('Successfully synced 25 problems from LeetCode in ')
    assert 'problems/sec' in message
    on_complete.assert_called_once_with(report)
    settled.assert_called_once_with('LeetCode')
    assert not sync_state.is_syncing('LeetCode')

@pytest.mark.parametrize("fetch_kwargs, kind, title", [
    ({'result': {'error': "User 'alice' not found"}}, 'error', 'User Not Found'),
    ({'error': PlatformFetchError("User not found")}, 'error', 'User Not Found'),
    ({'error': PlatformFetchError("network timeout")}, 'error', 'Sync Failed'),
    ({'result': {'problems': []}}, 'success', 'Sync Complete'),
    ({'result': {'error': 'Profile is private'}}, 'success', 'Sync Complete'),
])
def test_non_success_outcomes(build, static_fetcher, notifier, account_store, problem_store,
                              sync_state, fetch_kwargs, kind, title):
    on_complete = MagicMock()
    orchestrator = build({'LeetCode': static_fetcher('LeetCode', **fetch_kwargs)})

    report = orchestrator.start_sync(account(), on_complete=on_complete).result()

    assert notifier.notices[0][:2] == (kind, title)
    assert len(notifier.notices) == 1
    assert len(account_store.updates) == 1
    assert problem_store.insert_calls == 0
    assert report.synced_count == 0
    on_complete.assert_called_once_with(report)
    assert sync_state.snapshot() == {}

def test_missing_user_is_fatal(build, static_fetcher, notifier, account_store, sync_state):
    fetcher = static_fetcher('LeetCode', result={'problems': [{'platform_problem_id': 'x'}]})
    on_complete = MagicMock()
    orchestrator = build({'LeetCode': fetcher}, user=None)

    report = orchestrator.start_sync(account(), on_complete=on_complete).result()

    assert report.outcome is None
    assert 'not found' in report.error
    assert notifier.titles == ['Sync Failed']
    assert fetcher.calls == []
    assert account_store.updates == []
    on_complete.assert_not_called()
    assert not sync_state.is_syncing('LeetCode')

def test_unexpected_exception_is_reported_once_and_cleaned_up(build, notifier, sync_state):
    fetcher = MagicMock()
    fetcher.fetch.return_value = {'problems': [{'platform_problem_id': 'x', 'title': 'X'}]}
    reconciler = MagicMock()
    reconciler.process.side_effect = RuntimeError("disk full")
    settled = MagicMock()
    orchestrator = build({'LeetCode': fetcher}, on_sync_settled=settled)
    orchestrator.reconciler = reconciler

    report = orchestrator.start_sync(account()).result()

    assert report.error == 'disk full'
    assert notifier.titles == ['Sync Failed']
    assert 'disk full' in notifier.notices[0][2]
    assert sync_state.snapshot() == {}
    settled.assert_called_once_with('LeetCode')

def test_failed_notification_after_success_does_not_double_notify(build, static_fetcher, problems, sync_state):
    notifier = MagicMock()
    notifier.notify.side_effect = RuntimeError("db locked")
    orchestrator = build({'LeetCode': static_fetcher('LeetCode', result={'problems': problems(3)})})
    orchestrator.notifier = notifier

    report = orchestrator.start_sync(account()).result()

    assert report.outcome is SyncOutcomeKind.SUCCESS
    assert notifier.notify.call_count == 1
    assert not sync_state.is_syncing('LeetCode')

def test_delete_failure_is_not_fatal(build, static_fetcher, problems, make_store, notifier, sync_state):
    store = make_store(fail_delete=True)
    orchestrator = build({'LeetCode': static_fetcher('LeetCode', result={'problems': problems(4)})})
    orchestrator.problem_store = store
    orchestrator.reconciler = Reconciler(store, sync_state=sync_state)

    report = orchestrator.start_sync(account()).result()

    assert report.synced_count == 4
    assert notifier.titles == ['Sync Complete']

def test_unsupported_platform_is_rejected(build, notifier, inline_executor):
    orchestrator = build({})

    assert orchestrator.start_sync(account(platform='CodeChef')) is None
    assert notifier.notices == [('info', 'Sync Not Available', 'Sync is not available for CodeChef yet.')]
    assert inline_executor.submitted == 0

def test_fetcher_removed_after_start_is_fatal(build, static_fetcher, notifier, sync_state):
    orchestrator = build({'LeetCode': static_fetcher('LeetCode', result={'problems': []})})
    orchestrator.fetchers = {}

    report = orchestrator.run_sync(account())

    assert report.error == 'LeetCode sync not implemented'
    assert notifier.titles == ['Sync Failed']

def test_second_start_while_running_is_rejected(build, blocking_fetcher, problems, notifier, problem_store, sync_state):
    fetcher = blocking_fetcher('LeetCode', {'problems': problems(5)})
    with ThreadPoolExecutor(max_workers=2) as executor:
        orchestrator = build({'LeetCode': fetcher}, executor=executor)

        first = orchestrator.start_sync(account())
        assert fetcher.started.wait(timeout=5)

        second = orchestrator.start_sync(account())

        assert second is None
        assert sync_state.is_syncing('LeetCode')
        assert sync_state.active_syncs['LeetCode'] is first
        assert ('info', 'Sync Already Running') == notifier.notices[0][:2]

        fetcher.release.set()
        report = first.result(timeout=5)

    assert fetcher.calls == 1
    assert report.synced_count == 5
    assert notifier.titles == ['Sync Already Running', 'Sync Complete']
    assert not sync_state.is_syncing('LeetCode')

def test_platform_can_sync_again_after_settling(build, static_fetcher, problems, problem_store):
    orchestrator = build({'Codeforces': static_fetcher('Codeforces', result={'problems': problems(12)})})

    first = orchestrator.start_sync(account(platform='Codeforces')).result()
    second = orchestrator.start_sync(account(platform='Codeforces')).result()

    # Synced records are replaced on every run, so the count stays the same
    assert first.synced_count == 12
    assert second.synced_count == 12
    assert problem_store.count('Codeforces', USER_ID) == 12

def test_progress_sequence_is_monotonic(build, static_fetcher, problems, sync_state):
    seen = []
    sync_state.subscribe(lambda platform, entry: entry and seen.append(entry['progress']))
    orchestrator = build({'LeetCode': static_fetcher('LeetCode', result={'problems': problems(30)})})

    orchestrator.start_sync(account()).result()

    assert seen == sorted(seen)
    assert seen[0] == 0
    assert seen[-1] == 100
    assert {5, 15, 25, 50} <= set(seen)

def test_problem_update_hook_runs_before_fetch_and_during_reconcile(build, static_fetcher, problems):
    events = []
    fetcher = static_fetcher('LeetCode', result={'problems': problems(40)})
    original_fetch = fetcher.fetch
    fetcher.fetch = lambda username: events.append('fetch') or original_fetch(username)
    orchestrator = build({'LeetCode': fetcher}, on_problems_update=lambda: events.append('update'))

    orchestrator.start_sync(account()).result()

    # Batches of 10: once after the second batch, once after the last
    assert events == ['update', 'fetch', 'update', 'update']

def test_accepts_plain_mapping_account(build, static_fetcher, problems):
    orchestrator = build({'LeetCode': static_fetcher('LeetCode', result={'problems': problems(1)})})
    raw_account = {'id': 'acc-9', 'user_id': USER_ID, 'platform': 'LeetCode', 'username': 'bob'}

    report = orchestrator.start_sync(raw_account).result()

    assert isinstance(report, SyncReport)
    assert report.synced_count == 1

def test_account_unlinked_during_fetch_is_not_reconciled(build, static_fetcher, problems, problem_store,
                                                         account_store, notifier, sync_state):
    fetcher = static_fetcher('LeetCode', result={'problems': problems(6)})
    original_fetch = fetcher.fetch

    def fetch_then_unlink(username):
        account_store.unlinked.add('acc-1')
        return original_fetch(username)

    fetcher.fetch = fetch_then_unlink
    on_complete = MagicMock()
    orchestrator = build({'LeetCode': fetcher})

    report = orchestrator.start_sync(account(), on_complete=on_complete).result()

    assert report.outcome is None
    assert 'unlinked' in report.error
    assert problem_store.insert_calls == 0
    assert account_store.updates == []
    assert notifier.titles == ['Sync Failed']
    on_complete.assert_not_called()
    assert not sync_state.is_syncing('LeetCode')

def test_default_executor_is_the_shared_task_pool(sync_state, problem_store, account_store, notifier):
    orchestrator = SyncOrchestrator(sync_state, {}, problem_store, account_store, notifier, lambda user_id: None)

    assert orchestrator.executor is get_executor()
