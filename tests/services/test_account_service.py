import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import IntegrityError

from codevance.errors import ConflictError, ResourceNotFoundError, ValidationError
from codevance.services.account_service import AccountService
from codevance.services.sync.state import SyncStateRegistry

@pytest.fixture
def repositories():
    return {
        'account_repository': MagicMock(),
        'problem_repository': MagicMock(),
    }

@pytest.fixture
def registry():
    return SyncStateRegistry()

@pytest.fixture
def account_service(repositories, registry):
    return AccountService(repositories['account_repository'], repositories['problem_repository'], registry)

def test_link_account_saves_trimmed_username(account_service, repositories):
    repositories['account_repository'].exists.return_value = False

    account = account_service.link_account('user-1', 'LeetCode', '  alice  ')

    assert account.username == 'alice'
    assert account.platform == 'LeetCode'
    assert account.user_id == 'user-1'
    repositories['account_repository'].exists.assert_called_once_with('user-1', 'LeetCode', 'alice')
    repositories['account_repository'].save.assert_called_once_with(account)

def test_link_account_rejects_duplicates(account_service, repositories):
    repositories['account_repository'].exists.return_value = True

    with pytest.raises(ConflictError):
        account_service.link_account('user-1', 'LeetCode', 'alice')

    repositories['account_repository'].save.assert_not_called()

def test_link_account_maps_constraint_violation_to_conflict(account_service, repositories):
    repositories['account_repository'].exists.return_value = False
    repositories['account_repository'].save.side_effect = IntegrityError('INSERT', {}, Exception('unique'))

    with pytest.raises(ConflictError):
        account_service.link_account('user-1', 'Codeforces', 'tourist')

@pytest.mark.parametrize("platform, username", [
    ('TopCoder', 'alice'),
    ('LeetCode', '   '),
    ('LeetCode', None),
])
def test_link_account_validates_input(account_service, platform, username):
    with pytest.raises(ValidationError):
        account_service.link_account('user-1', platform, username)

def test_link_only_platform_can_be_linked(account_service, repositories):
    repositories['account_repository'].exists.return_value = False

    account = account_service.link_account('user-1', 'HackerRank', 'alice')

    assert account.platform == 'HackerRank'

def test_unlink_removes_synced_problems_then_account(account_service, repositories):
    account = MagicMock(platform='Codeforces')
    repositories['account_repository'].get_for_user.return_value = account
    repositories['problem_repository'].delete_by_platform.return_value = 7

    removed = account_service.unlink_account('user-1', 'acc-1')

    assert removed == 7
    repositories['account_repository'].get_for_user.assert_called_once_with('acc-1', 'user-1')
    repositories['problem_repository'].delete_by_platform.assert_called_once_with(
        'user-1', 'Codeforces', synced_only=True
    )
    repositories['account_repository'].delete.assert_called_once_with(account)

def test_unlink_unknown_account(account_service, repositories):
    repositories['account_repository'].get_for_user.return_value = None

    with pytest.raises(ResourceNotFoundError):
        account_service.unlink_account('user-1', 'missing')

    repositories['problem_repository'].delete_by_platform.assert_not_called()

def test_unlink_is_refused_while_platform_syncs(account_service, repositories, registry):
    repositories['account_repository'].get_for_user.return_value = MagicMock(platform='Codeforces')
    registry.state_for('user-1').try_start('Codeforces', lambda: 'in-flight')

    with pytest.raises(ConflictError):
        account_service.unlink_account('user-1', 'acc-1')

    repositories['problem_repository'].delete_by_platform.assert_not_called()
    repositories['account_repository'].delete.assert_not_called()

def test_unlink_waits_for_running_sync_against_database(app, user, linked_account, blocking_fetcher,
                                                        problems, notifier):
    from concurrent.futures import ThreadPoolExecutor
    from codevance.models.linked_account_repository import SqlAlchemyLinkedAccountRepository
    from codevance.models.problem_repository import SqlAlchemyProblemRepository
    from codevance.models.user_repository import SqlAlchemyUserRepository
    from codevance.services.sync import Reconciler, SyncOrchestrator
    from codevance.services.sync.outcomes import SyncOutcomeKind

    registry = SyncStateRegistry()
    sync_state = registry.state_for(user)
    account_repository = SqlAlchemyLinkedAccountRepository(app=app)
    problem_repository = SqlAlchemyProblemRepository(app=app)
    service = AccountService(account_repository, problem_repository, registry)
    fetcher = blocking_fetcher('Codeforces', {'problems': problems(30)})

    with ThreadPoolExecutor(max_workers=2) as executor:
        orchestrator = SyncOrchestrator(
            sync_state, {'Codeforces': fetcher}, problem_repository, account_repository, notifier,
            SqlAlchemyUserRepository(app=app).get_by_id,
            reconciler=Reconciler(problem_repository, batch_size=10, max_workers=1, sync_state=sync_state),
            executor=executor,
        )
        future = orchestrator.start_sync({'id': linked_account, 'user_id': user,
                                          'platform': 'Codeforces', 'username': 'tourist'})
        assert fetcher.started.wait(timeout=5)

        with app.app_context():
            with pytest.raises(ConflictError):
                service.unlink_account(user, linked_account)

        fetcher.release.set()
        report = future.result(timeout=10)

    assert report.outcome is SyncOutcomeKind.SUCCESS
    assert report.synced_count == 30

    with app.app_context():
        assert service.unlink_account(user, linked_account) == 30
        assert problem_repository.list_for_user(user) == []
        assert service.list_accounts(user) == []
