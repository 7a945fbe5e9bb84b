import os
import tempfile
import threading
import pytest
from concurrent.futures import Future
from datetime import datetime

from codevance import create_app
from codevance.extensions import db as _db
from codevance.models.linked_account import LinkedAccount
from codevance.models.user import User
from codevance.services.sync import sync_states
from codevance.services.sync.ports import AccountStore, Notifier, PlatformFetcher, ProblemStore

TEST_PASSWORD = 'Passw0rd!'


class InlineExecutor:
    """Executor that runs submitted work immediately on the calling thread."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class FakeProblemStore(ProblemStore):
    """Thread-safe in-memory problem store."""

    def __init__(self, existing=None, fail_on=None, fail_delete=False):
        self._lock = threading.Lock()
        self.records = {}
        self.insert_calls = 0
        self.exists_calls = 0
        self.delete_calls = []
        self.fail_on = set(fail_on or [])
        self.fail_delete = fail_delete
        for key in existing or []:
            self.records[key] = {'synced_from_platform': True}

    def exists_by_natural_key(self, platform_problem_id, platform, user_id):
        with self._lock:
            self.exists_calls += 1
            return (platform_problem_id, platform, user_id) in self.records

    def insert(self, record):
        with self._lock:
            self.insert_calls += 1
            if record['platform_problem_id'] in self.fail_on:
                raise RuntimeError(f"insert failed for {record['platform_problem_id']}")
            key = (record['platform_problem_id'], record['platform'], record['user_id'])
            self.records[key] = record
            return len(self.records)

    def delete_by_platform(self, user_id, platform, synced_only=True):
        with self._lock:
            self.delete_calls.append((user_id, platform, synced_only))
            if self.fail_delete:
                raise RuntimeError("delete failed")
            doomed = [
                key for key, record in self.records.items()
                if key[1] == platform and key[2] == user_id
                and (record.get('synced_from_platform') or not synced_only)
            ]
            for key in doomed:
                del self.records[key]
            return len(doomed)

    def count(self, platform, user_id):
        return sum(1 for key in self.records if key[1] == platform and key[2] == user_id)


class FakeAccountStore(AccountStore):

    def __init__(self):
        self.updates = []
        self.unlinked = set()

    def account_exists(self, account_id):
        return account_id not in self.unlinked

    def update_last_sync(self, account_id, timestamp=None):
        self.updates.append((account_id, timestamp))
        return True


class RecordingNotifier(Notifier):

    def __init__(self):
        self.notices = []

    def notify(self, kind, title, message):
        self.notices.append((kind, title, message))

    @property
    def titles(self):
        return [title for _, title, _ in self.notices]


class StaticFetcher(PlatformFetcher):
    """Returns a canned result or raises a canned error."""

    def __init__(self, platform, result=None, error=None):
        self.platform = platform
        self.result = result
        self.error = error
        self.calls = []

    def fetch(self, username):
        self.calls.append(username)
        if self.error is not None:
            raise self.error
        return self.result


class BlockingFetcher(PlatformFetcher):
    """Blocks inside fetch until released, so a sync stays in flight."""

    def __init__(self, platform, result):
        self.platform = platform
        self.result = result
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def fetch(self, username):
        self.calls += 1
        self.started.set()
        self.release.wait(timeout=5)
        return self.result


def make_problems(count, start=0, platform_prefix='p'):
    return [
        {
            'platform_problem_id': f"{platform_prefix}{i}",
            'title': f"Problem {i}",
            'url': f"https://example.com/problems/{i}",
            'difficulty': 'Easy',
            'topics': ['Arrays'],
            'timestamp': 1700000000 + i,
        }
        for i in range(start, start + count)
    ]


@pytest.fixture
def app():
    """Create and configure a Flask app for testing."""
    # Create a temp file to isolate the database for each test
    db_fd, db_path = tempfile.mkstemp()

    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}',
        'SECRET_KEY': 'test-key',
        'WTF_CSRF_ENABLED': False,
        'RATELIMIT_ENABLED': False,
        'SYNC_SCHEDULER_ENABLED': False,
        'SYNC_RECONCILE_WORKERS': 1,
        'CACHE_TYPE': 'SimpleCache',
    })

    # Create the database and tables
    with app.app_context():
        _db.create_all()

    yield app

    with app.app_context():
        _db.session.remove()
        _db.engine.dispose()
    sync_states.clear()

    # Close and remove the temp database
    os.close(db_fd)
    os.unlink(db_path)

@pytest.fixture
def db(app):
    """Database bound to an application context for the whole test."""
    with app.app_context():
        yield _db
        _db.session.remove()

@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()

@pytest.fixture
def runner(app):
    """A test CLI runner for the app."""
    return app.test_cli_runner()

@pytest.fixture
def user(app):
    """Create a user and return its ID."""
    with app.app_context():
        user = User(username='testuser', email='test@example.com', created_at=datetime.utcnow())
        user.set_password(TEST_PASSWORD)
        _db.session.add(user)
        _db.session.commit()
        return user.id

@pytest.fixture
def auth(client):
    """Authentication helper for tests."""
    class AuthActions:
        def __init__(self, client):
            self._client = client

        def login(self, email='test@example.com', password=TEST_PASSWORD):
            return self._client.post('/auth/login', json={'email': email, 'password': password})

        def logout(self):
            return self._client.post('/auth/logout')

    return AuthActions(client)

@pytest.fixture
def logged_in_user(user, auth):
    """A logged in user for tests."""
    response = auth.login()
    assert response.status_code == 200
    return user

@pytest.fixture
def linked_account(app, user):
    """A Codeforces account linked to the test user, returned by ID."""
    with app.app_context():
        account = LinkedAccount(user_id=user, platform='Codeforces', username='tourist')
        _db.session.add(account)
        _db.session.commit()
        return account.id

@pytest.fixture
def inline_executor():
    return InlineExecutor()

@pytest.fixture
def make_store():
    """Factory for in-memory problem stores."""
    return FakeProblemStore

@pytest.fixture
def problem_store():
    return FakeProblemStore()

@pytest.fixture
def account_store():
    return FakeAccountStore()

@pytest.fixture
def notifier():
    return RecordingNotifier()

@pytest.fixture
def static_fetcher():
    """Factory: static_fetcher(platform, result=None, error=None)."""
    return StaticFetcher

@pytest.fixture
def blocking_fetcher():
    """Factory: blocking_fetcher(platform, result)."""
    return BlockingFetcher

@pytest.fixture
def problems():
    """Factory: problems(count, start=0) builds raw platform problems."""
    return make_problems
