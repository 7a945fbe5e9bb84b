from codevance.services.sync.orchestrator import SyncOrchestrator, SyncReport, SyncTarget
from codevance.services.sync.outcomes import SyncOutcome, SyncOutcomeKind, classify_fetch_result
from codevance.services.sync.ports import (
    AccountStore,
    Notifier,
    PlatformFetchError,
    PlatformFetcher,
    ProblemStore,
)
from codevance.services.sync.reconciler import Reconciler
from codevance.services.sync.state import SyncState, SyncStateRegistry, sync_states

__all__ = [
    'AccountStore',
    'Notifier',
    'PlatformFetchError',
    'PlatformFetcher',
    'ProblemStore',
    'Reconciler',
    'SyncOrchestrator',
    'SyncOutcome',
    'SyncOutcomeKind',
    'SyncReport',
    'SyncState',
    'SyncStateRegistry',
    'SyncTarget',
    'classify_fetch_result',
    'sync_states',
]
