"""Service container for dependency injection."""

import logging
from typing import Dict, Any
from flask import current_app

from codevance.extensions import db

logger = logging.getLogger(__name__)

class ServiceContainer:
    """Container for application services."""

    def __init__(self, app):
        """Initialize the service container.

        Args:
            app: Flask application; repositories keep a reference so they can
                push an application context from background threads
        """
        self.app = app
        self._services: Dict[str, Any] = {}

    def register(self, name: str, service: Any) -> None:
        """Register a service in the container.

        Args:
            name: Name of the service
            service: The service instance
        """
        self._services[name] = service

    def get(self, name: str) -> Any:
        """Get a service from the container by name.

        Args:
            name: Name of the service

        Returns:
            The service instance

        Raises:
            KeyError: if no service with that name exists
        """
        if name in self._services:
            return self._services[name]

        init_method = getattr(self, f"_init_{name}", None)
        if init_method is None:
            raise KeyError(f"Unknown service: {name}")

        service = init_method()
        self._services[name] = service
        return service

    def _init_user_repository(self):
        """Initialize the user repository."""
        from codevance.models.user_repository import SqlAlchemyUserRepository
        return SqlAlchemyUserRepository(db, app=self.app)

    def _init_problem_repository(self):
        """Initialize the problem repository."""
        from codevance.models.problem_repository import SqlAlchemyProblemRepository
        return SqlAlchemyProblemRepository(db, app=self.app)

    def _init_linked_account_repository(self):
        """Initialize the linked account repository."""
        from codevance.models.linked_account_repository import SqlAlchemyLinkedAccountRepository
        return SqlAlchemyLinkedAccountRepository(db, app=self.app)

    def _init_notification_repository(self):
        """Initialize the notification repository."""
        from codevance.models.notification_repository import SqlAlchemyNotificationRepository
        return SqlAlchemyNotificationRepository(db, app=self.app)

    def _init_fetchers(self):
        """Initialize the platform fetchers."""
        from codevance.clients import build_fetchers
        return build_fetchers(self.app.config)

    def _init_executor(self):
        """Initialize the background executor."""
        from codevance.tasks.executor import get_executor
        return get_executor(self.app.config.get('SYNC_MAX_WORKERS'))

    def _init_account_service(self):
        """Initialize the account service."""
        from codevance.services.account_service import AccountService
        return AccountService(self.get('linked_account_repository'), self.get('problem_repository'))

    def _init_problem_service(self):
        """Initialize the problem service."""
        from codevance.services.problem_service import ProblemService
        return ProblemService(self.get('problem_repository'))

    def _init_stats_service(self):
        """Initialize the stats service."""
        from codevance.services.stats_service import StatsService
        return StatsService(
            self.get('problem_repository'),
            self.get('user_repository'),
            cache_timeout=self.app.config.get('CACHE_DEFAULT_TIMEOUT', 300)
        )

    def build_orchestrator(self, user_id: str):
        """Create a sync orchestrator bound to one user.

        Orchestrators are cheap; the shared pieces (sync state, fetchers,
        repositories and executor) are reused across calls.
        """
        from codevance.services.sync import Reconciler, SyncOrchestrator, sync_states
        from codevance.utils.notifications import DatabaseNotifier

        sync_state = sync_states.state_for(user_id)
        problem_repository = self.get('problem_repository')
        user_repository = self.get('user_repository')
        stats_service = self.get('stats_service')
        app = self.app

        def refresh_stats():
            with app.app_context():
                stats_service.invalidate_platform_stats()

        reconciler = Reconciler(
            problem_repository,
            batch_size=app.config.get('SYNC_BATCH_SIZE', 50),
            progress_every=app.config.get('SYNC_PROGRESS_EVERY', 2),
            max_workers=app.config.get('SYNC_RECONCILE_WORKERS'),
            sync_state=sync_state,
        )
        return SyncOrchestrator(
            sync_state,
            self.get('fetchers'),
            problem_repository,
            self.get('linked_account_repository'),
            DatabaseNotifier(user_id, self.get('notification_repository')),
            user_repository.get_by_id,
            reconciler=reconciler,
            executor=self.get('executor'),
            on_problems_update=refresh_stats,
        )

def init_container(app) -> ServiceContainer:
    """Attach a service container to the application."""
    service_container = ServiceContainer(app)
    app.extensions['service_container'] = service_container
    logger.info("Service container initialized")
    return service_container

def container() -> ServiceContainer:
    """Get the service container of the current application.

    Returns:
        ServiceContainer: The service container instance
    """
    app = current_app._get_current_object()
    service_container = app.extensions.get('service_container')
    if service_container is None:
        service_container = init_container(app)
    return service_container
