"""Structured log events for hook reconciliation.

Every event is a single pre-formatted line beginning with the event type in
brackets, followed by ``key=value`` pairs, e.g.::

    [hooks.hook.created] project=acme/api hook_id=12 url=https://ci/gitlab-webhook/post

"""

from __future__ import annotations

import enum
import typing as typ

from hookwarden.logging import get_logger, log_info, log_warning

if typ.TYPE_CHECKING:
    from hookwarden.logging import SupportsLog

    from .owner import OwnerKind


class ReconciliationEventType(enum.StrEnum):
    """Event names emitted while reconciling hooks."""

    SKIPPED = "hooks.reconcile.skipped"
    OWNER_RESOLVED = "hooks.owner.resolved"
    OWNER_EMPTY = "hooks.owner.empty"
    PROJECT_EMPTY = "hooks.project.empty"
    TREE_UNAVAILABLE = "hooks.project.tree_unavailable"
    HOOK_PRESENT = "hooks.hook.present"
    HOOK_CREATED = "hooks.hook.created"
    HOOK_FAILED = "hooks.hook.failed"
    RECONCILE_FAILED = "hooks.reconcile.failed"
    RECONCILE_COMPLETED = "hooks.reconcile.completed"


class ReconciliationEventLogger:
    """Emit reconciliation events through femtologging.

    Parameters
    ----------
    logger
        Destination logger. Defaults to this module's femtologging logger.

    """

    def __init__(self, logger: SupportsLog | None = None) -> None:
        """Bind the event logger to ``logger``."""
        self._logger = logger or get_logger(__name__)

    def log_skipped(self, subject: str, reason: str) -> None:
        """Log that reconciliation did not run for ``subject``."""
        log_info(
            self._logger,
            "[%s] subject=%s reason=%s",
            ReconciliationEventType.SKIPPED,
            subject,
            reason,
        )

    def log_owner_resolved(self, owner: str, kind: OwnerKind, projects: int) -> None:
        """Log the owner classification and how many projects it holds."""
        log_info(
            self._logger,
            "[%s] owner=%s kind=%s projects=%d",
            ReconciliationEventType.OWNER_RESOLVED,
            owner,
            kind,
            projects,
        )

    def log_owner_empty(self, owner: str, server_url: str) -> None:
        """Log that the owner has no projects to hook."""
        log_info(
            self._logger,
            "[%s] owner=%s server_url=%s",
            ReconciliationEventType.OWNER_EMPTY,
            owner,
            server_url,
        )

    def log_project_empty(self, project: str) -> None:
        """Log that a project has no content yet."""
        log_info(
            self._logger,
            "[%s] project=%s",
            ReconciliationEventType.PROJECT_EMPTY,
            project,
        )

    def log_tree_unavailable(self, project: str, error: BaseException) -> None:
        """Log that the repository tree could not be read."""
        log_warning(
            self._logger,
            "[%s] project=%s error_type=%s error_message=%s",
            ReconciliationEventType.TREE_UNAVAILABLE,
            project,
            type(error).__name__,
            error,
            exc_info=error,
        )

    def log_hook_present(self, project: str, hook_id: int) -> None:
        """Log that a matching hook already exists."""
        log_info(
            self._logger,
            "[%s] project=%s hook_id=%d",
            ReconciliationEventType.HOOK_PRESENT,
            project,
            hook_id,
        )

    def log_hook_created(self, project: str, hook_id: int, url: str) -> None:
        """Log a newly created hook."""
        log_info(
            self._logger,
            "[%s] project=%s hook_id=%d url=%s",
            ReconciliationEventType.HOOK_CREATED,
            project,
            hook_id,
            url,
        )

    def log_hook_failed(self, project: str, error: BaseException) -> None:
        """Log a per-project failure that did not stop the run."""
        log_warning(
            self._logger,
            "[%s] project=%s error_type=%s error_message=%s",
            ReconciliationEventType.HOOK_FAILED,
            project,
            type(error).__name__,
            error,
            exc_info=error,
        )

    def log_reconcile_failed(
        self, subject: str, server_url: str, error: BaseException
    ) -> None:
        """Log a failure that abandoned the whole invocation."""
        log_warning(
            self._logger,
            "[%s] subject=%s server_url=%s error_type=%s error_message=%s",
            ReconciliationEventType.RECONCILE_FAILED,
            subject,
            server_url,
            type(error).__name__,
            error,
            exc_info=error,
        )

    def log_reconcile_completed(
        self, subject: str, created: int, present: int, failed: int
    ) -> None:
        """Log the per-project tally of a finished invocation."""
        log_info(
            self._logger,
            "[%s] subject=%s hooks_created=%d hooks_present=%d failures=%d",
            ReconciliationEventType.RECONCILE_COMPLETED,
            subject,
            created,
            present,
            failed,
        )
