"""Hook reconciliation for GitLab owners and projects.

GitLab has no API for group-level hooks on every tier, so the reconciler
walks the projects of an owner and makes sure each one carries a hook
posting to the automation server. Existing hooks are never modified; a hook
is only created where no hook with the exact target URL exists.

Usage
-----
Reconcile every project of a group with the system token::

    reconciler = WebhookReconciler(registry, root_url="https://ci.example.org/")
    report = reconciler.reconcile_owner(
        OwnerScope(server_name="gitlab.com", owner="acme"),
        RegistrationMode.SYSTEM,
    )
    print(report.hooks_created)

"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from hookwarden.gitlab import (
    GitLabClientConfig,
    GitLabError,
    GitLabNotFoundError,
    GitLabRestClient,
)

from .inspector import find_matching_hook
from .models import (
    HookOutcome,
    OwnerScope,
    ProjectHookResult,
    ProjectScope,
    ReconciliationReport,
    ReconciliationStatus,
)
from .observability import ReconciliationEventLogger
from .owner import list_owner_projects, resolve_owner_kind
from .policy import select_credential
from .specification import DEFAULT_HOOK_SPECIFICATION, HookSpecification
from .target import build_target_url

if typ.TYPE_CHECKING:
    from hookwarden.config import PersonalAccessToken, ServerConfig, ServerLookup
    from hookwarden.gitlab import GitLabProjectsClient, GitLabSession, Project

    from .policy import CredentialLookup, RegistrationMode

type ClientFactory = cabc.Callable[[ServerConfig, PersonalAccessToken], GitLabSession]


def rest_client_factory(
    server: ServerConfig, token: PersonalAccessToken
) -> GitLabRestClient:
    """Open a REST client session against ``server``."""
    return GitLabRestClient(
        GitLabClientConfig(server_url=server.server_url, token=token.secret)
    )


class _Prepared(typ.NamedTuple):
    server: ServerConfig
    token: PersonalAccessToken
    target_url: str


class WebhookReconciler:
    """Ensure GitLab projects carry a hook pointing at the automation server.

    Parameters
    ----------
    servers
        Lookup resolving server names to configuration.
    root_url
        Public base URL of the automation server.
    client_factory
        Opens one GitLab session per invocation. Defaults to
        :func:`rest_client_factory`.
    hook_spec
        Settings for created hooks.
    event_logger
        Destination for structured reconciliation events.

    """

    def __init__(
        self,
        servers: ServerLookup,
        *,
        root_url: str | None,
        client_factory: ClientFactory = rest_client_factory,
        hook_spec: HookSpecification = DEFAULT_HOOK_SPECIFICATION,
        event_logger: ReconciliationEventLogger | None = None,
    ) -> None:
        """Configure the reconciler's collaborators."""
        self._servers = servers
        self._root_url = root_url
        self._client_factory = client_factory
        self._hook_spec = hook_spec
        self._events = event_logger or ReconciliationEventLogger()

    def reconcile_owner(
        self, scope: OwnerScope, mode: RegistrationMode | str | None
    ) -> ReconciliationReport:
        """Create missing hooks on every project of an individual or group.

        A failure on one project is recorded in the report and the remaining
        projects are still processed. Failures while resolving the owner or
        listing its projects abandon the invocation.
        """
        report = ReconciliationReport(subject=scope.owner, server_name=scope.server_name)
        prepared = self._prepare(report, mode, scope.credentials)
        if prepared is None:
            return report

        try:
            with self._client_factory(prepared.server, prepared.token) as client:
                self._reconcile_owner_projects(client, scope.owner, prepared, report)
        except GitLabError as exc:
            report.status = ReconciliationStatus.FAILED
            self._events.log_reconcile_failed(
                scope.owner, prepared.server.server_url, exc
            )
            return report

        self._finish(report)
        return report

    def reconcile_project(
        self, scope: ProjectScope, mode: RegistrationMode | str | None
    ) -> ReconciliationReport:
        """Create the hook on a single project unless it is empty or hooked."""
        report = ReconciliationReport(
            subject=scope.project_path, server_name=scope.server_name
        )
        prepared = self._prepare(report, mode, scope.credentials)
        if prepared is None:
            return report

        try:
            with self._client_factory(prepared.server, prepared.token) as client:
                project = client.get_project(scope.project_path)
                if self._has_content(client, project, report):
                    report.results.append(
                        self._ensure_hook(client, project, prepared.target_url)
                    )
        except GitLabError as exc:
            report.status = ReconciliationStatus.FAILED
            self._events.log_reconcile_failed(
                scope.project_path, prepared.server.server_url, exc
            )
            return report

        self._finish(report)
        return report

    def _prepare(
        self,
        report: ReconciliationReport,
        mode: RegistrationMode | str | None,
        item_credentials: CredentialLookup | None,
    ) -> _Prepared | None:
        """Resolve server, credential, and target URL without remote calls."""
        server = self._servers.find_server(report.server_name)
        if server is None:
            return self._skip(report, ReconciliationStatus.NO_SERVER)

        token = select_credential(mode, server, item_credentials)
        if token is None:
            return self._skip(report, ReconciliationStatus.DISABLED)

        target_url = build_target_url(self._root_url)
        if not target_url:
            return self._skip(report, ReconciliationStatus.NO_TARGET_URL)

        report.target_url = target_url
        return _Prepared(server=server, token=token, target_url=target_url)

    def _skip(self, report: ReconciliationReport, status: ReconciliationStatus) -> None:
        report.status = status
        self._events.log_skipped(report.subject, status)

    def _reconcile_owner_projects(
        self,
        client: GitLabProjectsClient,
        owner: str,
        prepared: _Prepared,
        report: ReconciliationReport,
    ) -> None:
        kind = resolve_owner_kind(client, owner)
        projects = list_owner_projects(client, owner, kind)
        self._events.log_owner_resolved(owner, kind, len(projects))
        if not projects:
            report.status = ReconciliationStatus.EMPTY_OWNER
            self._events.log_owner_empty(owner, prepared.server.server_url)
            return

        for project in projects:
            try:
                result = self._ensure_hook(client, project, prepared.target_url)
            except GitLabError as exc:
                self._events.log_hook_failed(project.path_with_namespace, exc)
                result = ProjectHookResult(
                    project=project.path_with_namespace,
                    outcome=HookOutcome.FAILED,
                    error=str(exc),
                )
            report.results.append(result)

    def _has_content(
        self,
        client: GitLabProjectsClient,
        project: Project,
        report: ReconciliationReport,
    ) -> bool:
        """Return False for empty repositories or unreadable trees.

        GitLab answers 404 for the tree of a repository without commits, so
        not-found and an empty listing both mean "empty". Any other error is
        reported separately.
        """
        try:
            tree = client.repository_tree(project)
        except GitLabNotFoundError:
            tree = []
        except GitLabError as exc:
            report.status = ReconciliationStatus.TREE_UNAVAILABLE
            self._events.log_tree_unavailable(project.path_with_namespace, exc)
            return False

        if not tree:
            report.status = ReconciliationStatus.EMPTY_PROJECT
            self._events.log_project_empty(project.path_with_namespace)
            return False
        return True

    def _ensure_hook(
        self, client: GitLabProjectsClient, project: Project, target_url: str
    ) -> ProjectHookResult:
        path = project.path_with_namespace
        existing = find_matching_hook(client, project, target_url)
        if existing is not None:
            self._events.log_hook_present(path, existing.id)
            return ProjectHookResult(
                project=path, outcome=HookOutcome.PRESENT, hook_id=existing.id
            )

        created = client.add_hook(project, target_url, self._hook_spec)
        self._events.log_hook_created(path, created.id, target_url)
        return ProjectHookResult(
            project=path, outcome=HookOutcome.CREATED, hook_id=created.id
        )

    def _finish(self, report: ReconciliationReport) -> None:
        if report.status is ReconciliationStatus.COMPLETED:
            self._events.log_reconcile_completed(
                report.subject,
                report.hooks_created,
                report.hooks_present,
                report.failures,
            )
