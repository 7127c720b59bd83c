"""Behavioural tests for GitLab webhook reconciliation."""

from __future__ import annotations

import typing as typ

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from hookwarden.hooks import (
    HookOutcome,
    OwnerScope,
    ProjectScope,
    ReconciliationReport,
    WebhookReconciler,
)
from tests.helpers.gitlab_fakes import (
    SERVER_NAME,
    TARGET_URL,
    FakeGitLab,
    make_project,
    server_error,
)

if typ.TYPE_CHECKING:
    from hookwarden.gitlab import Project


class ReconciliationContext(typ.TypedDict, total=False):
    """Shared state used by reconciliation BDD steps."""

    projects: dict[str, Project]
    report: ReconciliationReport


@scenario(
    "../webhook_reconciliation.feature",
    "Group projects receive the automation server hook",
)
def test_group_projects_receive_hook() -> None:
    """Behavioural test: missing hooks are added across a group."""


@scenario(
    "../webhook_reconciliation.feature",
    "Reconciling twice does not duplicate hooks",
)
def test_reconciling_twice_is_idempotent() -> None:
    """Behavioural test: a second run finds its own hooks."""


@scenario(
    "../webhook_reconciliation.feature",
    "Individual owners only reconcile personally namespaced projects",
)
def test_individual_owner_skips_group_projects() -> None:
    """Behavioural test: group-namespaced projects are filtered out."""


@scenario(
    "../webhook_reconciliation.feature",
    "Empty projects are left without hooks",
)
def test_empty_projects_are_skipped() -> None:
    """Behavioural test: repositories without commits get no hook."""


@scenario(
    "../webhook_reconciliation.feature",
    "Disabled registration never contacts GitLab",
)
def test_disabled_registration() -> None:
    """Behavioural test: disable mode performs no remote calls."""


@scenario(
    "../webhook_reconciliation.feature",
    "One failing project does not stop the others",
)
def test_failures_are_isolated() -> None:
    """Behavioural test: per-project failures are recorded and skipped."""


@pytest.fixture
def reconciliation_context() -> ReconciliationContext:
    """Return fresh scenario state."""
    return {"projects": {}}


def _register(context: ReconciliationContext, project: Project) -> None:
    context["projects"][project.path_with_namespace] = project


@given(parsers.parse('the group "{group}" owns projects "{first}" and "{second}"'))
def group_owns_projects(
    reconciliation_context: ReconciliationContext,
    gitlab: FakeGitLab,
    group: str,
    first: str,
    second: str,
) -> None:
    """Register two projects under a group."""
    for project_id, path in enumerate((first, second), start=1):
        project = gitlab.add_project(make_project(project_id, path), group=group)
        _register(reconciliation_context, project)


@given(parsers.parse('the user "{user}" owns the personal project "{path}"'))
def user_owns_personal_project(
    reconciliation_context: ReconciliationContext,
    gitlab: FakeGitLab,
    user: str,
    path: str,
) -> None:
    """Register an individual with a project in their own namespace."""
    gitlab.users.add(user)
    project = gitlab.add_project(make_project(10, path, kind="user"))
    gitlab.owned.append(project)
    _register(reconciliation_context, project)


@given(parsers.parse('the user "{user}" also owns the group project "{path}"'))
def user_owns_group_project(
    reconciliation_context: ReconciliationContext,
    gitlab: FakeGitLab,
    user: str,
    path: str,
) -> None:
    """Add a group-namespaced project to the user's owned listing."""
    del user
    project = gitlab.add_project(make_project(11, path, kind="group"))
    gitlab.owned.append(project)
    _register(reconciliation_context, project)


@given(parsers.parse('the project "{path}" already has the automation server hook'))
def project_already_hooked(
    reconciliation_context: ReconciliationContext, gitlab: FakeGitLab, path: str
) -> None:
    """Attach the target hook before reconciliation."""
    gitlab.add_existing_hook(reconciliation_context["projects"][path], TARGET_URL)


@given(parsers.parse('the repository of "{path}" has no commits'))
def repository_has_no_commits(
    reconciliation_context: ReconciliationContext, gitlab: FakeGitLab, path: str
) -> None:
    """Make the repository tree listing come back empty."""
    gitlab.trees[reconciliation_context["projects"][path].id] = []


@given(parsers.parse('creating a hook on "{path}" fails'))
def hook_creation_fails(
    reconciliation_context: ReconciliationContext, gitlab: FakeGitLab, path: str
) -> None:
    """Make GitLab reject hook creation for one project."""
    gitlab.add_hook_errors[reconciliation_context["projects"][path].id] = (
        server_error()
    )


@when(parsers.parse('hooks are reconciled for owner "{owner}" in "{mode}" mode'))
def reconcile_owner(
    reconciliation_context: ReconciliationContext,
    reconciler: WebhookReconciler,
    owner: str,
    mode: str,
) -> None:
    """Run owner-level reconciliation."""
    reconciliation_context["report"] = reconciler.reconcile_owner(
        OwnerScope(server_name=SERVER_NAME, owner=owner), mode
    )


@when(parsers.parse('hooks are reconciled for project "{path}" in "{mode}" mode'))
def reconcile_project(
    reconciliation_context: ReconciliationContext,
    reconciler: WebhookReconciler,
    path: str,
    mode: str,
) -> None:
    """Run project-level reconciliation."""
    reconciliation_context["report"] = reconciler.reconcile_project(
        ProjectScope(server_name=SERVER_NAME, project_path=path), mode
    )


@then(parsers.parse('the reconciliation status is "{status}"'))
def reconciliation_status_is(
    reconciliation_context: ReconciliationContext, status: str
) -> None:
    """Check the report status."""
    assert reconciliation_context["report"].status == status


@then(parsers.parse('a hook is created on "{path}" only'))
def hook_created_on_only(gitlab: FakeGitLab, path: str) -> None:
    """Check exactly one project received a new hook."""
    assert [added.project for added in gitlab.added] == [path]
    assert gitlab.added[0].url == TARGET_URL


@then("every created hook posts push, merge request, and tag events")
def created_hooks_post_events(gitlab: FakeGitLab) -> None:
    """Check the event flags of created hooks."""
    for added in gitlab.added:
        spec = added.spec
        assert (spec.push_events, spec.merge_requests_events, spec.tag_push_events) == (
            True,
            True,
            True,
        )
        assert spec.enable_ssl_verification is False


@then("each project has exactly one automation server hook")
def exactly_one_hook_each(
    reconciliation_context: ReconciliationContext, gitlab: FakeGitLab
) -> None:
    """Check no hooks were duplicated."""
    for project in reconciliation_context["projects"].values():
        urls = [hook.url for hook in gitlab.hooks_for(project)]
        assert urls == [TARGET_URL]


@then("no hooks are created")
def no_hooks_created(gitlab: FakeGitLab) -> None:
    """Check nothing was written to GitLab."""
    assert gitlab.added == []


@then("GitLab was not contacted")
def gitlab_not_contacted(gitlab: FakeGitLab) -> None:
    """Check no session was opened."""
    assert gitlab.calls == []
    assert gitlab.sessions_opened == 0


@then(parsers.parse('the report lists "{path}" as failed'))
def report_lists_failure(
    reconciliation_context: ReconciliationContext, path: str
) -> None:
    """Check the failed project is recorded in the report."""
    failed = [
        result.project
        for result in reconciliation_context["report"].results
        if result.outcome is HookOutcome.FAILED
    ]
    assert failed == [path]
