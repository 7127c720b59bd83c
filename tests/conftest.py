"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from hookwarden.hooks import ReconciliationEventLogger, WebhookReconciler
from tests.helpers.fake_logger import FakeLogger
from tests.helpers.gitlab_fakes import ROOT_URL, TOKEN_ENV, FakeGitLab, make_registry

SYSTEM_TOKEN = "glpat-system-token"


def _export_system_token(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv(TOKEN_ENV, SYSTEM_TOKEN)
    return SYSTEM_TOKEN


@pytest.fixture
def system_token(monkeypatch: pytest.MonkeyPatch) -> str:
    """Expose the system-managed token through the configured variable."""
    return _export_system_token(monkeypatch)


@pytest.fixture
def gitlab() -> FakeGitLab:
    """Return an empty fake GitLab instance."""
    return FakeGitLab()


@pytest.fixture
def fake_logger() -> FakeLogger:
    """Return a logger double capturing reconciliation events."""
    return FakeLogger()


@pytest.fixture
def reconciler(
    gitlab: FakeGitLab, fake_logger: FakeLogger, monkeypatch: pytest.MonkeyPatch
) -> WebhookReconciler:
    """Return a reconciler wired to the fake GitLab with hooks managed."""
    _export_system_token(monkeypatch)
    return WebhookReconciler(
        make_registry(manage_hooks=True),
        root_url=ROOT_URL,
        client_factory=gitlab.factory,
        event_logger=ReconciliationEventLogger(fake_logger),
    )
