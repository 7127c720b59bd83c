"""Unit tests for the hook inspector."""

from __future__ import annotations

from hookwarden.hooks import find_matching_hook
from tests.helpers.gitlab_fakes import TARGET_URL, FakeGitLab, make_project


def test_returns_hook_with_exact_url(gitlab: FakeGitLab) -> None:
    """The first hook whose URL equals the target is returned."""
    project = gitlab.add_project(make_project(1, "acme/api"))
    gitlab.add_existing_hook(project, "https://other.example.org/hook")
    expected = gitlab.add_existing_hook(project, TARGET_URL)
    gitlab.add_existing_hook(project, TARGET_URL)

    assert find_matching_hook(gitlab, project, TARGET_URL) == expected


def test_returns_none_without_match(gitlab: FakeGitLab) -> None:
    """Absence is reported as None."""
    project = gitlab.add_project(make_project(1, "acme/api"))
    gitlab.add_existing_hook(project, "https://other.example.org/hook")

    assert find_matching_hook(gitlab, project, TARGET_URL) is None


def test_trailing_slash_is_not_a_match(gitlab: FakeGitLab) -> None:
    """URLs are compared without normalisation."""
    project = gitlab.add_project(make_project(1, "acme/api"))
    gitlab.add_existing_hook(project, f"{TARGET_URL}/")
    gitlab.add_existing_hook(project, TARGET_URL.upper())

    assert find_matching_hook(gitlab, project, TARGET_URL) is None


def test_performs_single_read(gitlab: FakeGitLab) -> None:
    """Inspection lists hooks once and never writes."""
    project = gitlab.add_project(make_project(1, "acme/api"))

    find_matching_hook(gitlab, project, TARGET_URL)

    assert gitlab.calls == ["project_hooks:acme/api"]
