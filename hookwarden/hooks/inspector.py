"""Lookup of an existing hook pointing at the target URL."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from hookwarden.gitlab import GitLabProjectsClient, Project, ProjectHook


def find_matching_hook(
    client: GitLabProjectsClient, project: Project, target_url: str
) -> ProjectHook | None:
    """Return the first hook on ``project`` whose URL equals ``target_url``.

    URLs are compared verbatim: ``https://ci/post`` and ``https://ci/post/``
    are different hooks.
    """
    return next(
        (hook for hook in client.project_hooks(project) if hook.url == target_url),
        None,
    )
