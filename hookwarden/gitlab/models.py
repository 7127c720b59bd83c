"""Typed GitLab REST payloads used by hook reconciliation.

Only the fields reconciliation reads are declared; msgspec ignores the rest
of each payload.
"""

from __future__ import annotations

import msgspec

GROUP_NAMESPACE_KIND = "group"


class Namespace(msgspec.Struct, kw_only=True, frozen=True):
    """Namespace a project lives in.

    Attributes
    ----------
    kind : str
        ``"user"`` for personal namespaces, ``"group"`` for groups.
    full_path : str
        Namespace path, e.g. ``acme/platform``.

    """

    kind: str
    full_path: str = ""


class Project(msgspec.Struct, kw_only=True, frozen=True):
    """GitLab project reference."""

    id: int
    path_with_namespace: str
    namespace: Namespace

    @property
    def in_group_namespace(self) -> bool:
        """Return True when the project lives under a group namespace."""
        return self.namespace.kind == GROUP_NAMESPACE_KIND


class ProjectHook(msgspec.Struct, kw_only=True, frozen=True):
    """Webhook registered on a project."""

    id: int
    url: str
    push_events: bool = False
    merge_requests_events: bool = False
    tag_push_events: bool = False
    enable_ssl_verification: bool = True


class GitLabUser(msgspec.Struct, kw_only=True, frozen=True):
    """Individual GitLab account returned by the users API."""

    id: int
    username: str
    name: str = ""


class TreeEntry(msgspec.Struct, kw_only=True, frozen=True):
    """Single entry of a repository tree listing."""

    id: str
    name: str
    type: str
    path: str
