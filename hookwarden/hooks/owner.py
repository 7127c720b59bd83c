"""Owner resolution and project discovery.

GitLab lists an individual's projects and a group's projects through
different endpoints, so an owner string is first classified by probing the
users API.
"""

from __future__ import annotations

import enum
import typing as typ

if typ.TYPE_CHECKING:
    from hookwarden.gitlab import GitLabProjectsClient, Project


class OwnerKind(enum.StrEnum):
    """Kind of account an owner string refers to."""

    INDIVIDUAL = "individual"
    GROUP = "group"


def resolve_owner_kind(client: GitLabProjectsClient, owner: str) -> OwnerKind:
    """Classify ``owner`` as an individual account or a group.

    Errors from the users API propagate to the caller.
    """
    if client.find_user(owner) is not None:
        return OwnerKind.INDIVIDUAL
    return OwnerKind.GROUP


def list_owner_projects(
    client: GitLabProjectsClient, owner: str, kind: OwnerKind
) -> list[Project]:
    """Return the projects hooks should be reconciled on for ``owner``.

    For individuals the owned-projects listing also contains projects the
    account owns inside group namespaces; those are left to the group.
    """
    match kind:
        case OwnerKind.INDIVIDUAL:
            return [
                project
                for project in client.owned_projects()
                if not project.in_group_namespace
            ]
        case OwnerKind.GROUP:
            return client.group_projects(owner)
        case _:
            typ.assert_never(kind)
