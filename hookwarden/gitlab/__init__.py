"""GitLab REST client, payload models, and errors."""

from __future__ import annotations

from .client import (
    GitLabClientConfig,
    GitLabProjectsClient,
    GitLabRestClient,
    GitLabSession,
)
from .errors import (
    GitLabAPIError,
    GitLabConfigError,
    GitLabError,
    GitLabNotFoundError,
    GitLabResponseShapeError,
    GitLabTransportError,
)
from .models import GitLabUser, Namespace, Project, ProjectHook, TreeEntry

__all__ = [
    "GitLabAPIError",
    "GitLabClientConfig",
    "GitLabConfigError",
    "GitLabError",
    "GitLabNotFoundError",
    "GitLabProjectsClient",
    "GitLabResponseShapeError",
    "GitLabRestClient",
    "GitLabSession",
    "GitLabTransportError",
    "GitLabUser",
    "Namespace",
    "Project",
    "ProjectHook",
    "TreeEntry",
]
