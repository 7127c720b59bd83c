"""GitLab REST client used by hook reconciliation."""

from __future__ import annotations

import dataclasses
import typing as typ
from urllib.parse import quote

import httpx
import msgspec

from .errors import (
    GitLabAPIError,
    GitLabConfigError,
    GitLabResponseShapeError,
    GitLabTransportError,
)
from .models import GitLabUser, Project, ProjectHook, TreeEntry

if typ.TYPE_CHECKING:
    import types

    from hookwarden.hooks.specification import HookSpecification

_HTTP_ERROR_STATUS_THRESHOLD = 400
_PER_PAGE = 100
_NEXT_PAGE_HEADER = "X-Next-Page"


class GitLabProjectsClient(typ.Protocol):
    """Capabilities hook reconciliation needs from a GitLab instance."""

    def find_user(self, username: str) -> GitLabUser | None:
        """Return the individual account named ``username``, if any."""
        ...

    def owned_projects(self) -> list[Project]:
        """Return every project owned by the token holder."""
        ...

    def group_projects(self, group_path: str) -> list[Project]:
        """Return the projects directly under ``group_path``."""
        ...

    def get_project(self, path: str) -> Project:
        """Return the project at ``path`` or raise ``GitLabNotFoundError``."""
        ...

    def repository_tree(self, project: Project) -> list[TreeEntry]:
        """Return the top-level tree of the project's default branch."""
        ...

    def project_hooks(self, project: Project) -> list[ProjectHook]:
        """Return every hook registered on ``project``."""
        ...

    def add_hook(
        self, project: Project, url: str, spec: HookSpecification
    ) -> ProjectHook:
        """Register a hook on ``project`` posting to ``url``."""
        ...


class GitLabSession(GitLabProjectsClient, typ.Protocol):
    """Client scoped to a single reconciliation invocation."""

    def __enter__(self) -> GitLabSession: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None: ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitLabClientConfig:
    """Connection settings for a GitLab instance."""

    server_url: str
    token: str = dataclasses.field(repr=False)
    timeout_s: float = 20.0
    user_agent: str = "hookwarden/0.1"

    @property
    def api_url(self) -> str:
        """Return the REST v4 base URL."""
        return f"{self.server_url.rstrip('/')}/api/v4"


def _encode_path(path: str) -> str:
    """Encode a namespaced path as a single URL path parameter."""
    return quote(path.strip("/"), safe="")


class GitLabRestClient:
    """httpx implementation of :class:`GitLabProjectsClient`."""

    def __init__(
        self,
        config: GitLabClientConfig,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialise the client; an owned ``httpx.Client`` is built if needed."""
        if not config.token.strip():
            raise GitLabConfigError.empty_token()
        if not config.server_url.startswith(("http://", "https://")):
            raise GitLabConfigError.invalid_server_url(config.server_url)

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=config.timeout_s,
            headers={
                "PRIVATE-TOKEN": config.token,
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
        )

    def __enter__(self) -> GitLabRestClient:
        """Return the client for use in a ``with`` block."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Release the HTTP connection pool."""
        self.close()

    def close(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            self._client.close()

    def find_user(self, username: str) -> GitLabUser | None:
        """Probe the users API for an individual account."""
        users = self._get("/users", list[GitLabUser], params={"username": username})
        wanted = username.casefold()
        return next((user for user in users if user.username.casefold() == wanted), None)

    def owned_projects(self) -> list[Project]:
        """Return projects owned by the token holder, across all pages."""
        return self._paginate("/projects", Project, params={"owned": "true"})

    def group_projects(self, group_path: str) -> list[Project]:
        """Return projects directly under a group, across all pages."""
        return self._paginate(f"/groups/{_encode_path(group_path)}/projects", Project)

    def get_project(self, path: str) -> Project:
        """Fetch a project by its namespaced path."""
        return self._get(f"/projects/{_encode_path(path)}", Project)

    def repository_tree(self, project: Project) -> list[TreeEntry]:
        """Return the first page of the project's repository tree."""
        return self._get(f"/projects/{project.id}/repository/tree", list[TreeEntry])

    def project_hooks(self, project: Project) -> list[ProjectHook]:
        """Return hooks registered on a project, across all pages."""
        return self._paginate(f"/projects/{project.id}/hooks", ProjectHook)

    def add_hook(
        self, project: Project, url: str, spec: HookSpecification
    ) -> ProjectHook:
        """Create a project hook configured from ``spec``."""
        body: dict[str, typ.Any] = {
            "url": url,
            "push_events": spec.push_events,
            "merge_requests_events": spec.merge_requests_events,
            "tag_push_events": spec.tag_push_events,
            "enable_ssl_verification": spec.enable_ssl_verification,
        }
        if spec.secret_token:
            body["token"] = spec.secret_token
        response = self._request("POST", f"/projects/{project.id}/hooks", json=body)
        return _decode(response, ProjectHook, path=f"/projects/{project.id}/hooks")

    def _get[T](
        self,
        path: str,
        model: type[T],
        *,
        params: dict[str, str] | None = None,
    ) -> T:
        response = self._request("GET", path, params=params)
        return _decode(response, model, path=path)

    def _paginate[T](
        self,
        path: str,
        model: type[T],
        *,
        params: dict[str, str] | None = None,
    ) -> list[T]:
        """Follow ``X-Next-Page`` until GitLab reports no further pages."""
        items: list[T] = []
        page = "1"
        while page:
            query = {**(params or {}), "per_page": str(_PER_PAGE), "page": page}
            response = self._request("GET", path, params=query)
            items.extend(_decode(response, list[model], path=path))
            page = response.headers.get(_NEXT_PAGE_HEADER, "").strip()
        return items

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, typ.Any] | None = None,
    ) -> httpx.Response:
        try:
            response = self._client.request(
                method, f"{self._config.api_url}{path}", params=params, json=json
            )
        except httpx.TransportError as exc:
            raise GitLabTransportError.wrap(method, path, exc) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitLabAPIError.http_error(method, path, response.status_code)
        return response


def _decode[T](response: httpx.Response, model: type[T], *, path: str) -> T:
    try:
        return msgspec.json.decode(response.content, type=model)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise GitLabResponseShapeError.undecodable(path, exc) from exc
