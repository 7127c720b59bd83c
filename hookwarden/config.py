"""Server registry and automation-server settings.

Configuration lives in a YAML 1.2 file::

    root_url: https://ci.example.org/
    servers:
      - name: gitlab.com
        server_url: https://gitlab.com
        manage_hooks: true
        token_env: GITLAB_TOKEN

Tokens are never stored in the file. ``token_env`` names the environment
variable holding the system-managed access token, read when a reconciliation
asks for it.

Environment variables:

- ``HOOKWARDEN_CONFIG``: default configuration path for the CLI
- ``HOOKWARDEN_ROOT_URL``: overrides ``root_url`` from the file
"""

from __future__ import annotations

import dataclasses
import os
import typing as typ
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

YAML_VERSION = (1, 2)
CONFIG_PATH_ENV = "HOOKWARDEN_CONFIG"
ROOT_URL_ENV = "HOOKWARDEN_ROOT_URL"


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""

    def __init__(self, issues: list[str]) -> None:
        """Initialise with the list of problems found."""
        self.issues = issues
        super().__init__("; ".join(issues))


@dataclasses.dataclass(frozen=True, slots=True)
class PersonalAccessToken:
    """GitLab access token; the secret is kept out of reprs."""

    secret: str = dataclasses.field(repr=False)

    @classmethod
    def from_env(cls, variable: str) -> PersonalAccessToken | None:
        """Read a token from ``variable``, treating blank values as absent."""
        value = os.environ.get(variable, "").strip()
        return cls(secret=value) if value else None


class ServerConfig(msgspec.Struct, kw_only=True, frozen=True):
    """A GitLab server hooks may be managed on.

    Attributes
    ----------
    name : str
        Identifier referenced by owner and project scopes.
    server_url : str
        Base URL of the GitLab instance.
    manage_hooks : bool
        Whether system-managed registration may use this server's token.
    token_env : str, optional
        Environment variable holding the system access token.

    """

    name: str
    server_url: str = "https://gitlab.com"
    manage_hooks: bool = False
    token_env: str | None = None

    def credentials(self) -> PersonalAccessToken | None:
        """Return the system-managed token, if one is configured and set."""
        if not self.token_env:
            return None
        return PersonalAccessToken.from_env(self.token_env)


class HookwardenConfig(msgspec.Struct, kw_only=True, frozen=True):
    """Top-level configuration document."""

    root_url: str | None = None
    servers: list[ServerConfig] = msgspec.field(default_factory=list)


class ServerLookup(typ.Protocol):
    """Resolves server configuration by name."""

    def find_server(self, name: str) -> ServerConfig | None:
        """Return the server called ``name``, or ``None``."""
        ...


class ServerRegistry:
    """In-memory :class:`ServerLookup` over configured servers."""

    def __init__(self, servers: typ.Iterable[ServerConfig] = ()) -> None:
        """Index servers by name."""
        self._servers = {server.name: server for server in servers}

    def find_server(self, name: str) -> ServerConfig | None:
        """Return the server called ``name``, or ``None``."""
        return self._servers.get(name)

    def __len__(self) -> int:
        """Return the number of configured servers."""
        return len(self._servers)


def validate_config(config: HookwardenConfig) -> HookwardenConfig:
    """Return ``config`` unchanged or raise ``ConfigError`` listing problems."""
    issues: list[str] = []
    seen: set[str] = set()
    for index, server in enumerate(config.servers):
        if not server.name.strip():
            issues.append(f"servers[{index}]: name must be non-empty")
        elif server.name in seen:
            issues.append(f"servers[{index}]: duplicate server name {server.name!r}")
        seen.add(server.name)
        if not server.server_url.startswith(("http://", "https://")):
            issues.append(
                f"servers[{index}]: server_url must be http(s), "
                f"got {server.server_url!r}"
            )
    if issues:
        raise ConfigError(issues)
    return config


def load_config(path: Path | str) -> HookwardenConfig:
    """Parse and validate a YAML configuration file."""
    path_obj = Path(path)
    try:
        loaded = _yaml().load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        raise ConfigError([f"failed to read {path_obj}: {exc}"]) from exc

    if loaded is None:
        loaded = {}

    try:
        config = msgspec.convert(loaded, type=HookwardenConfig)
    except msgspec.ValidationError as exc:
        raise ConfigError([f"schema validation failed: {exc}"]) from exc

    return validate_config(config)


def resolve_root_url(config: HookwardenConfig) -> str | None:
    """Return the automation server URL, preferring ``HOOKWARDEN_ROOT_URL``."""
    override = os.environ.get(ROOT_URL_ENV)
    if override is not None and override.strip():
        return override.strip()
    return config.root_url


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
