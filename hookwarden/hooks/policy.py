"""Registration mode gate deciding whether and how hooks are managed."""

from __future__ import annotations

import collections.abc as cabc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from hookwarden.config import PersonalAccessToken, ServerConfig

type CredentialLookup = cabc.Callable[[], PersonalAccessToken | None]


class RegistrationMode(enum.StrEnum):
    """Who is allowed to register hooks, and with which credential."""

    DISABLE = "disable"
    SYSTEM = "system"
    ITEM = "item"

    @classmethod
    def parse(cls, value: str | None) -> RegistrationMode | None:
        """Return the mode named by ``value``; unknown text yields ``None``."""
        if value is None:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


def select_credential(
    mode: RegistrationMode | str | None,
    server: ServerConfig,
    item_credentials: CredentialLookup | None = None,
) -> PersonalAccessToken | None:
    """Return the token reconciliation should use, or ``None`` to stop.

    Parameters
    ----------
    mode
        Requested registration mode. Anything that is not a known mode is
        treated as disabled.
    server
        Configuration of the GitLab server being reconciled.
    item_credentials
        Lookup for the owner- or project-level token, only consulted in
        ``item`` mode.

    Returns
    -------
    PersonalAccessToken | None
        The token to authenticate with, or ``None`` when no remote call may
        be made.

    """
    if mode == RegistrationMode.SYSTEM:
        return server.credentials() if server.manage_hooks else None
    if mode == RegistrationMode.ITEM:
        return item_credentials() if item_credentials is not None else None
    return None
