"""Inputs and results of hook reconciliation."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from .policy import CredentialLookup


@dataclasses.dataclass(frozen=True, slots=True)
class OwnerScope:
    """An individual account or group whose projects should carry the hook."""

    server_name: str
    owner: str
    credentials: CredentialLookup | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ProjectScope:
    """A single project that should carry the hook."""

    server_name: str
    project_path: str
    credentials: CredentialLookup | None = None


class ReconciliationStatus(enum.StrEnum):
    """How a reconciliation invocation ended."""

    COMPLETED = "completed"
    NO_SERVER = "no_server"
    DISABLED = "disabled"
    NO_TARGET_URL = "no_target_url"
    EMPTY_OWNER = "empty_owner"
    EMPTY_PROJECT = "empty_project"
    TREE_UNAVAILABLE = "tree_unavailable"
    FAILED = "failed"


class HookOutcome(enum.StrEnum):
    """What happened to one project's hook."""

    CREATED = "created"
    PRESENT = "present"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True, slots=True)
class ProjectHookResult:
    """Outcome for a single project."""

    project: str
    outcome: HookOutcome
    hook_id: int | None = None
    error: str | None = None


@dataclasses.dataclass(slots=True)
class ReconciliationReport:
    """Summary of one reconciliation invocation.

    Callers are free to ignore it; everything it records is also logged.
    """

    subject: str
    server_name: str
    status: ReconciliationStatus = ReconciliationStatus.COMPLETED
    target_url: str = ""
    results: list[ProjectHookResult] = dataclasses.field(default_factory=list)

    def _count(self, outcome: HookOutcome) -> int:
        return sum(1 for result in self.results if result.outcome is outcome)

    @property
    def hooks_created(self) -> int:
        """Return how many hooks this invocation created."""
        return self._count(HookOutcome.CREATED)

    @property
    def hooks_present(self) -> int:
        """Return how many projects already had the hook."""
        return self._count(HookOutcome.PRESENT)

    @property
    def failures(self) -> int:
        """Return how many projects failed."""
        return self._count(HookOutcome.FAILED)

    @property
    def succeeded(self) -> bool:
        """Return False when the run or any project failed."""
        return self.status is not ReconciliationStatus.FAILED and not self.failures
