"""Webhook reconciliation for GitLab owners and projects.

The package ensures every project of a configured owner (or a single
project) carries a hook posting push, merge request, and tag events to the
automation server.

Usage
-----
Build a reconciler from configuration and reconcile a group::

    from hookwarden.config import ServerRegistry, load_config, resolve_root_url
    from hookwarden.hooks import OwnerScope, RegistrationMode, WebhookReconciler

    config = load_config("hookwarden.yaml")
    reconciler = WebhookReconciler(
        ServerRegistry(config.servers),
        root_url=resolve_root_url(config),
    )
    reconciler.reconcile_owner(
        OwnerScope(server_name="gitlab.com", owner="acme"),
        RegistrationMode.SYSTEM,
    )

"""

from __future__ import annotations

from .inspector import find_matching_hook
from .models import (
    HookOutcome,
    OwnerScope,
    ProjectHookResult,
    ProjectScope,
    ReconciliationReport,
    ReconciliationStatus,
)
from .observability import ReconciliationEventLogger, ReconciliationEventType
from .owner import OwnerKind, list_owner_projects, resolve_owner_kind
from .policy import CredentialLookup, RegistrationMode, select_credential
from .reconciler import ClientFactory, WebhookReconciler, rest_client_factory
from .specification import DEFAULT_HOOK_SPECIFICATION, HookSpecification
from .target import build_target_url

__all__ = [
    "DEFAULT_HOOK_SPECIFICATION",
    "ClientFactory",
    "CredentialLookup",
    "HookOutcome",
    "HookSpecification",
    "OwnerKind",
    "OwnerScope",
    "ProjectHookResult",
    "ProjectScope",
    "ReconciliationEventLogger",
    "ReconciliationEventType",
    "ReconciliationReport",
    "ReconciliationStatus",
    "RegistrationMode",
    "WebhookReconciler",
    "build_target_url",
    "find_matching_hook",
    "list_owner_projects",
    "resolve_owner_kind",
    "select_credential",
]
