"""Command line for reconciling GitLab webhooks on an owner or a project."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .config import (
    CONFIG_PATH_ENV,
    ConfigError,
    PersonalAccessToken,
    ServerRegistry,
    load_config,
    resolve_root_url,
)
from .hooks import (
    OwnerScope,
    ProjectScope,
    ReconciliationReport,
    RegistrationMode,
    WebhookReconciler,
)
from .logging import configure_logging, get_logger, log_warning

logger = get_logger(__name__)

_DEFAULT_CONFIG = "hookwarden.yaml"
_EXIT_FAILED = 1
_EXIT_CONFIG = 2


def _registration_mode(text: str) -> RegistrationMode:
    mode = RegistrationMode.parse(text)
    if mode is None:
        choices = ", ".join(m.value for m in RegistrationMode)
        msg = f"invalid mode {text!r} (choose from {choices})"
        raise argparse.ArgumentTypeError(msg)
    return mode


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hookwarden", description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(os.environ.get(CONFIG_PATH_ENV, _DEFAULT_CONFIG)),
        help="YAML configuration file (default: $HOOKWARDEN_CONFIG or "
        f"{_DEFAULT_CONFIG})",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("HOOKWARDEN_LOG_LEVEL", "INFO"),
        help="femtologging level (default: $HOOKWARDEN_LOG_LEVEL or INFO)",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    owner = subcommands.add_parser("owner", help="reconcile every project of an owner")
    owner.add_argument("target", help="GitLab username or group path")
    project = subcommands.add_parser("project", help="reconcile a single project")
    project.add_argument("target", help="project path, e.g. acme/api")

    for sub in (owner, project):
        sub.add_argument("--server", required=True, help="configured server name")
        sub.add_argument(
            "--mode",
            type=_registration_mode,
            default=RegistrationMode.SYSTEM,
            help="registration mode: disable, system, or item (default: system)",
        )
        sub.add_argument(
            "--token-env",
            default=None,
            help="environment variable holding the token used in item mode",
        )
    return parser


def _summarise(report: ReconciliationReport) -> str:
    return (
        f"{report.subject} on {report.server_name}: {report.status} "
        f"(created={report.hooks_created} present={report.hooks_present} "
        f"failed={report.failures})"
    )


def main(argv: list[str] | None = None) -> int:
    """Run one reconciliation and return the process exit code.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        0 on success or a silent skip, 1 when reconciliation failed, 2 when
        the configuration file is unusable.

    """
    args = _build_parser().parse_args(argv)

    level, invalid_level = configure_logging(args.log_level)
    if invalid_level:
        log_warning(logger, "Invalid log level %r, using %s", args.log_level, level)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Configuration {args.config} is invalid:", file=sys.stderr)
        for issue in exc.issues:
            print(f"  - {issue}", file=sys.stderr)
        return _EXIT_CONFIG

    mode: RegistrationMode = args.mode
    token_env: str | None = args.token_env

    def item_credentials() -> PersonalAccessToken | None:
        return PersonalAccessToken.from_env(token_env) if token_env else None

    registry = ServerRegistry(config.servers)
    if not registry:
        log_warning(logger, "No GitLab servers configured in %s", args.config)

    reconciler = WebhookReconciler(registry, root_url=resolve_root_url(config))
    if args.command == "owner":
        report = reconciler.reconcile_owner(
            OwnerScope(args.server, args.target, item_credentials), mode
        )
    else:
        report = reconciler.reconcile_project(
            ProjectScope(args.server, args.target, item_credentials), mode
        )

    print(_summarise(report))
    return 0 if report.succeeded else _EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
