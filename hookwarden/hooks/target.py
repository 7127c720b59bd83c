"""Callback URL GitLab hooks should post to."""

from __future__ import annotations

from urllib.parse import quote

WEBHOOK_SEGMENT = "gitlab-webhook"
WEBHOOK_SUBSEGMENT = "/post"
_LOCALHOST_PREFIX = "http://localhost:"


def build_target_url(base_url: str | None) -> str:
    """Return the webhook receiver URL under ``base_url``.

    An empty string means the automation server has no address GitLab could
    deliver to (unset or a local ``http://localhost:`` URL) and
    reconciliation must not run.

    >>> build_target_url("https://ci.example.org")
    'https://ci.example.org/gitlab-webhook/post'
    >>> build_target_url("http://localhost:8080/")
    ''

    """
    base = (base_url or "").strip()
    if not base or base.startswith(_LOCALHOST_PREFIX):
        return ""

    literal = quote(WEBHOOK_SEGMENT, safe="/") + quote(WEBHOOK_SUBSEGMENT, safe="/")
    return f"{base.rstrip('/')}/{literal}"
