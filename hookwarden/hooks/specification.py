"""Settings applied to every hook hookwarden creates."""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True, slots=True)
class HookSpecification:
    """Events and delivery options for a created project hook.

    Attributes
    ----------
    push_events
        Deliver push events. Default: ``True``.
    merge_requests_events
        Deliver merge request events. Default: ``True``.
    tag_push_events
        Deliver tag push events. Default: ``True``.
    enable_ssl_verification
        Verify the receiver's TLS certificate. Default: ``False``.
    secret_token
        Token GitLab sends in ``X-Gitlab-Token``. Default: ``None`` (none).

    """

    push_events: bool = True
    merge_requests_events: bool = True
    tag_push_events: bool = True
    enable_ssl_verification: bool = False
    secret_token: str | None = dataclasses.field(default=None, repr=False)


DEFAULT_HOOK_SPECIFICATION = HookSpecification()
