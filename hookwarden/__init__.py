"""Keep GitLab projects hooked up to an automation server."""

from __future__ import annotations

__version__ = "0.1.0"
