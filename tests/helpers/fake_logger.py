"""Logger double collecting femtologging-style calls."""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True, slots=True)
class LoggedCall:
    """A captured ``log`` call."""

    level: str
    message: str
    exc_info: object | None


class FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[LoggedCall] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        del stack_info
        self.calls.append(LoggedCall(level, message, exc_info))
        return message

    def messages(self, event: str) -> list[LoggedCall]:
        """Return calls whose message starts with ``[event]``."""
        return [call for call in self.calls if call.message.startswith(f"[{event}]")]
