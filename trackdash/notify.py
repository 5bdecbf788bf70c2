"""User-visible notifications.

Components that need to tell the user something (a failed load, an empty
export) receive a notifier instead of writing to a global toast queue.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Protocol

Severity = Literal["success", "info", "warning", "error"]

_LOG_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    severity: Severity
    message: str


class Notifier(Protocol):
    def notify(self, severity: Severity, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class BaseNotifier:
    def notify(self, severity: Severity, message: str) -> None:
        raise NotImplementedError

    def success(self, message: str) -> None:
        self.notify("success", message)

    def info(self, message: str) -> None:
        self.notify("info", message)

    def warning(self, message: str) -> None:
        self.notify("warning", message)

    def error(self, message: str) -> None:
        self.notify("error", message)


class LoggingNotifier(BaseNotifier):
    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def notify(self, severity: Severity, message: str) -> None:
        if severity not in _LOG_LEVELS:
            raise ValueError(f"unknown severity: {severity!r}")
        self._log.log(_LOG_LEVELS[severity], message)


@dataclass
class CollectingNotifier(BaseNotifier):
    """Keeps every notification; the API returns them in its payloads."""

    notifications: List[Notification] = field(default_factory=list)

    def notify(self, severity: Severity, message: str) -> None:
        if severity not in _LOG_LEVELS:
            raise ValueError(f"unknown severity: {severity!r}")
        self.notifications.append(Notification(severity=severity, message=message))
        logger.log(_LOG_LEVELS[severity], message)

    def by_severity(self, severity: Severity) -> List[Notification]:
        return [n for n in self.notifications if n.severity == severity]

    def clear(self) -> None:
        self.notifications.clear()
