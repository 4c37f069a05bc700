"""Toast notifications raised by interactions."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Protocol

logger = logging.getLogger(__name__)


class ToastKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Toast:
    kind: ToastKind
    message: str


class Notifier(Protocol):
    """Fire-and-forget toast surface."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class RecordingNotifier:
    """Keeps every toast in order; the surface for headless callers and tests."""

    def __init__(self):
        self.toasts: List[Toast] = []

    def success(self, message: str) -> None:
        self.toasts.append(Toast(ToastKind.SUCCESS, message))

    def error(self, message: str) -> None:
        self.toasts.append(Toast(ToastKind.ERROR, message))

    @property
    def errors(self) -> List[str]:
        return [t.message for t in self.toasts if t.kind is ToastKind.ERROR]

    @property
    def successes(self) -> List[str]:
        return [t.message for t in self.toasts if t.kind is ToastKind.SUCCESS]

    def clear(self) -> None:
        self.toasts.clear()


class LoggingNotifier:
    """Writes toasts to the log."""

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)
