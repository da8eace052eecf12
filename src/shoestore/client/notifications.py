"""User-facing notifications.

The default Notifier writes structured log lines; a UI subclasses it to show
toasts. ``RecordingNotifier`` keeps messages in memory.
"""

from shoestore.utils.logging import get_logger

logger = get_logger(__name__)


class Notifier:
    def success(self, message: str) -> None:
        logger.info("notify_success", message=message)

    def info(self, message: str) -> None:
        logger.info("notify_info", message=message)

    def warning(self, message: str) -> None:
        logger.warning("notify_warning", message=message)

    def error(self, message: str) -> None:
        logger.error("notify_error", message=message)


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def of_level(self, level: str) -> list[str]:
        return [message for lvl, message in self.messages if lvl == level]
