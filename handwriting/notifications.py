"""
User-facing notifications raised by client actions.

The toast widget itself lives in the page; this sink records what it should
show and mirrors every message to the log.
"""
import logging
from typing import List, Optional

from handwriting.models import Notification, NotificationLevel

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.ERROR: logging.WARNING,
}


class Notifier:
    def __init__(self):
        self.history: List[Notification] = []

    def notify(self, level: NotificationLevel, message: str) -> Notification:
        note = Notification(level=level, message=message)
        self.history.append(note)
        logger.log(_LOG_LEVELS[level], "[%s] %s", level.value, message)
        return note

    def info(self, message: str) -> Notification:
        return self.notify(NotificationLevel.INFO, message)

    def success(self, message: str) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.notify(NotificationLevel.ERROR, message)

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None

    def messages(self, level: Optional[NotificationLevel] = None) -> List[str]:
        return [n.message for n in self.history if level is None or n.level == level]
