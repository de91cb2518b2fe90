"""
User-facing notifications (toasts)
"""

import itertools
import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Notification:
    id: int
    title: str
    description: str = ""
    variant: str = "default"  # default | destructive

class Notifier:
    """Queue of dismissible notifications"""

    def __init__(self):
        self.notifications: List[Notification] = []
        self._ids = itertools.count(1)

    def toast(self, title: str, description: str = "", variant: str = "default") -> Notification:
        notification = Notification(next(self._ids), title, description, variant)
        self.notifications.append(notification)
        if variant == "destructive":
            logger.warning(f"{title}: {description}")
        else:
            logger.info(f"{title}: {description}")
        return notification

    def dismiss(self, notification_id: int) -> bool:
        before = len(self.notifications)
        self.notifications = [n for n in self.notifications if n.id != notification_id]
        return len(self.notifications) != before

    def latest(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None
