import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    level: str
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationCenter:
    """Transient messages shown to the user, newest last."""

    def __init__(self, limit: int = 20):
        self._items: Deque[Notification] = deque(maxlen=limit)

    def success(self, message: str) -> None:
        logger.info(message)
        self._items.append(Notification("success", message))

    def error(self, message: str) -> None:
        logger.warning(message)
        self._items.append(Notification("error", message))

    @property
    def items(self) -> List[Notification]:
        return list(self._items)

    @property
    def latest(self) -> Optional[Notification]:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()
