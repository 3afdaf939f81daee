"""
CareSync: Typed Events & Notifications
Observer interface between the core services and whatever renders them
"""

import logging
from collections import defaultdict, deque
from datetime import datetime
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional, Type

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# ============================================================================
# EVENTS
# ============================================================================

class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Event(BaseModel):
    timestamp: datetime = Field(default_factory=datetime.now)


class ConnectivityChanged(Event):
    online: bool


class SyncCompleted(Event):
    entity_type: str
    flushed: int = Field(default=0, ge=0)


class SyncFailed(Event):
    entity_type: str
    error: str
    pending: int = Field(default=0, ge=0)


class Notification(Event):
    """User-visible notice; rendering is left to the UI layer"""
    title: str
    message: str
    level: NotificationLevel = Field(default=NotificationLevel.INFO)


Handler = Callable[[Event], None]

# ============================================================================
# EVENT BUS
# ============================================================================

class EventBus:
    """
    Synchronous publish/subscribe keyed by event class.
    Handlers registered for `Event` receive everything.
    Keeps the most recent notifications for polling consoles.
    """

    def __init__(self, history_size: int = 50):
        self._handlers: Dict[Type[Event], List[Handler]] = defaultdict(list)
        self.notifications: Deque[Notification] = deque(maxlen=history_size)

    def subscribe(self, event_type: Type[Event], handler: Handler) -> Callable[[], None]:
        """Register `handler`; returns a callable that unsubscribes it"""
        self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return unsubscribe

    def publish(self, event: Event) -> None:
        if isinstance(event, Notification):
            self.notifications.append(event)

        for event_type, handlers in list(self._handlers.items()):
            if not isinstance(event, event_type):
                continue
            for handler in list(handlers):
                try:
                    handler(event)
                except Exception as e:
                    # a broken subscriber must not stop delivery to the rest
                    logger.error(f"❌ Event handler {handler!r} failed on {type(event).__name__}: {e}")

    def notify(self, title: str, message: str,
               level: NotificationLevel = NotificationLevel.INFO) -> Notification:
        notification = Notification(title=title, message=message, level=level)
        self.publish(notification)
        return notification

    def recent_notifications(self, limit: Optional[int] = None) -> List[Notification]:
        items = list(self.notifications)
        return items[-limit:] if limit else items


# ============================================================================
# CONNECTIVITY
# ============================================================================

class Connectivity:
    """Process-wide online/offline flag; transitions publish ConnectivityChanged"""

    def __init__(self, bus: EventBus, online: bool = True):
        self.bus = bus
        self._online = online

    @property
    def online(self) -> bool:
        return self._online

    def set_online(self, online: bool) -> bool:
        """Update the flag; returns True when this was a transition"""
        if online == self._online:
            return False
        self._online = online
        logger.info(f"🌐 Connectivity changed: {'online' if online else 'offline'}")
        self.bus.publish(ConnectivityChanged(online=online))
        return True
