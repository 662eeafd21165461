from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Protocol

from .models import Message


@dataclass
class Conversation:
    app_identifier: str
    last_active_at: datetime
    messages: List[Message] = field(default_factory=list)

    def is_stale(self, now: datetime, ttl: timedelta) -> bool:
        return now - self.last_active_at >= ttl


class ConversationStore(Protocol):
    def get_or_create(self, app_identifier: str) -> Conversation:
        ...

    def get(self, app_identifier: str) -> Optional[Conversation]:
        ...

    def append(self, app_identifier: str, message: Message) -> None:
        ...

    def rollback_last(self, app_identifier: str) -> Optional[Message]:
        ...

    def clear(self, app_identifier: str) -> None:
        ...

    def messages(self, app_identifier: str) -> List[Message]:
        ...

    def sweep_stale(self, now: Optional[datetime] = None) -> List[str]:
        ...
