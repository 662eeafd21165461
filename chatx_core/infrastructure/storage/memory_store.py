"""进程内会话存储。

会话按 app_identifier 分组，仅存活于当前进程。清理不依赖定时器：
Dispatcher 在每次调用开始时执行 sweep_stale()，时间来源通过 clock 注入。
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from chatx_core.domain.conversation import Conversation, ConversationStore
from chatx_core.domain.models import Message


Clock = Callable[[], datetime]

INACTIVE_CONVERSATION_TTL = timedelta(minutes=20)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryConversationStore(ConversationStore):
    def __init__(self, ttl: timedelta = INACTIVE_CONVERSATION_TTL, clock: Clock = utcnow):
        self._ttl = ttl
        self._clock = clock
        self._conversations: Dict[str, Conversation] = {}
        # 同一 app 的 append/rollback 必须串行，保证消息顺序
        self._lock = threading.RLock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get_or_create(self, app_identifier: str) -> Conversation:
        with self._lock:
            conv = self._conversations.get(app_identifier)
            if conv is None:
                conv = Conversation(app_identifier=app_identifier, last_active_at=self._clock())
                self._conversations[app_identifier] = conv
            return conv

    def get(self, app_identifier: str) -> Optional[Conversation]:
        return self._conversations.get(app_identifier)

    def append(self, app_identifier: str, message: Message) -> None:
        with self._lock:
            conv = self.get_or_create(app_identifier)
            conv.messages.append(message)
            conv.last_active_at = self._clock()

    def rollback_last(self, app_identifier: str) -> Optional[Message]:
        """撤销最近一条消息（请求失败时撤回用户消息）。"""

        with self._lock:
            conv = self._conversations.get(app_identifier)
            if conv is None or not conv.messages:
                return None
            return conv.messages.pop()

    def clear(self, app_identifier: str) -> None:
        with self._lock:
            conv = self._conversations.get(app_identifier)
            if conv is not None:
                conv.messages.clear()

    def messages(self, app_identifier: str) -> List[Message]:
        """返回消息快照，调用方修改不会影响存储。"""

        with self._lock:
            conv = self._conversations.get(app_identifier)
            return list(conv.messages) if conv else []

    def sweep_stale(self, now: Optional[datetime] = None) -> List[str]:
        """删除所有过期会话，返回被删除的 app_identifier 列表。"""

        now = now or self._clock()
        with self._lock:
            stale = [
                app_id
                for app_id, conv in self._conversations.items()
                if conv.is_stale(now, self._ttl)
            ]
            for app_id in stale:
                del self._conversations[app_id]
        return stale

    def __len__(self) -> int:
        return len(self._conversations)

    def __contains__(self, app_identifier: object) -> bool:
        return app_identifier in self._conversations
