"""动作名到处理器实例的映射。

映射在启动时构建一次，之后只读，并作为参数传入 Dispatcher。
"""

from types import MappingProxyType
from typing import Dict, Mapping

from chatx_core.actions.base import ActionHandler
from chatx_core.actions.chat_action import ChatActionHandler
from chatx_core.actions.one_time_action import OneTimeActionHandler
from chatx_core.domain.actions import ONE_TIME_ACTIONS, ActionKind
from chatx_core.domain.conversation import ConversationStore


def build_handler_registry(store: ConversationStore) -> Mapping[str, ActionHandler]:
    handlers: Dict[str, ActionHandler] = {ActionKind.CHAT.value: ChatActionHandler(store)}
    for kind in ONE_TIME_ACTIONS:
        handlers[kind.value] = OneTimeActionHandler(kind)
    return MappingProxyType(handlers)
