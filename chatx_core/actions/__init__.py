"""动作处理器。

- base: ActionHandler 协议与 PrecheckResult。
- chat_action: 连续对话处理器。
- one_time_action: 一次性变换处理器。
- registry: 构建只读的动作名 -> 处理器映射。
"""

from chatx_core.actions.base import ActionHandler, PrecheckResult
from chatx_core.actions.chat_action import ChatActionHandler
from chatx_core.actions.one_time_action import OneTimeActionHandler, strip_wrapping_quotes
from chatx_core.actions.registry import build_handler_registry

__all__ = [
    "ActionHandler",
    "PrecheckResult",
    "ChatActionHandler",
    "OneTimeActionHandler",
    "strip_wrapping_quotes",
    "build_handler_registry",
]
