"""动作标识。

所有可调用的动作构成一个封闭集合：``chat`` 为连续对话，
其余均为一次性变换（翻译、润色、摘要等）。
"""

from enum import Enum
from typing import Tuple

from chatx_core.domain.exceptions import UnknownActionError


class ActionKind(str, Enum):
    CHAT = "chat"
    TRANSLATE = "translate"
    SLANG = "slang"
    REVISE = "revise"
    POLISH = "polish"
    EXPAND = "expand"
    SUMMARIZE = "summarize"
    MIDJOURNEY = "midjourney"
    STABLEDIFFUSION = "stablediffusion"
    CUSTOM = "custom"

    @property
    def is_one_time(self) -> bool:
        return self is not ActionKind.CHAT


ONE_TIME_ACTIONS: Tuple[ActionKind, ...] = tuple(k for k in ActionKind if k.is_one_time)


def parse_action(action_id: str) -> ActionKind:
    """把字符串动作名解析为 ActionKind，大小写不敏感。"""

    if isinstance(action_id, ActionKind):
        return action_id
    try:
        return ActionKind(str(action_id).strip().lower())
    except ValueError:
        raise UnknownActionError(action_id) from None
