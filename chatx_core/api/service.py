"""对外 API 服务模块。

提供简化的函数接口供宿主插件调用：宿主只需传入动作名、选中文本
和自身的 HostBridge 实现。
"""

from datetime import timedelta
from typing import Optional

from chatx_core.actions.registry import build_handler_registry
from chatx_core.config.settings import ChatxSettings, settings
from chatx_core.dispatcher import DispatchOutcome, Dispatcher
from chatx_core.domain.models import ActionRequest
from chatx_core.host.base import HostBridge
from chatx_core.infrastructure.storage.memory_store import InMemoryConversationStore


_store: Optional[InMemoryConversationStore] = None
_dispatcher: Optional[Dispatcher] = None


def get_default_dispatcher(options: Optional[ChatxSettings] = None) -> Dispatcher:
    """获取默认的 Dispatcher 实例（单例，会话历史随进程存活）。

    会话存储在首次调用时创建，TTL 取自当次的 options（未传则用全局
    settings）；之后的调用共用同一存储，不再改变 TTL。
    """
    global _store, _dispatcher
    if _store is None:
        cfg = options if options is not None else settings
        _store = InMemoryConversationStore(ttl=timedelta(minutes=cfg.conversation_ttl_minutes))
    if _dispatcher is None:
        _dispatcher = Dispatcher(build_handler_registry(_store), _store)
    return _dispatcher


def run_action(
    action_id: str,
    selected_text: str,
    host: HostBridge,
    options: Optional[ChatxSettings] = None,
) -> DispatchOutcome:
    """执行一次动作。

    Args:
        action_id: 动作名，如 "chat"、"translate"
        selected_text: 用户选中的文本
        host: 宿主实现，提供上下文、修饰键与输出能力
        options: 本次调用的配置（可选，默认使用全局 settings）；
            首次调用时也决定会话存储的 TTL

    Returns:
        本次调用的结束状态

    Raises:
        UnknownActionError: 动作名不在封闭集合内
    """
    req = ActionRequest(
        action_id=action_id,
        selected_text=selected_text,
        modifiers=host.modifiers,
        context=host.context,
        options=options if options is not None else settings,
    )
    return get_default_dispatcher(options).dispatch(req, host)
