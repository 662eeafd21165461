"""ChatX Core 顶层包。

该包实现剪贴板动作扩展的核心：把用户选中的文本发送到
chat/completions 接口，再把结果粘贴或复制回宿主应用。
包括配置加载、领域模型、提示词目录、按应用划分的会话存储、
动作处理器、HTTP 客户端与调度器。
"""

from chatx_core.api.service import run_action
from chatx_core.dispatcher import DispatchOutcome, Dispatcher

__all__ = ["run_action", "Dispatcher", "DispatchOutcome"]
