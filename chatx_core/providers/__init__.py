"""chat/completions 后端集成层。

- base: ChatCompletionClient 协议。
- chat_completions: 基于 httpx 的实现，支持 openai 与 azure 两种认证方式。
"""

from chatx_core.config.settings import settings
from chatx_core.providers.base import ChatCompletionClient
from chatx_core.providers.chat_completions import ChatCompletionsClient, make_client_options


def create_provider(cfg=None) -> ChatCompletionClient:
    """根据配置创建客户端实例，默认取全局 settings。"""

    return ChatCompletionsClient(cfg or settings)


__all__ = ["ChatCompletionClient", "ChatCompletionsClient", "create_provider", "make_client_options"]
