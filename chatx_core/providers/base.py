"""Provider 抽象接口。

Dispatcher 不直接依赖 httpx，而是依赖此协议：

- ChatCompletionClient 负责把 OutboundPayload 发往 chat/completions，
  并把响应 JSON 解析为 ChatResult。
- 所有失败都以 BusinessError 子类抛出（NetworkError / ApiError /
  RateLimitError / ResponseFormatError / ValidationError）。

测试中可以用任意实现了 chat() 的对象替换真实客户端。
"""

from typing import Protocol

from chatx_core.domain.models import ChatResult, OutboundPayload


class ChatCompletionClient(Protocol):
    """chat/completions 客户端协议。"""

    name: str

    def chat(self, payload: OutboundPayload) -> ChatResult:
        ...
