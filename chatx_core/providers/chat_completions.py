"""chat/completions 客户端。

本模块负责：

1. 根据配置决定认证方式（make_client_options）：
   - openai: Authorization: Bearer <api_key>
   - azure:  api-key: <api_key>，并附带 api-version 查询参数
2. 将 OutboundPayload 以 JSON POST 到 {api_base}/chat/completions。
3. 把网络错误、非 2xx 状态码、格式错误的响应统一包装为 BusinessError。
4. 将响应 JSON 解析为 ChatResult。

每次调用只发一个请求，不做重试。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

import httpx

from chatx_core.config.settings import settings
from chatx_core.domain.exceptions import (
    ApiError,
    NetworkError,
    RateLimitError,
    ResponseFormatError,
    ValidationError,
)
from chatx_core.domain.models import ChatChoice, ChatResult, ChatUsage, Message, OutboundPayload


DEFAULT_TIMEOUT = 35.0
MAX_ERROR_DETAIL = 300


@dataclass(frozen=True)
class ClientOptions:
    base_url: str
    headers: Dict[str, str]
    params: Dict[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT

    @property
    def url(self) -> str:
        return f"{self.base_url}/chat/completions"


def make_client_options(cfg) -> ClientOptions:
    """根据配置生成请求选项，纯函数。"""

    api_key = getattr(cfg, "api_key", None)
    if not api_key:
        raise ValidationError(code="MISSING_API_KEY", message="CHATX_API_KEY not set")
    api_type = str(getattr(cfg, "api_type", "") or "").lower()
    base_url = str(cfg.api_base).rstrip("/")
    timeout = getattr(cfg, "http_timeout", None) or DEFAULT_TIMEOUT
    if api_type == "openai":
        return ClientOptions(
            base_url=base_url,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )
    if api_type == "azure":
        # Ref: https://learn.microsoft.com/en-us/azure/ai-services/openai/reference#chat-completions
        return ClientOptions(
            base_url=base_url,
            headers={"api-key": api_key},
            params={"api-version": cfg.api_version},
            timeout=timeout,
        )
    raise ValidationError(code="UNSUPPORTED_API_TYPE", message=f"unsupported api type: {api_type}")


def _error_detail(resp: httpx.Response) -> str:
    """提取错误响应的说明：优先取 error.message，否则截断响应体。"""

    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            return err["message"]
    text = resp.text or ""
    if len(text) > MAX_ERROR_DETAIL:
        return text[:MAX_ERROR_DETAIL] + "..."
    return text


class ChatCompletionsClient:
    """OpenAI / Azure OpenAI 通用客户端。

    - name: 后端类型，供日志使用。
    - chat: 对外统一调用入口，返回 ChatResult。
    """

    def __init__(self, cfg=settings):
        self._settings = cfg

    @property
    def name(self) -> str:
        return str(getattr(self._settings, "api_type", "openai"))

    def chat(self, payload: OutboundPayload) -> ChatResult:
        options = make_client_options(self._settings)
        try:
            with httpx.Client(timeout=options.timeout, trust_env=False) as client:
                resp = client.post(
                    options.url,
                    json=payload.to_json(),
                    params=options.params,
                    headers={
                        **options.headers,
                        "Content-Type": "application/json",
                    },
                )
        except httpx.InvalidURL as e:
            # api_base 配置错误，httpx 在发请求前就会拒绝
            raise ValidationError(code="INVALID_URL", message=f"invalid api_base: {e}")
        except httpx.TimeoutException:
            raise NetworkError(code="TIMEOUT", message=f"request timed out after {options.timeout:g}s")
        except httpx.RequestError as e:
            # DNS 失败、连接被拒绝等
            raise NetworkError(code="NETWORK_ERROR", message=str(e))
        if resp.status_code == 429:
            raise RateLimitError(code="RATE_LIMIT", message="rate limit exceeded", http_status=429)
        if not 200 <= resp.status_code < 300:
            raise ApiError(
                code="API_ERROR",
                message=f"HTTP {resp.status_code}: {_error_detail(resp)}",
                http_status=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise ResponseFormatError(code="MALFORMED_RESPONSE", message=f"invalid JSON response: {e}")
        return self._parse_response(data, payload)

    def _parse_response(self, data: Any, payload: OutboundPayload) -> ChatResult:
        """将原始响应 JSON 解析为 ChatResult，缺字段时抛 ResponseFormatError。"""

        if not isinstance(data, dict):
            raise ResponseFormatError(code="MALFORMED_RESPONSE", message="response body is not an object")
        choices_raw = data.get("choices")
        if not isinstance(choices_raw, list) or not choices_raw:
            raise ResponseFormatError(code="MALFORMED_RESPONSE", message="response has no choices")
        choices: List[ChatChoice] = []
        for i, ch in enumerate(choices_raw):
            msg = ch.get("message") if isinstance(ch, dict) else None
            if not isinstance(msg, dict) or not isinstance(msg.get("content"), str):
                raise ResponseFormatError(
                    code="MALFORMED_RESPONSE",
                    message=f"choices[{i}].message.content missing",
                )
            choices.append(
                ChatChoice(
                    index=ch.get("index", i),
                    message=Message(role=msg.get("role") or "assistant", content=msg["content"]),
                    finish_reason=ch.get("finish_reason"),
                )
            )
        # usage 仅用于日志，格式不对时忽略
        usage_raw = data.get("usage")
        usage = None
        if isinstance(usage_raw, dict) and usage_raw:
            usage = ChatUsage(
                prompt_tokens=usage_raw.get("prompt_tokens", 0),
                completion_tokens=usage_raw.get("completion_tokens", 0),
                total_tokens=usage_raw.get("total_tokens", 0),
            )
        return ChatResult(api_type=self.name, model=payload.model, choices=choices, usage=usage, raw=data)
