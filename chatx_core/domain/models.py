"""统一的消息、请求与结果数据模型。

- Message: 一条对话消息（system/user/assistant），创建后不可变。
- Modifiers / HostContext: 宿主在每次调用时提供的修饰键状态与应用上下文。
- ActionRequest: 一次动作调用的全部输入。
- OutboundPayload: 发往 chat/completions 的请求体。
- ChatResult: 从响应 JSON 解析出的统一结果。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, TYPE_CHECKING

from chatx_core.domain.exceptions import ResponseFormatError

if TYPE_CHECKING:
    # 仅在类型检查时导入，避免运行时循环依赖
    from chatx_core.config.settings import ChatxSettings


# 与 OpenAI chat/completions 的 role 字段对应
Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class Message:
    role: Role
    content: str

    def to_json(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class Modifiers:
    """修饰键状态。"""

    shift: bool = False
    control: bool = False
    option: bool = False
    command: bool = False

    def is_held(self, name: str) -> bool:
        return bool(getattr(self, name, False))


@dataclass(frozen=True)
class HostContext:
    """宿主应用上下文。

    app_identifier 是会话分组的键（如 "com.apple.Safari"）；
    can_paste 决定结果是粘贴回原应用还是复制并预览。
    """

    app_identifier: str
    app_name: str = ""
    can_paste: bool = False
    can_copy: bool = True
    browser_url: str = ""
    browser_title: str = ""


@dataclass
class ActionRequest:
    """一次动作调用。

    - action_id: 动作名，如 "chat"、"translate"。
    - selected_text: 用户选中的文本。
    - modifiers: 调用时的修饰键。
    - context: 宿主应用上下文。
    - options: 本次调用生效的配置。
    """

    action_id: str
    selected_text: str
    modifiers: Modifiers
    context: HostContext
    options: "ChatxSettings"

    @property
    def app_identifier(self) -> str:
        return self.context.app_identifier


@dataclass
class OutboundPayload:
    model: str
    messages: List[Message]
    temperature: float

    def to_json(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [m.to_json() for m in self.messages],
            "temperature": self.temperature,
        }


@dataclass
class ChatUsage:
    """token 统计信息。"""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class ChatChoice:
    index: int
    message: Message
    finish_reason: Optional[str] = None


@dataclass
class ChatResult:
    """一次 chat/completions 调用的解析结果。

    - api_type: 后端类型（openai / azure）。
    - model: 请求使用的模型名。
    - choices: 候选回答，目前只消费第一条。
    - usage: 可选的 token 使用统计。
    - raw: 原始响应 JSON，用于调试。
    """

    api_type: str
    model: str
    choices: List[ChatChoice] = field(default_factory=list)
    usage: Optional[ChatUsage] = None
    raw: Optional[dict] = None

    @property
    def first_content(self) -> str:
        if not self.choices:
            raise ResponseFormatError(code="MALFORMED_RESPONSE", message="response has no choices")
        return self.choices[0].message.content
