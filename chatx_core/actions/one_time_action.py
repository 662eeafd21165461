"""一次性变换动作（translate / polish / summarize 等）。

不读写任何会话状态：每次调用只发送一条“指令 + 选中文本”的 user 消息。
"""

from typing import Optional

from chatx_core.actions.base import PrecheckResult
from chatx_core.domain.actions import ActionKind, parse_action
from chatx_core.domain.exceptions import BusinessError
from chatx_core.domain.models import ActionRequest, Message, OutboundPayload
from chatx_core.prompts import build_user_prompt, resolve_instruction


DISALLOW_SILENTLY = PrecheckResult(allow=False)


def strip_wrapping_quotes(text: str) -> str:
    """去掉首尾各一个双引号（部分模型会把整段输出包在引号里）。"""

    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


class OneTimeActionHandler:
    def __init__(self, kind: ActionKind):
        if not kind.is_one_time:
            raise ValueError(f"{kind.value!r} is not a one-time action")
        self.kind = kind

    def precheck(self, req: ActionRequest) -> PrecheckResult:
        if req.options.action(self.kind).enabled:
            return PrecheckResult(allow=True)
        return DISALLOW_SILENTLY

    def build_payload(self, req: ActionRequest) -> Optional[OutboundPayload]:
        if parse_action(req.action_id) is not self.kind:
            return None
        opts = req.options.action(self.kind)
        if req.modifiers.is_held(req.options.language_modifier):
            language = opts.secondary_language
        else:
            language = opts.primary_language
        instruction = resolve_instruction(self.kind, language, opts.instruction)
        return OutboundPayload(
            model=req.options.model,
            messages=[Message(role="user", content=build_user_prompt(instruction, req.selected_text))],
            temperature=req.options.temperature,
        )

    def on_success(self, req: ActionRequest, response_text: str) -> str:
        return strip_wrapping_quotes(response_text.strip())

    def on_failure(self, req: ActionRequest, error: BusinessError) -> None:
        return None
