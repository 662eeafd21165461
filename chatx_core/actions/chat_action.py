"""连续对话动作（chat）。

同一应用内的多次调用共享一段会话历史，历史按 app_identifier 保存在
ConversationStore 中。按住 reset 修饰键调用会清空当前应用的历史。
"""

from typing import Optional

from chatx_core.actions.base import ALLOW, PrecheckResult
from chatx_core.domain.actions import ActionKind, parse_action
from chatx_core.domain.conversation import ConversationStore
from chatx_core.domain.exceptions import BusinessError
from chatx_core.domain.models import ActionRequest, Message, OutboundPayload


class ChatActionHandler:
    kind = ActionKind.CHAT

    def __init__(self, store: ConversationStore):
        self._store = store

    def precheck(self, req: ActionRequest) -> PrecheckResult:
        if req.modifiers.is_held(req.options.reset_modifier):
            self._store.clear(req.app_identifier)
            ctx = req.context
            return PrecheckResult(
                allow=False,
                message=f"{ctx.app_name}({ctx.app_identifier})'s chat history has been cleared",
            )
        return ALLOW

    def build_payload(self, req: ActionRequest) -> Optional[OutboundPayload]:
        if parse_action(req.action_id) is not self.kind:
            return None
        self._store.append(req.app_identifier, Message(role="user", content=req.selected_text))
        return OutboundPayload(
            model=req.options.model,
            messages=self._store.messages(req.app_identifier),
            temperature=req.options.temperature,
        )

    def on_success(self, req: ActionRequest, response_text: str) -> str:
        self._store.append(req.app_identifier, Message(role="assistant", content=response_text))
        return response_text.strip()

    def on_failure(self, req: ActionRequest, error: BusinessError) -> None:
        # 撤回 build_payload 写入的用户消息
        self._store.rollback_last(req.app_identifier)
