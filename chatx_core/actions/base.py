"""动作处理器协议。

每个动作（chat 或一次性变换）对应一个处理器，统一实现四个钩子：

- precheck(req): 是否允许本次调用；不允许时可附带提示文本。
- build_payload(req): 构造请求体；动作与请求不匹配时返回 None。
- on_success(req, text): 对模型回复做后处理并返回最终文本。
- on_failure(req, error): 请求失败时回滚本处理器产生的状态。
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from chatx_core.domain.actions import ActionKind
from chatx_core.domain.exceptions import BusinessError
from chatx_core.domain.models import ActionRequest, OutboundPayload


@dataclass(frozen=True)
class PrecheckResult:
    allow: bool
    message: Optional[str] = None


ALLOW = PrecheckResult(allow=True)


class ActionHandler(Protocol):
    kind: ActionKind

    def precheck(self, req: ActionRequest) -> PrecheckResult:
        ...

    def build_payload(self, req: ActionRequest) -> Optional[OutboundPayload]:
        ...

    def on_success(self, req: ActionRequest, response_text: str) -> str:
        ...

    def on_failure(self, req: ActionRequest, error: BusinessError) -> None:
        ...
