"""动作调度核心。

一次调用的完整流程（单次执行，无重试）：

1. 清理过期会话。
2. 根据动作名找到处理器；未知动作属于编程错误，直接抛出。
3. precheck：不允许时，若带提示文本则展示给用户，否则静默结束。
4. build_payload：返回 None 说明处理器与请求不匹配，直接抛出。
5. 发送一次 chat/completions 请求。
6. 成功：on_success 后处理，能粘贴则粘贴，否则复制并预览。
7. 失败：on_failure 回滚状态，把错误信息展示给用户。
"""

import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, Mapping
from uuid import uuid4

from chatx_core.actions.base import ActionHandler
from chatx_core.domain.actions import parse_action
from chatx_core.domain.conversation import ConversationStore
from chatx_core.domain.exceptions import BusinessError, DispatchError, UnknownActionError
from chatx_core.domain.models import ActionRequest
from chatx_core.host.base import HostBridge
from chatx_core.infrastructure.logging.logger import logger
from chatx_core.providers import create_provider
from chatx_core.providers.base import ChatCompletionClient


ProviderFactory = Callable[[Any], ChatCompletionClient]


class DispatchOutcome(str, Enum):
    SKIPPED = "skipped"
    INFORMED = "informed"
    PASTED = "pasted"
    COPIED = "copied"
    FAILED = "failed"


class Dispatcher:
    def __init__(
        self,
        handlers: Mapping[str, ActionHandler],
        store: ConversationStore,
        provider_factory: ProviderFactory = create_provider,
    ):
        self._handlers = handlers
        self._store = store
        self._provider_factory = provider_factory

    def dispatch(self, req: ActionRequest, host: HostBridge) -> DispatchOutcome:
        start_time = time.time()
        log_ctx: Dict[str, Any] = {
            "trace_id": f"tr-{uuid4().hex}",
            "action": req.action_id,
            "app_identifier": req.app_identifier,
        }

        removed = self._store.sweep_stale()
        if removed:
            self._log(logging.INFO, "Swept stale conversations", log_ctx, removed=removed)

        handler = self._resolve(req.action_id)

        guard = handler.precheck(req)
        if not guard.allow:
            if guard.message:
                host.show_text(guard.message)
                host.show_success()
                self._log(logging.INFO, "Action answered without request", log_ctx)
                return DispatchOutcome.INFORMED
            self._log(logging.INFO, "Action not allowed", log_ctx)
            return DispatchOutcome.SKIPPED

        payload = handler.build_payload(req)
        if payload is None:
            raise DispatchError(f"handler for {req.action_id!r} produced no payload")

        try:
            provider = self._provider_factory(req.options)
            result = provider.chat(payload)
            content = result.first_content
        except BusinessError as e:
            handler.on_failure(req, e)
            self._log(
                logging.WARNING,
                "Action request failed",
                log_ctx,
                error_code=e.code,
                error=e.message,
                http_status=e.http_status,
                elapsed_seconds=round(time.time() - start_time, 2),
            )
            host.show_text(str(e))
            return DispatchOutcome.FAILED

        text = handler.on_success(req, content)
        if req.context.can_paste:
            host.paste_text(text, restore=True)
            host.show_success()
            outcome = DispatchOutcome.PASTED
        else:
            host.copy_text(text)
            host.show_text(text, preview=True)
            outcome = DispatchOutcome.COPIED

        self._log(
            logging.INFO,
            "Completed action",
            log_ctx,
            outcome=outcome.value,
            messages=len(payload.messages),
            total_tokens=result.usage.total_tokens if result.usage else None,
            elapsed_seconds=round(time.time() - start_time, 2),
        )
        return outcome

    def _resolve(self, action_id: str) -> ActionHandler:
        kind = parse_action(action_id)
        try:
            return self._handlers[kind.value]
        except KeyError:
            raise UnknownActionError(action_id) from None

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
