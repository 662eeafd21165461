"""宿主接口协议。

宿主（剪贴板工具）在每次调用时提供上下文与修饰键状态，
并负责把结果粘贴、复制或展示给用户。
"""

from typing import Protocol

from chatx_core.domain.models import HostContext, Modifiers


class HostBridge(Protocol):
    context: HostContext
    modifiers: Modifiers

    def paste_text(self, text: str, restore: bool = False) -> None:
        ...

    def copy_text(self, text: str) -> None:
        ...

    def show_text(self, text: str, preview: bool = False) -> None:
        ...

    def show_success(self) -> None:
        ...

    def show_failure(self) -> None:
        ...
