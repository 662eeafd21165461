"""基于系统剪贴板的本地宿主实现。

无法向前台应用模拟粘贴，因此 can_paste 恒为 False：
结果会写入剪贴板并打印到输出流。
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

import pyperclip

from chatx_core.domain.models import HostContext, Modifiers
from chatx_core.infrastructure.logging.logger import logger


class LocalClipboardHost:
    def __init__(
        self,
        app_identifier: str = "local.terminal",
        app_name: str = "Terminal",
        modifiers: Optional[Modifiers] = None,
        out: Optional[TextIO] = None,
    ):
        self.context = HostContext(
            app_identifier=app_identifier,
            app_name=app_name,
            can_paste=False,
            can_copy=True,
        )
        self.modifiers = modifiers or Modifiers()
        self.status: Optional[str] = None
        self._out = out or sys.stdout

    def selected_text(self) -> str:
        """读取剪贴板作为选中文本。"""

        return pyperclip.paste() or ""

    def paste_text(self, text: str, restore: bool = False) -> None:
        self.copy_text(text)

    def copy_text(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            # 无剪贴板的环境（如无 X11 的服务器）仍然输出结果
            logger.warning("Clipboard unavailable", extra={"extra": {"error": str(e)}})

    def show_text(self, text: str, preview: bool = False) -> None:
        print(text, file=self._out)

    def show_success(self) -> None:
        self.status = "success"

    def show_failure(self) -> None:
        self.status = "failure"
