"""宿主适配层：HostBridge 协议与本地剪贴板实现。"""

from chatx_core.host.base import HostBridge
from chatx_core.host.local import LocalClipboardHost

__all__ = ["HostBridge", "LocalClipboardHost"]
