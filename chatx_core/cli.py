#!/usr/bin/env python3
"""chatx 命令行入口。

在本地剪贴板上运行动作，例如::

    chatx translate --text "你好"      # 结果写入剪贴板并打印
    chatx polish                       # 以当前剪贴板内容为输入
    chatx chat --interactive           # 逐行对话，输入 /reset 清空历史
"""

import argparse
import sys
from typing import List, Optional, TextIO

from chatx_core.api.service import run_action
from chatx_core.config.settings import settings
from chatx_core.dispatcher import DispatchOutcome
from chatx_core.domain.actions import ONE_TIME_ACTIONS, ActionKind
from chatx_core.domain.models import Modifiers
from chatx_core.host.local import LocalClipboardHost


RESET_COMMAND = "/reset"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatx",
        description="Send selected text to a chat-completion API and copy the reply to the clipboard",
    )
    parser.add_argument("action", nargs="?", choices=[k.value for k in ActionKind], help="Action to run")
    parser.add_argument("--text", help="Input text (defaults to the clipboard content)")
    parser.add_argument(
        "--shift",
        action="store_true",
        help="Hold shift: clear chat history, or use the secondary language",
    )
    parser.add_argument("--app-id", default="local.terminal", help="Application identifier for chat history")
    parser.add_argument("--app-name", default="Terminal", help="Application display name")
    parser.add_argument(
        "--interactive",
        action="store_true",
        help=f"Read one input per line from stdin; '{RESET_COMMAND}' runs the action with shift held",
    )
    parser.add_argument("--list", action="store_true", help="List actions and whether they are enabled")
    return parser


def list_actions(out: TextIO) -> None:
    print(f"{ActionKind.CHAT.value:<16} enabled", file=out)
    for kind in ONE_TIME_ACTIONS:
        state = "enabled" if settings.action(kind).enabled else "disabled"
        print(f"{kind.value:<16} {state}", file=out)


def run_interactive(action: str, host: LocalClipboardHost, stdin: TextIO) -> DispatchOutcome:
    outcome = DispatchOutcome.SKIPPED
    for raw_line in stdin:
        line = raw_line.rstrip("\n")
        if not line.strip():
            continue
        if line.strip() == RESET_COMMAND:
            host.modifiers = Modifiers(shift=True)
            outcome = run_action(action, "", host)
            host.modifiers = Modifiers()
            continue
        outcome = run_action(action, line, host)
    return outcome


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        list_actions(sys.stdout)
        return 0
    if not args.action:
        parser.error("an action is required unless --list is given")

    host = LocalClipboardHost(
        app_identifier=args.app_id,
        app_name=args.app_name,
        modifiers=Modifiers(shift=args.shift),
    )
    if args.interactive:
        outcome = run_interactive(args.action, host, sys.stdin)
    else:
        text = args.text if args.text is not None else host.selected_text()
        outcome = run_action(args.action, text, host)
    return 1 if outcome is DispatchOutcome.FAILED else 0


if __name__ == "__main__":
    sys.exit(main())
