"""一次性动作的提示词目录。

内置指令以文本文件形式放在 prompts/templates 目录，每个动作一个文件，
文件中的 ``target_language`` 占位符在使用时替换为目标语言。
用户在配置中填写的自定义指令会原样覆盖内置模板。
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from chatx_core.domain.actions import ActionKind, parse_action
from chatx_core.domain.exceptions import UnknownActionError


TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

LANGUAGE_PLACEHOLDER = "target_language"

INPUT_TEXT_PREAMBLE = (
    "The input text being used for this task is enclosed within triple quotation marks below the next line:"
)


def _one_time_kind(action_id: str) -> ActionKind:
    kind = parse_action(action_id)
    if not kind.is_one_time:
        raise UnknownActionError(action_id)
    return kind


@lru_cache(maxsize=None)
def _read_template(name: str) -> str:
    return (TEMPLATES_DIR / f"{name}.md").read_text(encoding="utf-8").rstrip("\n")


def load_template(action_id: str) -> str:
    """读取某个一次性动作的内置指令模板（未替换占位符）。"""

    return _read_template(_one_time_kind(action_id).value)


def resolve_instruction(action_id: str, language: str, user_override: Optional[str] = None) -> str:
    """确定一次性动作最终使用的指令。

    user_override 非空时原样返回；否则返回内置模板，
    其中所有 target_language 都替换为 language。
    未知动作（包括 chat）抛出 UnknownActionError。
    """

    kind = _one_time_kind(action_id)
    if user_override:
        return user_override
    return _read_template(kind.value).replace(LANGUAGE_PLACEHOLDER, language)


def build_user_prompt(instruction: str, text: str) -> str:
    """把指令与选中文本拼成一次性动作唯一的一条 user 消息。"""

    return f'{instruction}\n{INPUT_TEXT_PREAMBLE}\n\n"""{text}"""'
