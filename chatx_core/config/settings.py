"""配置管理模块。

支持从 .env、config.yaml 以及环境变量加载配置。环境变量统一使用
``CHATX_`` 前缀，嵌套字段用 ``__`` 分隔，例如::

    CHATX_API_KEY=sk-...
    CHATX_ACTIONS__TRANSLATE__ENABLED=true
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chatx_core.domain.actions import ONE_TIME_ACTIONS, ActionKind
from chatx_core.domain.exceptions import UnknownActionError


ModifierName = Literal["shift", "control", "option", "command"]


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("CHATX_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class ActionOptions(BaseModel):
    """单个一次性动作的用户配置。"""

    enabled: bool = Field(default=False, description="是否启用该动作")
    primary_language: str = Field(default="English", description="主语言")
    secondary_language: str = Field(default="Chinese Simplified", description="按住修饰键时使用的次语言")
    instruction: str = Field(default="", description="自定义指令，非空时覆盖内置模板")


def _default_actions() -> Dict[str, ActionOptions]:
    return {kind.value: ActionOptions() for kind in ONE_TIME_ACTIONS}


class ChatxSettings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- API 相关配置 ----
    api_type: Literal["openai", "azure"] = Field(
        default="azure",
        description="后端类型：openai 使用 Bearer 认证，azure 使用 api-key 头与 api-version 参数",
    )
    api_base: str = Field(
        default="https://api.openai.com/v1",
        description="API 基础URL；Azure 形如 https://{resource}.openai.azure.com/openai/deployments/{deployment}",
    )
    api_key: Optional[str] = Field(default=None, description="API 密钥")
    api_version: str = Field(default="2023-03-15-preview", description="API 版本（仅 Azure）")
    model: str = Field(default="gpt-4-32k", description="模型名")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="采样温度")
    http_timeout: float = Field(default=35.0, ge=1.0, description="HTTP 超时时间（秒）")

    # ---- 会话与修饰键 ----
    conversation_ttl_minutes: float = Field(
        default=20.0,
        gt=0,
        description="会话无活动多久后被清理（分钟）",
    )
    reset_modifier: ModifierName = Field(default="shift", description="chat 动作中用于清空历史的修饰键")
    language_modifier: ModifierName = Field(default="shift", description="一次性动作中切换到次语言的修饰键")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    actions: Dict[str, ActionOptions] = Field(
        default_factory=_default_actions,
        description="一次性动作配置，键为动作名",
    )

    model_config = SettingsConfigDict(
        env_prefix="CHATX_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @field_validator("api_base")
    @classmethod
    def strip_api_base(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("actions")
    @classmethod
    def fill_actions(cls, v: Dict[str, ActionOptions]) -> Dict[str, ActionOptions]:
        merged = _default_actions()
        for name, opts in v.items():
            key = name.lower()
            if key not in merged:
                raise ValueError(f"unknown one-time action: {name!r}")
            merged[key] = opts
        return merged

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )

    def action(self, action_id: str) -> ActionOptions:
        """返回某个一次性动作的配置，未知动作抛 UnknownActionError。"""

        key = action_id.value if isinstance(action_id, ActionKind) else str(action_id).lower()
        try:
            return self.actions[key]
        except KeyError:
            raise UnknownActionError(action_id) from None


settings = ChatxSettings()

# 类型别名，让外部代码可以使用 Settings 类型
Settings = ChatxSettings
