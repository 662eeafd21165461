"""JSON 行日志。

每条记录一行 JSON：ts / level / name / msg，再合并调用方通过
extra={"extra": {...}} 传入的字段。

开启 log_redact_content 时，自由文本字段（msg、error）截断到
REDACT_LIMIT 个字符：后端返回的错误说明可能回显用户选中的文本。
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from chatx_core.config.settings import settings


LOGGER_NAME = "chatx_core"
LOG_FILE = "chatx.log"
REDACT_LIMIT = 64
FREE_TEXT_FIELDS = ("msg", "error")


class JsonFormatter(logging.Formatter):
    def __init__(self, redact: bool = False):
        super().__init__()
        self.redact = redact

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if self.redact:
            for key in FREE_TEXT_FIELDS:
                value = payload.get(key)
                if isinstance(value, str) and len(value) > REDACT_LIMIT:
                    payload[key] = value[:REDACT_LIMIT]
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger(log_dir=None, redact=None) -> logging.Logger:
    """创建 chatx_core 日志器；已配置过 handler 时直接返回。"""

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return logger
    path = Path(log_dir if log_dir is not None else settings.log_dir)
    path.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(path / LOG_FILE, encoding="utf-8")
    fh.setLevel(logging.INFO)
    fh.setFormatter(JsonFormatter(redact=settings.log_redact_content if redact is None else redact))
    logger.addHandler(fh)
    return logger


logger = setup_logger()
