"""统一业务异常模型。

所有在一次请求中可能出现的运行期错误都继承自 BusinessError，
Dispatcher 会统一捕获并回滚、提示用户。

UnknownActionError / DispatchError 表示调用方的编程错误，
不属于 BusinessError，会直接向上抛出。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "NETWORK_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 trace_id、api_type 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(BusinessError):
    """后端返回非 2xx 状态码时抛出。"""


class RateLimitError(BusinessError):
    """后端限流（429）。不做自动重试。"""


class ResponseFormatError(BusinessError):
    """响应体不是合法 JSON，或缺少 choices[0].message.content。"""


class ValidationError(BusinessError):
    """参数或配置校验失败，例如缺少 API Key。"""


class UnknownActionError(LookupError):
    """动作名不在封闭集合内。"""

    def __init__(self, action_id):
        self.action_id = action_id
        super().__init__(f"unknown action: {action_id!r}")


class DispatchError(RuntimeError):
    """处理器与请求不匹配（build_payload 返回 None）。"""
