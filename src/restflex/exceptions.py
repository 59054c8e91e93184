"""
REST 客户端异常模块

定义请求构建、传输、读取、解码、状态校验各阶段的异常类，提供统一的错误处理机制。

所有异常都会携带失败时已填充的 HttpResult（请求未执行时为 None），
原始异常通过 ``raise ... from`` 保留在 ``__cause__`` 中。
"""

from __future__ import annotations

from typing import Any


class APIClientError(Exception):
    """
    API 客户端异常基类

    所有自定义异常的基类，用于统一捕获和处理客户端相关错误

    属性:
        http_result: 失败时的 HttpResult（可能为 None）
    """

    def __init__(self, message: str, http_result: Any = None):
        super().__init__(message)
        self.http_result = http_result


class APIClientValidationError(APIClientError):
    """
    配置验证异常

    当客户端配置（如 base_url）无效时抛出此异常
    """


class RequestConstructionError(APIClientError):
    """
    请求构建异常

    当请求方法、URL 或请求头不合法，无法构建请求对象时抛出此异常
    """


class TransportError(APIClientError):
    """
    传输层异常

    当传输层执行请求失败时抛出（网络连接失败、DNS 解析失败、取消等），
    具体原因对本层不透明，保存在 ``__cause__`` 中
    """


class TransportTimeoutError(TransportError):
    """请求超时异常"""


class BodyReadError(APIClientError):
    """
    响应体读取异常

    当响应体无法被完整读取时抛出此异常
    """


class DecodeError(APIClientError):
    """
    响应解码异常

    当解码器被调用但解码失败时抛出（如 JSON 格式错误、结构与目标类型不符）
    """


class TypeMismatchError(DecodeError):
    """
    目标类型不匹配异常

    当 text/plain 内容被解码到非 str 类型的目标时抛出此异常
    """


class UnsupportedContentTypeError(APIClientError):
    """
    不支持的内容类型异常

    当非空响应体的内容类型没有注册解码器时抛出此异常

    属性:
        content_type: 规范化后的内容类型
    """

    def __init__(self, content_type: str, http_result: Any = None):
        super().__init__(f"unsupported content type: {content_type}", http_result=http_result)
        self.content_type = content_type


class NonSuccessStatusError(APIClientError):
    """
    非成功状态码异常

    当响应状态码不在 200-299 范围内时返回此异常。
    与其他异常不同，它在解码完成之后产生，解码结果仍会返回给调用方。

    属性:
        status_code: HTTP 状态码
    """

    def __init__(self, status_code: int, http_result: Any = None):
        super().__init__(f"received non-success HTTP status code: {status_code}", http_result=http_result)
        self.status_code = status_code
