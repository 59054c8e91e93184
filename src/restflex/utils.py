"""工具函数模块

提供调试日志所需的请求头脱敏、请求 ID 生成等实用功能
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Iterable, Mapping

from restflex.constants import REDACTED, SENSITIVE_HEADER_TOKENS


def is_sensitive_header(name: str, sensitive_tokens: Iterable[str] | None = None) -> bool:
    """判断请求头名称是否包含任一敏感片段（不区分大小写的子串匹配）"""
    if sensitive_tokens is None:
        sensitive_tokens = SENSITIVE_HEADER_TOKENS

    lowered = name.lower()
    return any(token.lower() in lowered for token in sensitive_tokens)


def redact_headers(
    headers: Mapping[str, str],
    sensitive_tokens: Iterable[str] | None = None,
    mask: str = REDACTED,
) -> dict[str, str]:
    """
    脱敏请求头中的敏感信息，仅用于日志输出

    与按名称精确匹配不同，这里只要请求头名称包含敏感片段即脱敏，
    例如 ``X-Api-Key``、``Proxy-Authorization``、``Set-Cookie`` 都会被替换。

    参数:
        headers: 原始请求头映射
        sensitive_tokens: 敏感片段集合，不区分大小写。None 时使用默认集合
        mask: 脱敏后的替换字符串

    返回:
        脱敏后的请求头字典（新字典，不修改原映射）

    示例:
        >>> redact_headers({"Authorization": "Bearer token123", "Accept": "application/json"})
        {"Authorization": "REDACTED", "Accept": "application/json"}
    """
    # 先物化为元组，避免生成器被多次迭代
    tokens = tuple(SENSITIVE_HEADER_TOKENS if sensitive_tokens is None else sensitive_tokens)

    return {k: mask if is_sensitive_header(k, tokens) else v for k, v in headers.items()}


def generate_request_id(suffix=None) -> str:
    """生成全局唯一的请求 ID"""
    timestamp = int(time.time() * 1000)  # 毫秒级时间戳
    short_uuid = uuid.uuid4().hex[:8]
    if suffix is None:
        return f"REQ-{timestamp}-{short_uuid}"
    return f"REQ-{timestamp}-{short_uuid}-{suffix}"
