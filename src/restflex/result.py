"""
调用结果模块

定义一次 HTTP 交换的原始结果 HttpResult，以及动词方法统一返回的 CallResult 三元组
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple

from requests.structures import CaseInsensitiveDict

from restflex.exceptions import APIClientError


@dataclass
class HttpResult:
    """
    一次 HTTP 交换的原始结果

    属性:
        content_type: 服务端返回的 Content-Type，原样保存，不做解析
        body: 原始响应体字节，即使解码或状态校验失败也会保存
        status_code: HTTP 状态码，请求未执行时为 0
        headers: 完整的响应头（不区分大小写）
    """

    content_type: str = ""
    body: bytes = b""
    status_code: int = 0
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)


class CallResult(NamedTuple):
    """
    动词方法的返回值，可以直接解包为 ``data, http_result, error``

    使用示例:
        >>> data, http_result, error = get(client, "/users/1", result_type=User)
        >>> if error is not None:
        ...     logger.error(f"Request failed with {http_result.status_code}: {error}")
    """

    data: Any
    http_result: HttpResult
    error: APIClientError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> Any:
        """存在错误时抛出该错误，否则返回解码后的数据"""
        if self.error is not None:
            raise self.error
        return self.data
