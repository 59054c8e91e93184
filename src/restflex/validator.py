"""响应验证器模块

提供响应状态验证的基类和默认实现。验证在解码完成之后执行，不会中断响应体的读取和解码。
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from restflex.constants import SUCCESS_STATUS_MAX, SUCCESS_STATUS_MIN
from restflex.exceptions import NonSuccessStatusError
from restflex.result import HttpResult

logger = logging.getLogger(__name__)


class BaseResponseValidator(ABC):
    """
    响应验证器基类

    用于验证 HTTP 响应是否符合预期，不符合时抛出异常
    """

    @abstractmethod
    def validate(self, http_result: HttpResult, data: Any = None) -> None:
        """
        验证响应

        参数:
            http_result: 已填充状态码、响应头和响应体的 HttpResult
            data: 解码后的响应数据

        异常:
            APIClientError 子类: 当验证失败时抛出
        """


class StatusCodeValidator(BaseResponseValidator):
    """
    状态码验证器

    验证响应状态码是否在 [min_code, max_code] 闭区间内，默认 200-299

    使用示例:
        >>> validator = StatusCodeValidator()
        >>> validator.validate(HttpResult(status_code=500))
        Traceback (most recent call last):
        ...
        NonSuccessStatusError: received non-success HTTP status code: 500
    """

    def __init__(self, min_code: int = SUCCESS_STATUS_MIN, max_code: int = SUCCESS_STATUS_MAX):
        self.min_code = min_code
        self.max_code = max_code

    def validate(self, http_result: HttpResult, data: Any = None) -> None:
        status_code = http_result.status_code

        if not self.min_code <= status_code <= self.max_code:
            raise NonSuccessStatusError(status_code, http_result=http_result)
