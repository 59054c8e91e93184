"""
传输层模块

定义最小的传输能力接口 ``send(request) -> response``，并提供基于 requests.Session
的默认实现和用于测试的 MockTransport。

传输层只负责把已构建好的 requests.PreparedRequest 发送出去并返回尚未读取响应体的
requests.Response；超时、取消、连接管理等都由具体实现负责。
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import requests

from restflex.constants import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class BaseTransport(ABC):
    """传输层基类，定义发送请求的接口。"""

    @abstractmethod
    def send(self, request: requests.PreparedRequest) -> requests.Response:
        """
        发送请求并返回响应

        参数:
            request: 已构建好的请求对象

        返回:
            响应对象，响应体尚未被读取

        异常:
            任意异常都会被调用方包装为 TransportError
        """

    def close(self) -> None:
        """释放传输层持有的资源，默认无操作"""


class RequestsTransport(BaseTransport):
    """
    基于 requests.Session 的默认传输层

    以流式模式发送请求，响应体由响应管道统一读取和关闭。

    参数:
        session: 复用的 Session 对象，None 时自动创建
        timeout: 请求超时时间（秒）
        verify: SSL 证书验证开关
    """

    timeout: float = DEFAULT_TIMEOUT
    verify: bool = True

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float | None = None,
        verify: bool | None = None,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else self.timeout
        self.verify = verify if verify is not None else self.verify

    def send(self, request: requests.PreparedRequest) -> requests.Response:
        return self.session.send(request, stream=True, timeout=self.timeout, verify=self.verify)

    def close(self) -> None:
        if self.session:
            self.session.close()
            logger.info("Session closed")


class MockTransport(BaseTransport):
    """
    返回固定响应或固定异常的传输层，用于测试替身

    参数:
        response: 固定返回的响应对象
        error: 固定抛出的异常，优先于 response

    属性:
        requests: 按顺序记录收到的请求
    """

    def __init__(self, response: requests.Response | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.requests: list[requests.PreparedRequest] = []

    def send(self, request: requests.PreparedRequest) -> requests.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response
