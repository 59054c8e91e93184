"""
通用测试 Fixture 定义

提供测试所需的响应构造工具、客户端配置和 Mock 传输层
"""

import io

import django
import pytest
import requests
from django.conf import settings
from requests.structures import CaseInsensitiveDict

# 配置 Django 设置（DRF 序列化器需要）
if not settings.configured:
    settings.configure(
        DEBUG=True,
        SECRET_KEY="test-secret-key",
        USE_I18N=True,
        USE_TZ=True,
    )
    django.setup()

from restflex.options import ClientOptions  # noqa: E402
from restflex.transport import MockTransport  # noqa: E402


BASE_URL = "https://api.example.com"


class TrackingRaw(io.BytesIO):
    """记录连接释放次数的原始响应体"""

    def __init__(self, body: bytes = b""):
        super().__init__(body)
        self.release_count = 0

    def release_conn(self):
        self.release_count += 1


class FailingRaw:
    """读取时抛出异常的原始响应体"""

    def __init__(self):
        self.release_count = 0

    def read(self, *args, **kwargs):
        raise OSError("connection reset by peer")

    def close(self):
        pass

    def release_conn(self):
        self.release_count += 1


def build_response(status_code=200, body=b"", headers=None, raw=None):
    """构造响应体尚未读取的 requests.Response"""
    response = requests.Response()
    response.status_code = status_code
    response.headers = CaseInsensitiveDict(headers or {})
    response.raw = raw if raw is not None else TrackingRaw(body)
    response.url = f"{BASE_URL}/test"
    response.reason = "OK" if 200 <= status_code < 300 else "Error"
    return response


@pytest.fixture
def make_response():
    """返回响应构造函数"""
    return build_response


@pytest.fixture
def failing_raw():
    """读取时抛出异常的原始响应体"""
    return FailingRaw()


@pytest.fixture
def mock_client():
    """返回基于 MockTransport 的客户端配置构造函数"""

    def factory(response=None, error=None, **kwargs):
        transport = MockTransport(response=response, error=error)
        return ClientOptions(BASE_URL, transport=transport, **kwargs)

    return factory


@pytest.fixture
def client_options():
    """默认传输层的客户端配置"""
    return ClientOptions(BASE_URL)
