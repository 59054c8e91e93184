"""REST 客户端核心模块

提供请求构建、传输执行、按内容类型解码响应、状态校验的完整管道，以及
GET/POST/PUT/PATCH/DELETE 五个动词入口。

每次动词调用都是一个同步阻塞的流程:
    构建请求 -> 传输执行 -> 读取响应体 -> 解码 -> 校验状态码

任一阶段失败都会短路后续阶段，但仍会返回到目前为止已填充的 HttpResult。
状态码校验是例外：它总在解码之后执行，解码结果会随 NonSuccessStatusError 一并返回。

使用示例:
    >>> options = ClientOptions("https://api.example.com", with_headers({"Accept": "application/json"}))
    >>> user, http_result, error = get(options, "/users/1", with_query_params({"expand": "teams"}), result_type=User)
    >>>
    >>> with RestClient(base_url="https://api.example.com") as client:
    ...     data = client.post("/users", b'{"name": "Adam"}').raise_for_error()
"""

import logging
import re
from collections.abc import Iterable
from typing import IO, Any, TypeAlias, Union
from urllib.parse import quote_plus

import requests
from requests.structures import CaseInsensitiveDict

from restflex.constants import (
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HTTP_METHOD_DELETE,
    HTTP_METHOD_GET,
    HTTP_METHOD_PATCH,
    HTTP_METHOD_POST,
    HTTP_METHOD_PUT,
)
from restflex.decoders import normalize_content_type, zero_value
from restflex.exceptions import (
    APIClientError,
    BodyReadError,
    DecodeError,
    RequestConstructionError,
    TransportError,
    TransportTimeoutError,
    UnsupportedContentTypeError,
)
from restflex.options import CallOption, CallOptions, ClientOptions
from restflex.result import CallResult, HttpResult
from restflex.utils import generate_request_id, redact_headers

# 配置日志
logger = logging.getLogger(__name__)

# 请求体可以是字节、字符串、文件对象或字节迭代器
RequestBody: TypeAlias = Union[bytes, str, IO, Iterable[bytes], None]

# RFC 7230 token
_METHOD_PATTERN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


# ========== 请求构建 ==========


def build_url(base_url: str, path: str, query_params: dict[str, str] | None = None) -> str:
    """
    构建完整的请求 URL

    参数:
        base_url: 基础 URL
        path: 请求路径，直接拼接在 base_url 之后
        query_params: 查询参数，键和值分别进行表单风格的百分号转义

    返回:
        完整的 URL

    示例:
        >>> build_url("https://api.example.com", "/search", {"q": "a b"})
        "https://api.example.com/search?q=a+b"
    """
    url = base_url + path

    if query_params:
        url += "?" + "&".join(f"{quote_plus(str(k))}={quote_plus(str(v))}" for k, v in query_params.items())

    return url


def merge_headers(
    client_headers: dict[str, str] | None,
    call_headers: dict[str, str] | None,
    basic_auth_header: str = "",
) -> CaseInsensitiveDict:
    """
    合并请求头

    合并顺序：Basic 认证 -> 客户端请求头 -> 调用级请求头，后者覆盖前者
    """
    headers = CaseInsensitiveDict()

    if basic_auth_header:
        headers[HEADER_AUTHORIZATION] = f"Basic {basic_auth_header}"

    for key, value in (client_headers or {}).items():
        headers[key] = value

    for key, value in (call_headers or {}).items():
        headers[key] = value

    return headers


def build_request(
    client: ClientOptions,
    method: str,
    path: str,
    body: RequestBody = None,
    call_options: CallOptions | None = None,
    request_id: str | None = None,
) -> requests.PreparedRequest:
    """
    合并客户端配置与调用级配置，构建待发送的请求

    参数:
        client: 客户端配置
        method: HTTP 方法
        path: 请求路径
        body: 请求体（GET/DELETE 为 None）
        call_options: 调用级配置
        request_id: 请求唯一标识符，用于日志追踪

    返回:
        requests.PreparedRequest 对象

    异常:
        RequestConstructionError: 当请求方法、URL 或请求头不合法时抛出
    """
    call_options = call_options or CallOptions()
    request_id = request_id or generate_request_id()

    url = build_url(client.base_url, path, call_options.query_params)
    headers = merge_headers(client.headers, call_options.headers, client.basic_auth_header)

    if not method or not _METHOD_PATTERN.fullmatch(method):
        raise RequestConstructionError(f"failed to create request: invalid method {method!r}")

    try:
        prepared = requests.Request(method=method, url=url, headers=headers, data=body).prepare()
    except (requests.exceptions.RequestException, ValueError) as e:
        raise RequestConstructionError(f"failed to create request: {e}") from e

    # 调用级 debug 只能开启、不能关闭客户端级 debug
    if call_options.debug or client.debug:
        logger.debug(f"[{request_id}] {method} request to {url}, headers: {redact_headers(prepared.headers)}")

    return prepared


# ========== 传输执行 ==========


def execute_request(
    client: ClientOptions,
    prepared: requests.PreparedRequest,
    request_id: str | None = None,
) -> tuple[requests.Response, HttpResult]:
    """
    通过客户端配置的传输层执行请求

    返回的响应体尚未读取，调用方必须负责读取并关闭响应。

    返回:
        (响应对象, 已填充状态码/响应头/内容类型的 HttpResult)

    异常:
        TransportTimeoutError: 请求超时
        TransportError: 传输层其他失败
    """
    try:
        response = client.transport.send(prepared)
    except requests.exceptions.Timeout as e:
        raise TransportTimeoutError(f"failed to execute request: {e}") from e
    except Exception as e:
        # 传输层可插拔，任何失败原因都视为不透明的传输错误
        raise TransportError(f"failed to execute request: {e}") from e

    if response is None:
        raise TransportError("failed to execute request: transport returned no response")

    headers = CaseInsensitiveDict(response.headers or {})
    http_result = HttpResult(
        content_type=headers.get(HEADER_CONTENT_TYPE) or "",
        status_code=response.status_code,
        headers=headers,
    )
    logger.debug(f"[{request_id}] Received {response.status_code} response")

    return response, http_result


# ========== 响应解码 ==========


def read_result(
    client: ClientOptions,
    response: requests.Response,
    http_result: HttpResult,
    result_type: Any = None,
    request_id: str | None = None,
) -> Any:
    """
    读取完整响应体并按内容类型解码

    原始响应体总是在解码前写入 http_result.body，即使后续解码失败调用方也能看到。

    参数:
        client: 客户端配置（提供解码器注册表）
        response: 响应体尚未读取的响应对象
        http_result: 由 execute_request 填充的 HttpResult
        result_type: 期望的目标类型

    返回:
        解码结果；没有内容类型或响应体为空时返回目标类型的零值

    异常:
        BodyReadError: 响应体无法完整读取
        DecodeError: 解码器执行失败（TypeMismatchError 为其子类）
        UnsupportedContentTypeError: 非空响应体的内容类型没有注册解码器
    """
    try:
        body = response.content or b""
    except (requests.exceptions.RequestException, OSError, RuntimeError) as e:
        raise BodyReadError(f"failed to read response body: {e}", http_result=http_result) from e

    http_result.body = body

    content_type = normalize_content_type(http_result.content_type)
    if not content_type:
        return zero_value(result_type)

    decoder = client.decoder_registry.get(content_type)

    if decoder is None:
        if body:
            raise UnsupportedContentTypeError(content_type, http_result=http_result)
        return zero_value(result_type)

    if not body:
        return zero_value(result_type)

    try:
        return decoder.decode(body, result_type)
    except DecodeError as e:
        e.http_result = http_result
        raise
    except Exception as e:
        # 解码器可插拔，任何失败都包装为 DecodeError
        raise DecodeError(f"failed to decode {content_type} response: {e}", http_result=http_result) from e


# ========== 动词入口 ==========


def request(
    client: ClientOptions,
    method: str,
    path: str,
    body: RequestBody = None,
    *options: CallOption,
    result_type: Any = None,
) -> CallResult:
    """
    执行一次完整的请求管道，所有动词方法共用

    参数:
        client: 客户端配置
        method: HTTP 方法
        path: 请求路径
        body: 请求体
        *options: 调用级函数式选项
        result_type: 期望的目标类型

    返回:
        CallResult(data, http_result, error)

    执行步骤:
        1. 在零值配置上应用调用级选项
        2. 构建请求
        3. 通过传输层执行请求
        4. 读取并解码响应体（finally 中关闭响应）
        5. 校验状态码
        6. 捕获 APIClientError 并作为返回值的一部分返回
    """
    call_options = CallOptions.build(*options)
    request_id = generate_request_id()
    http_result = HttpResult()
    data = zero_value(result_type)

    try:
        prepared = build_request(client, method, path, body, call_options, request_id=request_id)
        response, http_result = execute_request(client, prepared, request_id=request_id)

        try:
            data = read_result(client, response, http_result, result_type, request_id=request_id)
        finally:
            response.close()

        client.response_validator.validate(http_result, data)
    except APIClientError as error:
        if error.http_result is None:
            error.http_result = http_result
        logger.error(f"[{request_id}] {method} {path} failed: {error}")
        return CallResult(data, http_result, error)

    return CallResult(data, http_result, None)


def get(client: ClientOptions, path: str, *options: CallOption, result_type: Any = None) -> CallResult:
    """发送 GET 请求"""
    return request(client, HTTP_METHOD_GET, path, None, *options, result_type=result_type)


def post(
    client: ClientOptions, path: str, body: RequestBody = None, *options: CallOption, result_type: Any = None
) -> CallResult:
    """发送 POST 请求"""
    return request(client, HTTP_METHOD_POST, path, body, *options, result_type=result_type)


def put(
    client: ClientOptions, path: str, body: RequestBody = None, *options: CallOption, result_type: Any = None
) -> CallResult:
    """发送 PUT 请求"""
    return request(client, HTTP_METHOD_PUT, path, body, *options, result_type=result_type)


def patch(
    client: ClientOptions, path: str, body: RequestBody = None, *options: CallOption, result_type: Any = None
) -> CallResult:
    """发送 PATCH 请求"""
    return request(client, HTTP_METHOD_PATCH, path, body, *options, result_type=result_type)


def delete(client: ClientOptions, path: str, *options: CallOption, result_type: Any = None) -> CallResult:
    """发送 DELETE 请求"""
    return request(client, HTTP_METHOD_DELETE, path, None, *options, result_type=result_type)


class RestClient:
    """
    绑定一份 ClientOptions 的 REST 客户端

    所有方法都委托给模块级的动词函数，额外提供传输层资源的关闭和上下文管理器支持。

    参数:
        options: 已构建的客户端配置，None 时使用 option_kwargs 构建
        **option_kwargs: 传递给 ClientOptions 构造函数的参数

    使用示例:
        >>> with RestClient(base_url="https://api.example.com", debug=True) as client:
        ...     users, http_result, error = client.get("/users", result_type=list)
    """

    options_class: type[ClientOptions] = ClientOptions

    def __init__(self, options: ClientOptions | None = None, **option_kwargs):
        self.options = options if options is not None else self.options_class(**option_kwargs)

    def request(
        self, method: str, path: str, body: RequestBody = None, *options: CallOption, result_type: Any = None
    ) -> CallResult:
        return request(self.options, method, path, body, *options, result_type=result_type)

    def get(self, path: str, *options: CallOption, result_type: Any = None) -> CallResult:
        return get(self.options, path, *options, result_type=result_type)

    def post(self, path: str, body: RequestBody = None, *options: CallOption, result_type: Any = None) -> CallResult:
        return post(self.options, path, body, *options, result_type=result_type)

    def put(self, path: str, body: RequestBody = None, *options: CallOption, result_type: Any = None) -> CallResult:
        return put(self.options, path, body, *options, result_type=result_type)

    def patch(self, path: str, body: RequestBody = None, *options: CallOption, result_type: Any = None) -> CallResult:
        return patch(self.options, path, body, *options, result_type=result_type)

    def delete(self, path: str, *options: CallOption, result_type: Any = None) -> CallResult:
        return delete(self.options, path, *options, result_type=result_type)

    def close(self):
        """关闭传输层，释放连接池资源"""
        self.options.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
