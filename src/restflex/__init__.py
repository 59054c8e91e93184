"""
restflex REST 客户端模块

按内容类型自动解码响应的轻量 REST 客户端

主要组件:
    - get/post/put/patch/delete: 动词入口，返回 CallResult(data, http_result, error)
    - RestClient: 绑定客户端配置的客户端类
    - ClientOptions/CallOptions: 客户端级与调用级配置
    - 异常类: APIClientError 及其子类
    - 解码器: JSONContentDecoder, XMLContentDecoder, TextContentDecoder
    - 传输层: RequestsTransport, MockTransport

使用示例:
    >>> from restflex import ClientOptions, get, with_query_params
    >>>
    >>> options = ClientOptions("https://api.example.com")
    >>> users, http_result, error = get(options, "/users", with_query_params({"page": "1"}), result_type=list)
"""

# 核心客户端
from restflex.client import (
    RestClient,
    build_request,
    build_url,
    delete,
    execute_request,
    get,
    merge_headers,
    patch,
    post,
    put,
    read_result,
    request,
)

# 异常类
from restflex.exceptions import (
    APIClientError,
    APIClientValidationError,
    BodyReadError,
    DecodeError,
    NonSuccessStatusError,
    RequestConstructionError,
    TransportError,
    TransportTimeoutError,
    TypeMismatchError,
    UnsupportedContentTypeError,
)

# 配置选项
from restflex.options import (
    CallOptions,
    ClientOptions,
    with_basic_auth,
    with_call_debug,
    with_call_headers,
    with_content_decoder,
    with_debug,
    with_headers,
    with_query_params,
    with_transport,
)

# 响应解码器
from restflex.decoders import (
    BaseContentDecoder,
    CallableContentDecoder,
    ContentDecoderRegistry,
    JSONContentDecoder,
    TextContentDecoder,
    XMLContentDecoder,
    normalize_content_type,
)

# 结果
from restflex.result import CallResult, HttpResult

# 传输层
from restflex.transport import BaseTransport, MockTransport, RequestsTransport

# 响应验证器
from restflex.validator import BaseResponseValidator, StatusCodeValidator

# 工具函数
from restflex.utils import redact_headers

__all__ = [
    # 动词入口
    "get",
    "post",
    "put",
    "patch",
    "delete",
    "request",
    "RestClient",
    # 管道阶段
    "build_url",
    "merge_headers",
    "build_request",
    "execute_request",
    "read_result",
    # 异常
    "APIClientError",
    "APIClientValidationError",
    "RequestConstructionError",
    "TransportError",
    "TransportTimeoutError",
    "BodyReadError",
    "DecodeError",
    "TypeMismatchError",
    "UnsupportedContentTypeError",
    "NonSuccessStatusError",
    # 配置
    "ClientOptions",
    "CallOptions",
    "with_headers",
    "with_debug",
    "with_transport",
    "with_content_decoder",
    "with_basic_auth",
    "with_call_headers",
    "with_query_params",
    "with_call_debug",
    # 解码器
    "BaseContentDecoder",
    "JSONContentDecoder",
    "XMLContentDecoder",
    "TextContentDecoder",
    "CallableContentDecoder",
    "ContentDecoderRegistry",
    "normalize_content_type",
    # 结果
    "HttpResult",
    "CallResult",
    # 传输层
    "BaseTransport",
    "RequestsTransport",
    "MockTransport",
    # 验证器
    "BaseResponseValidator",
    "StatusCodeValidator",
    # 工具函数
    "redact_headers",
]

__version__ = "1.0.0"
