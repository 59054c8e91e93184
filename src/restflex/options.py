"""
选项配置模块

提供两层相互独立的配置:
    - ClientOptions: 客户端级配置（base_url、默认请求头、调试开关、传输层、自定义解码器）
    - CallOptions: 单次调用级配置（请求头、查询参数、调试开关）

两层配置都支持两种构建方式，效果等价:
    1. 命名参数: ClientOptions("https://api.example.com", headers={...}, debug=True)
    2. 函数式选项: ClientOptions("https://api.example.com", with_headers({...}), with_debug(True))

函数式选项按传入顺序依次作用在同一个配置对象上，同一字段以最后一次设置为准。

使用示例:
    >>> class GitHubOptions(ClientOptions):
    ...     base_url = "https://api.github.com"
    ...     headers = {"Accept": "application/vnd.github+json"}
    >>>
    >>> options = GitHubOptions(with_debug(True))
    >>> call = CallOptions.build(with_query_params({"page": "2"}))
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable, Mapping
from typing import Any

from restflex.decoders import ContentDecoderRegistry
from restflex.exceptions import APIClientValidationError
from restflex.transport import BaseTransport, RequestsTransport
from restflex.validator import BaseResponseValidator, StatusCodeValidator

logger = logging.getLogger(__name__)


class ClientOptions:
    """
    客户端级配置

    类属性:
        base_url: API 基础 URL（必须通过类属性或构造参数提供）
        headers: 默认请求头，None 表示不设置
        debug: 是否输出调试日志
        transport_class: 传输层类或实例
        content_decoders: 自定义解码器映射（内容类型 -> 解码器）
        basic_auth_header: 预先编码的 Basic 认证凭据（base64(user:password)）
        response_validator_class: 响应验证器类或实例

    构建完成后视为只读，可以被多个并发调用共享。
    """

    # ========== 基础配置 ==========
    base_url: str = ""

    # 默认请求头，调用级请求头会覆盖同名项
    headers: dict[str, str] | None = None

    # 调试开关，开启后每次请求输出一行脱敏后的调试日志
    debug: bool = False

    # 预先编码的 Basic 认证凭据，非空时作为 Authorization 请求头附加
    basic_auth_header: str = ""

    # ========== 可插拔组件配置 ==========
    transport_class: type[BaseTransport] | BaseTransport = RequestsTransport

    # 自定义解码器，键为内容类型，值为解码器实例、解码器类或普通函数
    content_decoders: dict[str, Any] = {}

    response_validator_class: type[BaseResponseValidator] | BaseResponseValidator = StatusCodeValidator

    def __init__(
        self,
        base_url: str | None = None,
        *options: Callable[[ClientOptions], None],
        headers: Mapping[str, str] | None = None,
        debug: bool | None = None,
        transport: BaseTransport | type[BaseTransport] | None = None,
        content_decoders: Mapping[str, Any] | None = None,
        basic_auth_header: str | None = None,
        response_validator: BaseResponseValidator | type[BaseResponseValidator] | None = None,
    ):
        """
        初始化客户端配置

        参数:
            base_url: API 基础 URL（None 时使用类属性）
            *options: 函数式选项，按顺序应用
            headers: 默认请求头
            debug: 调试开关
            transport: 传输层类或实例
            content_decoders: 自定义解码器映射，与类属性合并
            basic_auth_header: 预先编码的 Basic 认证凭据
            response_validator: 响应验证器类或实例

        执行步骤:
            1. 合并类属性与命名参数
            2. 按顺序应用函数式选项
            3. 验证 base_url
            4. 一次性构建解码器注册表

        异常:
            APIClientValidationError: 当 base_url 为空或组件配置无效时抛出
        """
        # ========== 步骤1: 合并类属性与命名参数 ==========
        self.base_url = base_url if base_url is not None else self.base_url
        if headers is not None:
            self.headers = dict(headers)
        elif self.headers is not None:
            self.headers = dict(self.headers)
        self.debug = debug if debug is not None else self.debug
        self.basic_auth_header = basic_auth_header if basic_auth_header is not None else self.basic_auth_header
        self.content_decoders = {**self.content_decoders, **(content_decoders or {})}
        self.transport = self._resolve_component(transport, "transport_class", BaseTransport)
        self.response_validator = self._resolve_component(
            response_validator, "response_validator_class", BaseResponseValidator
        )

        # ========== 步骤2: 应用函数式选项 ==========
        for option in options:
            option(self)

        # ========== 步骤3: 验证 base_url ==========
        if not self.base_url:
            raise APIClientValidationError("base_url must be provided as an argument or a class attribute.")

        # ========== 步骤4: 构建解码器注册表 ==========
        self.decoder_registry = ContentDecoderRegistry(self.content_decoders)

    def _resolve_component(self, component, class_attr_name, base_class):
        """
        统一的组件解析方法

        参数:
            component: 传入的组件配置（类或实例）
            class_attr_name: 类属性名称
            base_class: 基类类型

        返回:
            组件实例
        """
        # 优先使用传入配置，否则使用类级别配置
        source = component if component is not None else getattr(self, class_attr_name)

        if isinstance(source, type) and issubclass(source, base_class):
            return source()

        if isinstance(source, base_class):
            return source

        raise APIClientValidationError(f"{class_attr_name} must be a {base_class.__name__} subclass or instance")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self.base_url!r}, debug={self.debug!r})"


ClientOption = Callable[[ClientOptions], None]


def with_headers(headers: Mapping[str, str]) -> ClientOption:
    """设置默认请求头（整体替换）"""

    def apply(options: ClientOptions) -> None:
        options.headers = dict(headers)

    return apply


def with_debug(debug: bool) -> ClientOption:
    def apply(options: ClientOptions) -> None:
        options.debug = debug

    return apply


def with_transport(transport: BaseTransport) -> ClientOption:
    def apply(options: ClientOptions) -> None:
        options.transport = transport

    return apply


def with_content_decoder(content_type: str, decoder: Any) -> ClientOption:
    """注册一个自定义解码器，覆盖同一内容类型的内置解码器"""

    def apply(options: ClientOptions) -> None:
        options.content_decoders[content_type] = decoder

    return apply


def with_basic_auth(username: str, password: str) -> ClientOption:
    """保存 base64(username:password) 编码后的 Basic 认证凭据"""

    def apply(options: ClientOptions) -> None:
        credentials = f"{username}:{password}".encode()
        options.basic_auth_header = base64.b64encode(credentials).decode("ascii")

    return apply


class CallOptions:
    """
    单次调用级配置

    每次动词调用都会重新构建，不会在调用之间共享，也不会修改 ClientOptions。

    属性:
        debug: 调试开关，只能开启、不能关闭客户端级调试
        headers: 调用级请求头，覆盖客户端同名请求头
        query_params: 查询参数
    """

    def __init__(
        self,
        headers: Mapping[str, str] | None = None,
        query_params: Mapping[str, str] | None = None,
        debug: bool = False,
    ):
        self.headers = dict(headers or {})
        self.query_params = dict(query_params or {})
        self.debug = debug

    @classmethod
    def build(cls, *options: Callable[[CallOptions], None]) -> CallOptions:
        """在零值配置上按顺序应用函数式选项"""
        call_options = cls()
        for option in options:
            option(call_options)
        return call_options

    def __repr__(self) -> str:
        return f"CallOptions(headers={self.headers!r}, query_params={self.query_params!r}, debug={self.debug!r})"


CallOption = Callable[[CallOptions], None]


def with_call_headers(headers: Mapping[str, str]) -> CallOption:
    def apply(options: CallOptions) -> None:
        options.headers = dict(headers)

    return apply


def with_query_params(params: Mapping[str, str]) -> CallOption:
    def apply(options: CallOptions) -> None:
        options.query_params = dict(params)

    return apply


def with_call_debug(debug: bool) -> CallOption:
    def apply(options: CallOptions) -> None:
        options.debug = debug

    return apply
