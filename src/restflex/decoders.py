"""
响应解码器模块

提供按内容类型（MIME type）分派的响应解码器，以及每个客户端配置独立持有的解码器注册表。

内置解码器:
    - application/json, application/problem+json -> JSONContentDecoder
    - application/xml, text/xml                    -> XMLContentDecoder
    - text/plain                                   -> TextContentDecoder

目标类型（result_type）说明:
    - None: 返回解码器的原生结果（JSON 为 Python 对象，XML 为 Element）
    - str/bytes/dict/list/int/float/bool: 解码结果必须已是该类型
    - dataclass: 由解码后的映射构建，忽略未知字段
    - DRF Serializer 子类: 使用序列化器验证，返回 validated_data
"""

from __future__ import annotations

import dataclasses
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any
from xml.etree import ElementTree

from restflex.constants import (
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_PROBLEM_JSON,
    CONTENT_TYPE_TEXT,
    CONTENT_TYPE_TEXT_XML,
    CONTENT_TYPE_XML,
)
from restflex.exceptions import APIClientValidationError, TypeMismatchError

logger = logging.getLogger(__name__)

# 零值可以直接通过无参构造得到的内置类型
BUILTIN_RESULT_TYPES = (str, bytes, dict, list, int, float, bool)

DecoderFunc = Callable[[bytes, Any], Any]


def normalize_content_type(content_type: str | None) -> str:
    """去掉内容类型中 ``;`` 之后的参数并去除首尾空白，得到注册表查找键"""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip()


def zero_value(result_type: Any = None) -> Any:
    """返回目标类型的零值：内置类型为无参构造结果，其他类型为 None"""
    if result_type in BUILTIN_RESULT_TYPES:
        return result_type()
    return None


def _is_serializer_class(result_type: Any) -> bool:
    if not isinstance(result_type, type) or result_type in BUILTIN_RESULT_TYPES:
        return False

    from rest_framework import serializers

    return issubclass(result_type, serializers.BaseSerializer)


def build_result(data: Any, result_type: Any = None) -> Any:
    """
    将解码器产出的原生数据转换为调用方期望的目标类型

    参数:
        data: 解码后的原生数据
        result_type: 目标类型，None 表示不转换

    返回:
        目标类型的结果

    异常:
        TypeError: 数据结构与目标类型不符
        rest_framework.serializers.ValidationError: 序列化器验证失败
    """
    if result_type is None or result_type is Any:
        return data

    if result_type in BUILTIN_RESULT_TYPES:
        # bool 是 int 的子类，这里要求精确匹配
        if result_type is float and type(data) is int:
            return float(data)
        if type(data) is bool and result_type is not bool:
            raise TypeError(f"cannot decode bool into {result_type.__name__}")
        if not isinstance(data, result_type):
            raise TypeError(f"cannot decode {type(data).__name__} into {result_type.__name__}")
        return data

    if dataclasses.is_dataclass(result_type):
        if not isinstance(data, Mapping):
            raise TypeError(f"cannot decode {type(data).__name__} into {result_type.__name__}")
        field_names = {f.name for f in dataclasses.fields(result_type) if f.init}
        return result_type(**{k: v for k, v in data.items() if k in field_names})

    if _is_serializer_class(result_type):
        serializer = result_type(data=data, many=isinstance(data, list))
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    if isinstance(data, Mapping):
        return result_type(**data)
    return result_type(data)


class BaseContentDecoder(ABC):
    """响应解码器基类，定义将响应体字节解码为目标类型的接口。"""

    @abstractmethod
    def decode(self, body: bytes, result_type: Any = None) -> Any:
        """
        解码响应体

        参数:
            body: 完整的响应体字节，保证非空
            result_type: 调用方期望的目标类型

        返回:
            解码后的结果

        异常:
            任意异常都会被响应管道包装为 DecodeError
        """


class JSONContentDecoder(BaseContentDecoder):
    """解析响应为 JSON 数据"""

    def decode(self, body: bytes, result_type: Any = None) -> Any:
        logger.debug("Decoding response body as JSON")
        return build_result(json.loads(body), result_type)


def _local_name(tag: str) -> str:
    # 去掉 {namespace} 前缀
    return tag.rsplit("}", 1)[-1]


def element_to_data(element: ElementTree.Element) -> Any:
    """
    将 XML 元素转换为 Python 数据

    叶子元素转换为其文本；含子元素的元素转换为字典，属性与子元素按本地名称作为键，
    重复出现的子元素收集为列表。
    """
    children = list(element)
    if not children and not element.attrib:
        return element.text or ""

    result: dict[str, Any] = {_local_name(k): v for k, v in element.attrib.items()}
    if not children:
        if element.text and element.text.strip():
            result["text"] = element.text
        return result

    for child in children:
        key = _local_name(child.tag)
        value = element_to_data(child)
        if key in result and isinstance(result[key], list):
            result[key].append(value)
        elif key in result:
            result[key] = [result[key], value]
        else:
            result[key] = value
    return result


class XMLContentDecoder(BaseContentDecoder):
    """解析响应为 XML 数据"""

    def decode(self, body: bytes, result_type: Any = None) -> Any:
        logger.debug("Decoding response body as XML")
        root = ElementTree.fromstring(body)

        if result_type is None or result_type is ElementTree.Element:
            return root
        if result_type is str:
            return "".join(root.itertext())
        return build_result(element_to_data(root), result_type)


class TextContentDecoder(BaseContentDecoder):
    """
    解析响应为纯文本

    目标类型必须为 str，否则抛出 TypeMismatchError；
    文本按原样复制，不做任何裁剪。
    """

    encoding: str = "utf-8"

    def decode(self, body: bytes, result_type: Any = None) -> str:
        if result_type is not str:
            type_name = getattr(result_type, "__name__", repr(result_type))
            raise TypeMismatchError(f"result type must be str for text/plain content, got {type_name}")

        logger.debug("Decoding response body as text")
        # surrogateescape 保证非法字节也能原样保留
        return body.decode(self.encoding, errors="surrogateescape")


class CallableContentDecoder(BaseContentDecoder):
    """将普通函数 ``func(body, result_type)`` 包装为解码器"""

    def __init__(self, func: DecoderFunc):
        self.func = func

    def decode(self, body: bytes, result_type: Any = None) -> Any:
        return self.func(body, result_type)


class ContentDecoderRegistry:
    """
    解码器注册表

    在客户端配置构建时一次性合并内置解码器与自定义解码器，之后只读。
    查找键始终是规范化后的内容类型；自定义解码器覆盖同名内置解码器。

    参数:
        overrides: 自定义解码器映射，值可以是解码器实例、解码器类或普通函数
    """

    builtin_decoders: dict[str, type[BaseContentDecoder]] = {
        CONTENT_TYPE_JSON: JSONContentDecoder,
        CONTENT_TYPE_PROBLEM_JSON: JSONContentDecoder,
        CONTENT_TYPE_XML: XMLContentDecoder,
        CONTENT_TYPE_TEXT_XML: XMLContentDecoder,
        CONTENT_TYPE_TEXT: TextContentDecoder,
    }

    def __init__(self, overrides: Mapping[str, Any] | None = None):
        self._decoders: dict[str, BaseContentDecoder] = {}

        for content_type, decoder in self.builtin_decoders.items():
            self.register(content_type, decoder)

        for content_type, decoder in (overrides or {}).items():
            self.register(content_type, decoder)

    @staticmethod
    def _resolve_decoder(decoder: Any) -> BaseContentDecoder:
        """
        统一的解码器解析方法

        参数:
            decoder: 解码器实例、解码器类或普通函数

        返回:
            解码器实例

        异常:
            APIClientValidationError: 当传入的对象无法作为解码器使用时抛出
        """
        if isinstance(decoder, BaseContentDecoder):
            return decoder

        if isinstance(decoder, type) and issubclass(decoder, BaseContentDecoder):
            return decoder()

        if callable(decoder):
            return CallableContentDecoder(decoder)

        raise APIClientValidationError(
            f"decoder must be a BaseContentDecoder subclass, instance or callable, got {type(decoder).__name__}"
        )

    def register(self, content_type: str, decoder: Any) -> None:
        key = normalize_content_type(content_type)
        self._decoders[key] = self._resolve_decoder(decoder)

    def get(self, content_type: str | None) -> BaseContentDecoder | None:
        """按规范化后的内容类型查找解码器，未注册时返回 None"""
        return self._decoders.get(normalize_content_type(content_type))

    def __contains__(self, content_type: str) -> bool:
        return normalize_content_type(content_type) in self._decoders

    @property
    def content_types(self) -> list[str]:
        return list(self._decoders)
