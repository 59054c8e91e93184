"""
REST 客户端常量配置模块

定义客户端使用的常量、默认配置等
"""

# HTTP 方法常量
HTTP_METHOD_GET = "GET"
HTTP_METHOD_POST = "POST"
HTTP_METHOD_PUT = "PUT"
HTTP_METHOD_DELETE = "DELETE"
HTTP_METHOD_PATCH = "PATCH"

# 默认配置
DEFAULT_TIMEOUT = 30  # 默认超时时间（秒）

# 成功状态码范围（闭区间）
SUCCESS_STATUS_MIN = 200
SUCCESS_STATUS_MAX = 299

# 内容类型常量
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_PROBLEM_JSON = "application/problem+json"
CONTENT_TYPE_XML = "application/xml"
CONTENT_TYPE_TEXT_XML = "text/xml"
CONTENT_TYPE_TEXT = "text/plain"

# 请求头名称
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_AUTHORIZATION = "Authorization"

# 日志脱敏：请求头名称包含以下任一片段（不区分大小写）即视为敏感
SENSITIVE_HEADER_TOKENS = (
    "authorization",
    "auth",
    "cookie",
    "key",
    "token",
    "secret",
    "password",
    "api-key",
    "api-token",
)

# 脱敏后的替换值
REDACTED = "REDACTED"
