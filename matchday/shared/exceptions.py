"""
数据源异常体系

分类：
1. ConfigurationError   - 缺少 API Token 等配置错误（致命，立即暴露）
2. UpstreamHTTPError    - 上游返回非 2xx
3. UpstreamNetworkError - 请求无法完成（连接失败、重试耗尽）
4. UpstreamPayloadError - 响应体无法解析为预期结构

可选字段缺失不属于错误，由边界 Schema 填充默认值。
"""
from __future__ import annotations


class FootballDataError(Exception):
    """数据源相关异常的基类"""

    error_type = "football_data_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(FootballDataError):
    error_type = "configuration_error"


class UpstreamHTTPError(FootballDataError):
    error_type = "upstream_http_error"

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class UpstreamNetworkError(FootballDataError):
    error_type = "upstream_network_error"

    def __init__(self, message: str = "Unable to reach the football data service"):
        super().__init__(message)


class UpstreamPayloadError(FootballDataError):
    error_type = "upstream_payload_error"
