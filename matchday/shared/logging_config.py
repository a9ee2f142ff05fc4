"""日志配置：统一格式，供 API 入口和脚本复用。"""
import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # httpx 默认会为每个请求打 INFO 日志，降到 WARNING
    logging.getLogger("httpx").setLevel(logging.WARNING)
