"""
日志配置

- 控制台：带颜色的简短格式
- 文件：{log_dir}/{prefix}_YYYY-MM-DD.log，默认 logs/local_sentiment_2026-01-23.log
- 时间统一使用 UTC，与聚合窗口一致
"""

import logging
import sys
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


DEFAULT_PREFIX = "local_sentiment"

# 只保留 WARNING 及以上的第三方日志
NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "uvicorn.access", "apscheduler")


def _utc(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


def _body(record: logging.LogRecord, formatter: logging.Formatter) -> str:
    """消息正文；非根日志器带上名称，异常附带堆栈"""
    text = record.getMessage()
    if record.name != "root":
        text = f"[{record.name}] {text}"
    if record.exc_info:
        text = f"{text}\n{formatter.formatException(record.exc_info)}"
    return text


class PrettyFormatter(logging.Formatter):
    """控制台格式：HH:MM:SS LEVEL 消息"""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        level = f"{color}{record.levelname:<7}{self.RESET if color else ''}"
        return f"{_utc(record):%H:%M:%S} {level} {_body(record, self)}"


class FileFormatter(logging.Formatter):
    """
    文件格式

    2026-01-23 00:15:02 | INFO    | ✅ 聚合完成: 12 个城市, 843 条记录
    """

    def format(self, record: logging.LogRecord) -> str:
        return f"{_utc(record):%Y-%m-%d %H:%M:%S} | {record.levelname:<7} | {_body(record, self)}"


def log_file_path(log_dir: str, prefix: str = DEFAULT_PREFIX, day: Optional[datetime] = None) -> Path:
    """某一天（默认今天，UTC）的日志文件路径"""
    day = day or datetime.now(timezone.utc)
    return Path(log_dir) / f"{prefix}_{day:%Y-%m-%d}.log"


def _prune_logs(log_dir: str, prefix: str, keep: int):
    """按文件名中的日期倒序，只保留最近 keep 个"""
    files = sorted(Path(log_dir).glob(f"{prefix}_*.log"), reverse=True)
    for stale in files[keep:]:
        try:
            stale.unlink()
        except OSError as e:
            logging.warning(f"⚠️ 删除旧日志失败 {stale}: {e}")


def setup_logging(
    level: Optional[str] = None,
    log_dir: Optional[str] = "logs",
    prefix: str = DEFAULT_PREFIX,
    backup_count: int = 30
):
    """
    配置根日志器（可重复调用，已有的处理器会被替换）

    Args:
        level: 日志级别，默认读取 LOG_LEVEL（未设置为 INFO）
        log_dir: 日志目录，默认读取 LOG_DIR；传 None 或空字符串则只输出到控制台
        prefix: 日志文件前缀
        backup_count: 保留的日志文件个数（每天一个）
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if log_dir == "logs":
        log_dir = os.getenv("LOG_DIR", log_dir)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level))
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(PrettyFormatter())
    root.addHandler(console)

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path(log_dir, prefix), encoding="utf-8")
        file_handler.setFormatter(FileFormatter())
        root.addHandler(file_handler)
        _prune_logs(log_dir, prefix, backup_count)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
