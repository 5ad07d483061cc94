"""
日志系统配置
提供统一的日志记录功能
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union

from island_api.config import settings


class Colors:
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    MAGENTA = '\033[95m'


LOG_FORMAT = "%(levelname)-8s | %(asctime)s | %(name)s | %(message)s"
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """按日志级别为级别名上色的格式化器"""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.MAGENTA + Colors.BOLD,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, "")
        fmt = LOG_FORMAT.replace(
            "%(levelname)-8s", f"{color}%(levelname)-8s{Colors.RESET}", 1)
        return logging.Formatter(fmt, datefmt=DATE_FORMAT).format(record)


def setup_logger(
    name: str,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    设置并返回一个配置好的logger

    Args:
        name: logger名称
        level: 日志级别，可以是 logging 常量或 "INFO" 这样的名称
        log_file: 日志文件路径（可选）

    Returns:
        配置好的Logger实例
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 防止重复添加handler
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


# 预定义的logger
app_logger = setup_logger(
    'app', level=settings.log_level, log_file=settings.log_file)
api_logger = setup_logger(
    'api', level=settings.log_level, log_file=settings.log_file)
verification_logger = setup_logger(
    'verification', level=settings.log_level, log_file=settings.log_file)
mail_logger = setup_logger(
    'mail', level=settings.log_level, log_file=settings.log_file)
db_logger = setup_logger('database', level=logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """获取或创建logger"""
    return setup_logger(name, level=settings.log_level, log_file=settings.log_file)
