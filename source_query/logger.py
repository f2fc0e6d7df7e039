# source_query/logger.py

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from source_query.config import Config
from source_query.singleton import Singleton

# ANSI цвета
COLORS = {
    'DEBUG': '\033[36m',  # Cyan
    'INFO': '\033[32m',  # Green
    'WARNING': '\033[33m',  # Yellow
    'ERROR': '\033[31m',  # Red
    'CRITICAL': '\033[1;31m',  # Bold red
    'RESET': '\033[0m'
}

LOG_FORMAT = "[%(asctime)s][%(levelname)s] %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):

    def format(self, record):
        color = COLORS.get(record.levelname, COLORS['RESET'])
        # Сохраняем оригинальный формат во время форматирования
        orig_fmt = self._style._fmt
        try:
            self._style._fmt = f"{color}{orig_fmt}{COLORS['RESET']}"
            return super().format(record)
        finally:
            self._style._fmt = orig_fmt


class Logger(Singleton):
    """
    Единый логгер проекта. Использование:
      logger = Logger(config)
      logger.info("Hello")
    Без конфига пишет только в консоль.
    """

    def __init__(self, config=None, name="source_query"):
        # Защита от повторной инициализации
        if hasattr(self, '_initialized'):
            return

        config = config or Config.from_dict()
        log_file = config.get("LOG.LOG_FILE")
        level_file = config.get("LOG.LEVEL_FILE_LOG", "INFO")
        level_console = config.get("LOG.LEVEL_CONSOLE_LOG", "INFO")
        main_level = config.get("LOG.MAIN_LEVEL_LOG", "INFO")

        self._logger = logging.getLogger(name)
        self._logger.setLevel(getattr(logging, main_level))
        self._logger.propagate = False

        # Добавляем только если ещё не добавлены
        if not self._logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(getattr(logging, level_console))
            console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            self._logger.addHandler(console_handler)

            if log_file:
                # Создаём папку логов
                os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
                file_handler = TimedRotatingFileHandler(
                    log_file,
                    when="midnight",
                    interval=1,
                    backupCount=14,  # 2 недели
                    encoding="utf-8"
                )
                file_handler.setLevel(getattr(logging, level_file))
                file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
                self._logger.addHandler(file_handler)

        self._initialized = True

    def debug(self, msg, *args, **kwargs):
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self._logger.error(msg, *args, **kwargs)

    def critical(self, msg, *args, **kwargs):
        self._logger.critical(msg, *args, **kwargs)

    def exception(self, msg, *args, **kwargs):
        self._logger.exception(msg, *args, **kwargs)

    def get_logger(self) -> logging.Logger:
        return self._logger


class LoggerMixin:
    """Даёт компоненту self.logger: переданный явно или общий Logger."""

    def __init__(self, logger=None):
        self.logger = logger or Logger()
