import logging
import os
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler


class DailyRotatingFileHandler(TimedRotatingFileHandler):
    """File handler that keeps one directory per day: <log_dir>/<name>/<YYYY_MM_DD>/."""

    def __init__(self, filename, log_dir, log_filename_prefix, logger_name, is_error_handler=False, *args, **kwargs):
        self.log_dir = log_dir
        self.log_filename_prefix = log_filename_prefix
        self.logger_name = logger_name
        self.is_error_handler = is_error_handler
        super().__init__(filename, *args, **kwargs)

    def _current_filename(self) -> str:
        current_date = datetime.now().strftime("%Y_%m_%d")
        subdir = "errors" if self.is_error_handler else self.logger_name
        current_log_dir = os.path.join(self.log_dir, subdir, current_date)
        return os.path.abspath(
            os.path.join(current_log_dir, f"{self.log_filename_prefix}{self.logger_name}.log")
        )

    def emit(self, record):
        current_filename = self._current_filename()
        if getattr(self, 'baseFilename', None) != current_filename:
            if self.stream:
                self.stream.close()
            self.baseFilename = current_filename
            os.makedirs(os.path.dirname(current_filename), exist_ok=True)
            self.stream = self._open()

        super().emit(record)


class Logger(logging.Logger):
    def __init__(self, logger_name: str = '', log_filename_prefix: str = '', log_dir: str = None,
                 logger_debug: bool = None) -> None:
        sanitized_name = logger_name.replace('/', '_').replace('\\', '_')

        if log_dir is None or logger_debug is None:
            # Imported lazily so the config module stays free of logger imports
            from micex_iss.config.loader import config
            log_dir = config.LOG_DIR if log_dir is None else log_dir
            logger_debug = config.LOGGER_DEBUG if logger_debug is None else logger_debug

        level = logging.DEBUG if logger_debug else logging.INFO
        super().__init__(sanitized_name, level)

        self.log_filename_prefix = log_filename_prefix
        self.log_dir = log_dir
        self.date_format = "%d.%m.%Y %H:%M:%S"

        self._setup_logger()
        self.debug(f"Logger {sanitized_name} initialized with log directory: {self.log_dir}")

    def _get_log_dir(self, current_date: str, is_error: bool = False) -> str:
        if is_error:
            log_dir = os.path.join(self.log_dir, 'errors', current_date)
        else:
            log_dir = os.path.join(self.log_dir, self.name, current_date)
        os.makedirs(log_dir, exist_ok=True)
        return log_dir

    def _get_log_filename(self, log_dir: str) -> str:
        name = self.name if self.name else "default"
        return os.path.join(log_dir, f"{self.log_filename_prefix}{name}.log")

    def _plain_formatter(self) -> logging.Formatter:
        if self.level == logging.DEBUG:
            format_string = "[{asctime}] {filename}.{funcName} - {message}"
        else:
            format_string = "[{asctime}] - {message}"
        return logging.Formatter(format_string, datefmt=self.date_format, style="{")

    def _setup_logger(self) -> None:
        current_date = datetime.now().strftime("%Y_%m_%d")

        if not self.handlers:
            self._add_console_handler()
            self._add_file_handler(self._get_log_dir(current_date), is_error=False)
            self._add_file_handler(self._get_log_dir(current_date, is_error=True), is_error=True)

    def _add_console_handler(self):
        console = Console(color_system="auto", width=180)
        rich_handler = RichHandler(console=console, rich_tracebacks=False)
        rich_handler.setLevel(self.level)
        self.addHandler(rich_handler)

    def _add_file_handler(self, log_dir: str, is_error: bool):
        file_handler = DailyRotatingFileHandler(
            self._get_log_filename(log_dir),
            self.log_dir,
            self.log_filename_prefix,
            self.name,
            is_error_handler=is_error,
            when='midnight',
            interval=1,
            backupCount=30,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.ERROR if is_error else self.level)
        file_handler.setFormatter(self._plain_formatter())
        file_handler.namer = lambda name: name.replace(".log", "") + ".log"
        file_handler.rotator = lambda source, _dest: self._log_rotator(source, is_error=is_error)
        self.addHandler(file_handler)

    def _log_rotator(self, source, is_error=False):
        new_date = datetime.now().strftime("%Y_%m_%d")
        new_dir = self._get_log_dir(new_date, is_error=is_error)
        new_file = os.path.join(new_dir, os.path.basename(source))
        open(new_file, 'a').close()
