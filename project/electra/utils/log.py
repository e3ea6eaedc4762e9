# electra/utils/log.py
# Логирование событий: по файлу на target и на день

import os
import datetime
import logging
from aiologger import Logger
from aiologger.handlers.files import AsyncFileHandler

from electra.config import settings

# ключи, значения которых не пишутся в лог
SENSITIVE_KEYS = {"password", "token", "authorization"}


class Log:
    def __init__(self, log_dir: str | None = None):
        self.log_dir = log_dir or settings.LOG_DIR
        os.makedirs(self.log_dir, exist_ok=True)
        self.loggers = {}
        self.log_print = settings.LOG_PRINT.lower() in ("1", "true", "yes")

    def build_log_path(self, target: str, now: datetime.datetime) -> str:
        """
        log/order/2025/10/04.log
        """
        base_dir = os.path.join(self.log_dir, target or "app", f"{now.year}", f"{now:%m}")
        os.makedirs(base_dir, exist_ok=True)
        return os.path.join(base_dir, f"{now:%d}.log")

    async def _close(self, entry: dict):
        try:
            await entry["logger"].shutdown()
        except Exception as e:
            print(f"log: не удалось закрыть {entry['path']}: {e!r}")

    async def get_logger(self, target: str, now: datetime.datetime) -> Logger:
        """Асинхронный логгер для target. При смене дня файл переоткрывается."""
        log_path = self.build_log_path(target, now)
        current = self.loggers.get(target)

        if current is None or current["path"] != log_path:
            target_logger = Logger(name=f"electra_{target}")
            target_logger.add_handler(AsyncFileHandler(filename=log_path, mode="a", encoding="utf-8"))
            if current is not None:
                await self._close(current)
            self.loggers[target] = {"path": log_path, "logger": target_logger}

        return self.loggers[target]["logger"]

    def format_line(self, target: str, message: str, data: dict | None, now: datetime.datetime) -> str:
        line = f"{now:%d.%m.%Y %H:%M:%S} {target}: {message}"
        if data:
            line += f": {self.safe_serialize(data)}"
        return line

    def echo(self, line: str, is_console: bool | None):
        if self.log_print if is_console is None else is_console:
            print(line)

    # Асинхронное
    async def log_info(
        self,
        target: str = "",
        message: str = "",
        data: dict | None = None,
        is_console: bool = None,
    ):
        now = datetime.datetime.now()
        line = self.format_line(target, message, data, now)

        target_logger = await self.get_logger(target, now)
        await target_logger.info(line)
        self.echo(line, is_console)

    async def log_error(
        self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = True
    ):
        await self.log_info(target, f"ERROR: {message}", data, is_console)

    async def log_warning(
        self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None
    ):
        await self.log_info(target, f"WARNING: {message}", data, is_console)

    # Синхронное (до запуска event loop)
    def log_info_sync(
        self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None
    ):
        now = datetime.datetime.now()
        line = self.format_line(target, message, data, now)

        log_path = os.path.abspath(self.build_log_path(target, now))

        logger = logging.getLogger(f"electra_sync_{target}")
        logger.setLevel(logging.INFO)
        logger.propagate = False
        # другой каталог или новый день: файл переоткрывается
        for old in list(logger.handlers):
            if getattr(old, "baseFilename", None) != log_path:
                logger.removeHandler(old)
                old.close()
        if not logger.handlers:
            handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            handler.setFormatter(logging.Formatter("%(message)s"))
            logger.addHandler(handler)

        logger.info(line)
        self.echo(line, is_console)

    def log_error_sync(
        self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None
    ):
        self.log_info_sync(target, f"ERROR: {message}", data, is_console)

    def safe_serialize(self, obj):
        """
        Объект -> вид, пригодный для строки лога.
        Схемы через model_dump, строки ORM по публичным атрибутам,
        даты в ISO. Пароли и токены отбрасываются.
        """
        if obj is None or isinstance(obj, (str, int, float, bool)):
            return obj
        if isinstance(obj, (datetime.datetime, datetime.date)):
            return obj.isoformat()
        if isinstance(obj, dict):
            return {k: self.safe_serialize(v) for k, v in obj.items() if k not in SENSITIVE_KEYS}
        if isinstance(obj, (list, tuple, set)):
            return [self.safe_serialize(v) for v in obj]
        if hasattr(obj, "model_dump"):
            return self.safe_serialize(obj.model_dump())
        if hasattr(obj, "__dict__"):
            public = {k: v for k, v in vars(obj).items() if not k.startswith("_")}
            return self.safe_serialize(public)
        return f"<{type(obj).__name__}>"

    async def shutdown(self):
        for entry in list(self.loggers.values()):
            await self._close(entry)
        self.loggers = {}
