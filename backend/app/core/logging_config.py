"""
Логирование приложения: stdout и файл logs/app.log с ротацией.
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent.parent / ".env")

# Директория для логов (создаётся при настройке логирования)
LOG_DIR = Path(os.getenv("LOG_DIR", str(Path(__file__).parent.parent.parent / "logs")))

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _log_level() -> int:
    name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    return getattr(logging, name) if name in _LEVELS else logging.INFO


def setup_logging() -> None:
    """Настроить root logger. Повторный вызов заменяет обработчики, а не дублирует их."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        LOG_DIR / "app.log",
        maxBytes=int(os.getenv("LOG_MAX_BYTES", 10 * 1024 * 1024)),
        backupCount=int(os.getenv("LOG_BACKUP_COUNT", 5)),
        encoding="utf-8",
    )
    logging.basicConfig(
        level=_log_level(),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout), file_handler],
        force=True,
    )

    # Сторонние библиотеки
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)  # шум про версию bcrypt
