"""
Конфигурация приложения из переменных окружения (.env).
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Загружаем .env из корня backend
_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(_env_path)


def _str(key: str, default: str | None = None) -> str:
    value = os.getenv(key)
    if value is not None:
        return value.strip()
    if default is not None:
        return default
    return ""


def _int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _bool(key: str, default: bool) -> bool:
    raw = os.getenv(key, "").strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    return default


def _list(key: str, default: str) -> list[str]:
    raw = _str(key, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    """Настройки приложения."""

    # JWT для access token при входе
    JWT_SECRET: str = _str("JWT_SECRET", "change-me-in-production")
    JWT_ALGORITHM: str = _str("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = _int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7)  # 7 дней

    # Frontend, которому разрешён CORS
    CORS_ALLOW_ORIGINS: list[str] = _list(
        "CORS_ALLOW_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",  # Дефолт для локальной разработки
    )

    # Пагинация списков публикаций
    RESEARCH_DEFAULT_PAGE_SIZE: int = _int("RESEARCH_DEFAULT_PAGE_SIZE", 10)
    RESEARCH_MAX_PAGE_SIZE: int = _int("RESEARCH_MAX_PAGE_SIZE", 500)

    # Справочник пользователей (выбор авторов в UI)
    USER_DIRECTORY_PAGE_SIZE: int = _int("USER_DIRECTORY_PAGE_SIZE", 50)

    # Статистика: сколько последних записей отдавать
    STATS_RECENT_LIMIT: int = _int("STATS_RECENT_LIMIT", 5)

    # Подключение к БД (postgresql://... приводится к asyncpg)
    DATABASE_URL: str = _str("DATABASE_URL")

    # Логировать SQL (только для отладки)
    SQL_ECHO: bool = _bool("SQL_ECHO", False)


# Глобальный экземпляр конфига (инициализируется при первом импорте)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Возвращает экземпляр настроек (singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
