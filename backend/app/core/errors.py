"""
Доменные ошибки и их отображение в HTTP-ответы вида {"error": "..."}.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    """Базовая ошибка приложения: HTTP-статус + сообщение для клиента."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthorizedError(AppError):
    """Нет сессии или токен невалиден там, где он обязателен."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    """Сессия есть, но роли недостаточно."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(AppError):
    """Невалидный ввод: поле, enum, ссылка на автора, дубликат ключа."""

    status_code = status.HTTP_400_BAD_REQUEST


class MissingFieldError(ValidationError):
    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"{field} is required")
        self.field = field


class InvalidEnumError(ValidationError):
    def __init__(self, field: str, value: object, allowed: list[str]) -> None:
        super().__init__(
            f"Invalid value for {field}: {value!r}. Allowed: {', '.join(allowed)}"
        )
        self.field = field
        self.value = value


class InvalidAuthorReferenceError(ValidationError):
    """Один или несколько id авторов не существуют или имеют другую роль; какой именно, не сообщаем."""

    def __init__(self, capacity_label: str) -> None:
        super().__init__(f"One or more {capacity_label} authors are invalid")
        self.capacity_label = capacity_label


class DuplicateKeyError(ValidationError):
    def __init__(self, message: str) -> None:
        super().__init__(message)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query"))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Подключить обработчики: все ошибки отдаются клиенту как {"error": message}."""

    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning(
                "%s %s rejected (%s): %s",
                request.method,
                request.url.path,
                exc.status_code,
                exc.message,
            )
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = _format_validation_errors(exc)
        logger.warning("%s %s invalid request: %s", request.method, request.url.path, message)
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("%s %s failed: %s", request.method, request.url.path, exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
