"""Кастомные исключения API и их обработчики."""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logging import api_log as log


class AppException(Exception):
    """
    Базовое исключение приложения.

    Attributes:
        status_code: HTTP статус ответа.
        message: Сообщение для клиента.
        error_type: Машинный код ошибки.
        loc: Путь к полю запроса, вызвавшему ошибку (опционально).
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Внутренняя ошибка сервера."
    default_error_type: str = "internal_error"

    def __init__(self, message: str | None = None, error_type: str | None = None, loc: list[Any] | None = None):
        self.message = message or self.default_message
        self.error_type = error_type or self.default_error_type
        self.loc = loc
        super().__init__(self.message)


class BadRequestException(AppException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Некорректный запрос."
    default_error_type = "bad_request"


class UnauthorizedException(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Требуется аутентификация."
    default_error_type = "unauthorized"


class ForbiddenException(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Доступ запрещен."
    default_error_type = "forbidden"


class NotFoundException(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Ресурс не найден."
    default_error_type = "not_found"


class ConflictException(AppException):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Ресурс уже существует."
    default_error_type = "conflict"


def _error_body(error_type: str, message: str, loc: list[Any] | None = None) -> dict[str, Any]:
    # Формат совпадает с ответом FastAPI на ошибки валидации
    return {"detail": [{"type": error_type, "msg": message, "loc": loc or []}]}


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Преобразует AppException в JSON ответ."""
    log.warning(f"{request.method} {request.url.path} -> {exc.status_code} ({exc.error_type}): {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error_type, exc.message, exc.loc),
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Логирует ошибки валидации запроса и возвращает их в стандартном формате."""
    errors = [
        {"type": error.get("type"), "msg": error.get("msg"), "loc": list(error.get("loc", []))}
        for error in exc.errors()
    ]
    log.warning(f"Ошибка валидации запроса {request.method} {request.url.path}: {errors}")
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": errors})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Непредвиденные ошибки: полное логирование, клиенту - обезличенное сообщение."""
    log.error(f"Необработанная ошибка на {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(AppException.default_error_type, AppException.default_message),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Регистрирует обработчики исключений приложения."""
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
