"""Централизованная настройка Loguru для ядра трекера и сервиса хранения."""

import os
import sys
from typing import TYPE_CHECKING

from loguru import logger as global_loguru_logger
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from loguru import Logger


class LogConfig(BaseModel):
    """Параметры обработчиков Loguru."""

    level: str = Field(default="INFO", description="Минимальный уровень сообщений")
    format: str = Field(
        default=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[service_name]}</cyan> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
        ),
        description="Формат строки лога",
    )
    rotation: str = Field(default="10 MB", description="Размер файла, после которого начинается новый")
    retention: str = Field(default="7 days", description="Сколько хранить старые файлы")
    serialize: bool = Field(default=False, description="Писать логи в JSON")
    enable_file_logging: bool = Field(default=False, description="Дублировать логи в файл")
    log_file_path: str = Field(
        default="logs/{service_name}_{time:YYYY-MM-DD}.log",
        description="Шаблон пути к файлу логов",
    )


def _resolve_log_dir(log_file_path: str) -> str:
    """
    Возвращает директорию файла логов.

    Динамическая часть имени (`{time...}`) отбрасывается, чтобы получить
    статическую директорию, которую можно создать заранее.
    """
    static_part = log_file_path.split("{time", 1)[0]
    return os.path.dirname(static_part)


def setup_logger(
    service_name: str,
    log_config: LogConfig | None = None,
    log_level_override: str | None = None,
) -> "Logger":
    """
    Настраивает Loguru и возвращает логгер, привязанный к имени сервиса.

    Все ранее добавленные обработчики удаляются, поэтому повторный вызов
    (например, из тестов) не приводит к дублированию строк.

    Args:
        service_name: Имя сервиса ("API", "Tracker", ...), попадает в каждую строку лога.
        log_config: Параметры обработчиков. Если None, используются значения по умолчанию.
        log_level_override: Уровень, который имеет приоритет над `log_config.level`.

    Returns:
        Логгер Loguru с `service_name` в `extra`.
    """
    config = log_config.model_copy() if log_config else LogConfig()
    config.level = (log_level_override or config.level).upper()

    global_loguru_logger.remove()
    service_logger = global_loguru_logger.bind(service_name=service_name)

    service_logger.add(
        sys.stderr,
        level=config.level,
        format=config.format,
        colorize=True,
        serialize=config.serialize,
    )

    if config.enable_file_logging:
        file_path = config.log_file_path.replace("{service_name}", service_name.lower())
        log_dir = _resolve_log_dir(file_path)

        try:
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
        except OSError as exc:
            service_logger.warning(
                f"Не удалось создать директорию для логов '{log_dir}': {exc}. "
                f"Логирование в файл для сервиса '{service_name}' отключено."
            )
        else:
            service_logger.add(
                file_path,
                level=config.level,
                format=config.format,
                rotation=config.rotation,
                retention=config.retention,
                serialize=config.serialize,
                encoding="utf-8",
            )

    service_logger.debug(f"Loguru сконфигурирован для сервиса '{service_name}'. Уровень: {config.level}")
    return service_logger


__all__ = ["setup_logger", "LogConfig"]
