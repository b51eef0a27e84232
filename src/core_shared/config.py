"""Базовая конфигурация, общая для ядра трекера и сервиса хранения документов."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Общие настройки всех сервисов проекта.

    Наследники (настройки API и настройки ядра трекера) добавляют свои поля,
    а здесь собраны метаданные проекта, режим работы и параметры Sentry.
    """

    # --- Метаданные проекта ---
    PROJECT_NAME: str = "Habit Progress Tracker"
    API_VERSION: str = "0.1.0"

    # Режим разработки/тестирования (для продакшена - False)
    DEVELOPMENT: bool = Field(default=False, description="Режим разработки/тестирования")

    # --- Логирование ---
    LOG_LEVEL: str = Field(default="INFO", description="Уровень логирования")

    # --- Sentry ---
    SENTRY_DSN: str | None = Field(
        default=None,
        description="Sentry DSN. Если не задан, мониторинг ошибок отключен.",
    )

    @property
    def PRODUCTION(self) -> bool:
        """Продакшеном считается любой режим, кроме DEVELOPMENT."""
        return not self.DEVELOPMENT

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Имена переменных окружения не чувствительны к регистру
        extra="ignore",  # Лишние переменные .env не являются ошибкой
    )
