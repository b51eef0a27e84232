"""
Конфигурация ядра трекера.

Ядро работает на стороне клиента (UI) и обращается к сервису хранения документов по HTTP.
"""

from pydantic import Field, computed_field

from src.core_shared.config import AppSettings


class Settings(AppSettings):
    """Настройки ядра трекера, загружаемые из переменных окружения (.env)."""

    # --- Подключение к сервису хранения ---
    # При локальном запуске вне докера может потребоваться http://localhost:8000
    API_BASE_URL: str = Field(default="http://api:8000", description="Базовый URL сервиса хранения")
    API_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0, description="Таймаут одного HTTP запроса")

    # --- Календарь ---
    # "Сегодня" и "сейчас" вычисляются в этом часовом поясе
    TIMEZONE: str = Field(default="UTC", max_length=50, description="Часовой пояс пользователя (IANA)")

    # --- Социальная часть ---
    USER_SEARCH_LIMIT: int = Field(default=10, gt=0, description="Максимум результатов поиска пользователей")

    @computed_field
    def API_V1_URL(self) -> str:
        """
        Полный URL к API v1.

        Пример: http://api:8000/api/v1
        """
        return f"{self.API_BASE_URL.rstrip('/')}/api/v1"


# Глобальный экземпляр настроек ядра
settings = Settings()
