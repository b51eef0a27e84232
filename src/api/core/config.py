"""Конфигурация сервиса хранения документов."""

from urllib.parse import quote_plus

from pydantic import Field, computed_field

from src.core_shared.config import AppSettings


class Settings(AppSettings):
    """Настройки сервиса хранения документов."""

    # --- Статические настройки ---

    # Хост API
    API_HOST: str = "0.0.0.0"  # noqa: S104 - 0.0.0.0 необходимо для Docker контейнера
    # Порт API
    API_PORT: int = 8000
    # Алгоритм подписи JWT
    JWT_ALGORITHM: str = "HS256"
    # Срок годности JWT токена в минутах
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # --- Настройки, читаемые из .env ---

    # Настройки БД
    DB_NAME: str = Field(default="habit_progress_db", description="Название базы данных")
    DB_USER: str = Field(default="habit_progress_user", description="Имя пользователя базы данных")
    DB_PASSWORD: str = Field(..., description="Пароль пользователя базы данных")
    DB_HOST: str = Field(
        default="db",
        description="Имя хоста базы данных (название сервиса в Docker)",
    )
    DB_PORT: int = Field(default=5432, description="Порт хоста базы данных")
    DATABASE_URL_OVERRIDE: str | None = Field(
        default=None,
        description="Готовый URL SQLAlchemy (например, sqlite+aiosqlite:// для тестов). Заменяет DB_* настройки.",
    )

    # Настройки безопасности
    JWT_SECRET_KEY: str = Field(..., description="Ключ подписи JWT провайдера аутентификации")

    # Максимум результатов поиска пользователей за один запрос
    USER_SEARCH_LIMIT: int = Field(default=10, gt=0, description="Лимит поиска пользователей")

    # --- Вычисляемые поля ---

    # Формируем URL основной базы данных
    @computed_field(repr=False)
    def DATABASE_URL(self) -> str:
        """Собирает URL для SQLAlchemy."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE

        # Экранируем пользователя и пароль, чтобы спецсимволы не ломали URL
        encoded_user = quote_plus(self.DB_USER)
        encoded_password = quote_plus(self.DB_PASSWORD)

        return f"postgresql+psycopg://{encoded_user}:{encoded_password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def IS_SQLITE(self) -> bool:
        return str(self.DATABASE_URL).startswith("sqlite")


# Создаем глобальный экземпляр настроек
settings = Settings()  # type: ignore[call-arg]
