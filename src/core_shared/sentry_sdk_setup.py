"""Инициализация Sentry SDK для сервиса хранения документов."""

from logging import ERROR, INFO
from typing import Protocol

from sentry_sdk import init as sentry_init
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.loguru import LoguruIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from .logging_setup import setup_logger


class SentrySettingsProtocol(Protocol):
    """Атрибуты настроек, необходимые для инициализации Sentry."""

    SENTRY_DSN: str | None
    PRODUCTION: bool
    PROJECT_NAME: str
    API_VERSION: str


def sentry_sample_rate(production: bool) -> float:
    """Доля семплируемых трейсов и профилей: 10% в продакшене, все в разработке."""
    return 0.1 if production else 1.0


def setup_sentry(settings: SentrySettingsProtocol, log_level: str) -> bool:
    """
    Инициализирует Sentry SDK, если в настройках задан DSN.

    Args:
        settings: Объект настроек, удовлетворяющий SentrySettingsProtocol.
        log_level: Уровень логирования для служебного логгера.

    Returns:
        True, если SDK был инициализирован.
    """
    sentry_log = setup_logger(service_name="SentrySetup", log_level_override=log_level)

    if not settings.SENTRY_DSN:
        sentry_log.info("SENTRY_DSN не установлен, Sentry SDK не будет инициализирован.")
        return False

    environment = "production" if settings.PRODUCTION else "development"
    sample_rate = sentry_sample_rate(settings.PRODUCTION)

    sentry_log.info(
        f"Инициализация Sentry SDK. DSN: ***{settings.SENTRY_DSN[-6:]}, "
        f"Environment: {environment}, Sample rate: {sample_rate}"
    )

    try:
        sentry_init(
            dsn=settings.SENTRY_DSN,
            integrations=[
                StarletteIntegration(transaction_style="endpoint"),
                FastApiIntegration(transaction_style="endpoint"),
                SqlalchemyIntegration(),
                # Breadcrumbs с INFO, события в Sentry с ERROR
                LoguruIntegration(level=INFO, event_level=ERROR),
            ],
            environment=environment,
            traces_sample_rate=sample_rate,
            profiles_sample_rate=sample_rate,
            release=f"{settings.PROJECT_NAME}@{settings.API_VERSION}",
        )
    except Exception as exc:
        sentry_log.exception(f"Ошибка инициализации Sentry SDK: {exc}")
        return False

    sentry_log.info("Sentry SDK успешно инициализирован.")
    return True
