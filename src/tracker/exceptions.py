"""
Исключения ядра трекера.

Чистые функции расчета никогда не выбрасывают исключения: вырожденные входные данные
(пустой список привычек, нулевая цель) дают 0. Исключения ниже сообщают вызывающему коду (UI)
о проблемах на границе ввода и при обращении к хранилищу.
"""


class TrackerError(Exception):
    """
    Базовое исключение ядра.

    Attributes:
        message: Человекочитаемое описание ошибки.
        error_type: Машинный код ошибки для UI.
    """

    default_error_type = "tracker_error"

    def __init__(self, message: str, error_type: str | None = None):
        super().__init__(message)
        self.message = message
        self.error_type = error_type or self.default_error_type

    def __str__(self) -> str:
        return self.message


class ValidationError(TrackerError):
    """Некорректные входные данные (пустое название, цель <= 0, неизвестная частота)."""

    default_error_type = "validation_error"


class PersistenceError(TrackerError):
    """
    Хранилище не приняло структурное изменение (create/update/delete).

    Локальное состояние при этом не изменено, действие можно безопасно повторить.
    """

    default_error_type = "persistence_error"


class SyncError(TrackerError):
    """
    Хранилище не приняло оптимистичное изменение (статус дня, порядок).

    Локальное состояние к этому моменту уже разошлось с хранилищем и заменено перезагрузкой.
    """

    default_error_type = "sync_error"


class NotFoundError(TrackerError):
    """Привычка или связь дружбы с указанным ID не найдена в локальном состоянии."""

    default_error_type = "not_found"


__all__ = [
    "TrackerError",
    "ValidationError",
    "PersistenceError",
    "SyncError",
    "NotFoundError",
]
