"""
Проверка JWT токенов провайдера аутентификации (PyJWT).

Сервис хранения не выдает токены пользователям сам: их подписывает провайдер аутентификации
общим ключом `JWT_SECRET_KEY`. `create_access_token` нужен для служебных скриптов и тестов.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from pydantic import ValidationError

from src.api.core.config import settings
from src.api.core.exceptions import UnauthorizedException
from src.api.core.logging import api_log as log
from src.api.schemas.auth_schema import TokenPayload


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Создает подписанный JWT токен.

    Args:
        data (dict): Данные для payload токена (например, {"user_id": "abc123"}).
        expires_delta (timedelta | None): Время жизни токена.
                                          Если None, используется `JWT_ACCESS_TOKEN_EXPIRE_MINUTES`.

    Returns:
        str: Сгенерированный JWT токен.
    """
    lifetime = expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + lifetime

    # 'exp' должно быть Unix timestamp (int)
    payload = {**data, "exp": int(expire.timestamp())}

    log.debug(f"Создание JWT токена для {data.get('user_id')!r}, истекает {expire.isoformat()}")
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_and_decode_token(token: str) -> TokenPayload:
    """
    Проверяет подпись и срок действия JWT токена и возвращает его payload.

    Args:
        token (str): JWT токен для проверки.

    Returns:
        TokenPayload: Проверенные данные токена.

    Raises:
        UnauthorizedException: Если токен невалиден, истек или в payload нет `user_id`.
    """
    try:
        # PyJWT проверяет подпись и срок действия (exp)
        payload_dict = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        token_payload = TokenPayload(**payload_dict)

    except ExpiredSignatureError:
        log.warning("Срок действия JWT токена истек.")
        raise UnauthorizedException(message="Срок действия токена истек.", error_type="token_expired") from None

    except InvalidTokenError as exc:
        # Неверная подпись, формат, алгоритм и т.д.
        log.warning(f"Невалидный токен: {exc}")
        raise UnauthorizedException(message="Невалидный токен.", error_type="invalid_token") from exc

    except ValidationError as exc:
        log.warning(f"Ошибка валидации payload токена: {exc.errors(include_url=False)}")
        raise UnauthorizedException(
            message="Отсутствует идентификатор пользователя в токене.",
            error_type="invalid_token_payload",
        ) from exc

    return token_payload
