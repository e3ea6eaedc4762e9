# electra/utils/security.py

"""
Хэширование паролей и выпуск/проверка JWT токенов.
Используется passlib с sha256_crypt, чтобы избежать проблем с bcrypt на Windows.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jwt import encode, decode
from passlib.context import CryptContext

from electra.config import settings

# Создаём контекст для хэширования паролей
pwd_context = CryptContext(
    schemes=["sha256_crypt"],
    deprecated="auto",
    sha256_crypt__default_rounds=settings.AUTH_HASH_ROUNDS,
)

SECRET_KEY = settings.AUTH_SECRET_KEY
ACCESS_TOKEN_EXPIRE_MINUTES = settings.AUTH_TOKEN_EXPIRE_MINUTES
ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    """
    Хэширует пароль.

    :param password: строка пароля пользователя
    :return: хэшированный пароль в виде строки
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Проверяет совпадение пароля с его хэшем.
    Повреждённый или пустой хэш считается несовпадением.
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Создаёт JWT токен на основе данных сотрудника.
    Вход: dict (например {"id": 1, "phone": "9876543210", "role": "admin"})
    Выход: JWT строка
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Проверяет подпись и срок действия, возвращает payload."""
    return decode(token, SECRET_KEY, algorithms=[ALGORITHM])
