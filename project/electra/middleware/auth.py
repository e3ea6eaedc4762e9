# electra/middleware/auth.py

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jwt import ExpiredSignatureError, InvalidTokenError
from pydantic import ValidationError

from electra.schemas.staff import TokenUser
from electra.utils.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/staff/login")


async def get_current_user(request: Request, token: str = Depends(oauth2_scheme)) -> TokenUser:
    """
    Проверяет JWT токен и кладёт данные сотрудника в request.state.user.

    **Статусы:**
    - 401 Unauthorized – токен отсутствует, истёк, неверен или без id/phone/role

    Возвращает: TokenUser (id, phone, role)
    """
    log = getattr(request.app.state, "log", None)
    try:
        payload = decode_access_token(token)
        user = TokenUser.model_validate(payload)
    except ExpiredSignatureError:
        if log:
            await log.log_warning("auth", "Токен истёк")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except (InvalidTokenError, ValidationError):
        if log:
            await log.log_warning("auth", "Неверный токен")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.user = user
    return user


def require_roles(*roles: str):
    """
    Зависимость: пропускает только сотрудников с одной из ролей.
    Проверка выполняется после аутентификации.
    """
    async def checker(request: Request, current_user: TokenUser = Depends(get_current_user)) -> TokenUser:
        if current_user.role not in roles:
            log = getattr(request.app.state, "log", None)
            if log:
                await log.log_warning("auth", "Недостаточно прав", {"id": current_user.id, "role": current_user.role})
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only {' or '.join(roles)} can perform this action",
            )
        return current_user

    return checker


require_admin = require_roles("admin")
require_admin_or_executive = require_roles("admin", "executive")
