# electra/utils/errors.py

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# части loc, которые не являются именем поля
LOCATION_PREFIXES = ("body", "query", "path", "header")


class DuplicateKeyError(Exception):
    """Нарушение уникальности поля (например, телефон сотрудника)."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def validation_errors(errors) -> dict:
    """
    Список ошибок pydantic -> {поле: сообщение}.
    Вложенные поля склеиваются через точку: items.0.price
    """
    result = {}
    for error in errors:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in LOCATION_PREFIXES:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        result.setdefault(field, error.get("msg", "Invalid value"))
    return result


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    log = getattr(request.app.state, "log", None)
    errors = validation_errors(exc.errors())
    if log:
        await log.log_warning("validation", "Ошибка валидации", {"path": request.url.path, "errors": errors})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation error", "errors": errors},
    )


async def duplicate_key_exception_handler(request: Request, exc: DuplicateKeyError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "field": exc.field},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    log = getattr(request.app.state, "log", None)
    if log:
        await log.log_error("app", f"Необработанная ошибка: {exc!r}", {"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Something went wrong!"},
    )
