# electra/schemas/common.py

from datetime import datetime
from typing import Annotated, Type, TypeVar

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from electra.utils.dates import parse_datetime

ModelT = TypeVar("ModelT", bound=BaseModel)


def _to_datetime(value):
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str) and not value.strip():
        return None  # пустое поле формы
    return parse_datetime(value)


# Дата из запроса: "2025-01-31", ISO с временем или с "Z"
FlexibleDatetime = Annotated[datetime, BeforeValidator(_to_datetime)]


class CamelModel(BaseModel):
    """
    Базовая схема API: в JSON поля в camelCase (customerName),
    в Python и в базе - snake_case (customer_name).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        coerce_numbers_to_str=True,  # id сотрудников приходят и числом, и строкой
    )


def validate_payload(model: Type[ModelT], data: dict) -> ModelT:
    """
    Валидация уже собранного словаря (после слияния полей формы, orderData
    и сохранённой записи). Ошибки отдаются как обычные ошибки запроса -> 400.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e
