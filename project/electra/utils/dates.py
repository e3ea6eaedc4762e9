# electra/utils/dates.py

from datetime import date, datetime, time, timezone


def utcnow() -> datetime:
    """Текущее время UTC без tzinfo - в таком виде даты хранятся в базе."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_datetime(value) -> datetime:
    """
    Разбирает дату из запроса: datetime, date или ISO-строка
    ("2025-01-31", "2025-01-31T10:00:00.000Z").
    Даты с часовым поясом приводятся к UTC. Ошибка разбора - ValueError.
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        result = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Invalid date: {value!r}")

    if result.tzinfo is not None:
        result = result.astimezone(timezone.utc).replace(tzinfo=None)
    return result


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
    # 23:59:59.999999
    return datetime.combine(value.date(), time.max)
