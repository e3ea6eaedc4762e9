# electra/services/order.py

import re
import time
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.future import select
from fastapi import HTTPException, Request

from electra.config import settings
from electra.models.counter import Counter
from electra.models.order import Order as OrderModel
from electra.models.staff import Staff as StaffModel
from electra.schemas.common import validate_payload
from electra.schemas.order import OrderCreate, OrderUpdate
from electra.utils.dates import end_of_day, utcnow

ORDER_COUNTER = "order_number"
ORDER_NUMBER_PATTERN = re.compile(r"ORD(\d+)")


# ────────────── Номера заказов ──────────────
def format_order_number(number: int) -> str:
    """ORD + номер, минимум 3 цифры: ORD001, ORD042, ORD1234."""
    return f"ORD{number:03d}"


def parse_order_number(order_number: str | None) -> int | None:
    if not order_number:
        return None
    match = ORDER_NUMBER_PATTERN.search(order_number)
    return int(match.group(1)) if match else None


async def highest_order_number(db) -> int:
    """Наибольший числовой номер среди существующих заказов (0, если заказов нет)."""
    result = await db.execute(select(OrderModel.order_number).where(OrderModel.order_number.is_not(None)))
    numbers = [parse_order_number(value) for value in result.scalars().all()]
    return max((n for n in numbers if n is not None), default=0)


async def next_order_number(request: Request) -> str:
    """
    Следующий номер заказа.

    Счётчик увеличивается одним атомарным UPDATE ... RETURNING, поэтому
    параллельные создания не получают одинаковый номер. Если счётчика ещё нет,
    он заводится от наибольшего существующего номера. При ошибке базы
    используется номер по времени: ORD<миллисекунды>.
    """
    db = request.state.db
    log = request.app.state.log

    try:
        result = await db.execute(
            update(Counter)
            .where(Counter.name == ORDER_COUNTER)
            .values(value=Counter.value + 1)
            .returning(Counter.value)
        )
        value = result.scalar_one_or_none()
        if value is None:
            value = await highest_order_number(db) + 1
            db.add(Counter(name=ORDER_COUNTER, value=value))
            await db.flush()
            await log.log_info("order", "Счётчик номеров заказов создан", {"value": value})
        return format_order_number(value)
    except SQLAlchemyError as e:
        await db.rollback()
        await log.log_error("order", f"Ошибка генерации номера заказа: {e}")
        return f"ORD{int(time.time() * 1000)}"


# ────────────── Особый сотрудник ──────────────
async def is_special_staff(assigned_to: str | None, request: Request) -> bool:
    """Назначен ли заказ особому сотруднику (ищется по фиксированному email)."""
    if not assigned_to:
        return False

    db = request.state.db
    result = await db.execute(
        select(StaffModel.id).where(StaffModel.email == settings.SPECIAL_STAFF_EMAIL.lower())
    )
    special_id = result.scalars().first()
    return special_id is not None and str(special_id) == str(assigned_to)


def order_total(order: OrderCreate) -> float:
    if order.total is not None:
        return order.total
    return sum(item.quantity * item.price for item in order.items)


# ────────────── CRUD ──────────────
async def read_orders_service(request: Request, **filters) -> list[OrderModel]:
    """
    Получение списка заказов, новые первыми.
    filters - точное совпадение полей (status, assigned_to, created_by).
    """
    db = request.state.db
    log = request.app.state.log

    query = select(OrderModel)
    for field, value in filters.items():
        query = query.where(getattr(OrderModel, field) == value)
    query = query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())

    result = await db.execute(query)
    orders = result.scalars().all()

    await log.log_info("order", f"{len(orders)} заказов загружено", filters)
    return orders


async def read_orders_by_date_range_service(start: datetime, end: datetime, request: Request) -> list[OrderModel]:
    """
    Заказы, созданные между start и концом дня end, новые первыми.
    """
    db = request.state.db
    log = request.app.state.log

    upper = end_of_day(end)
    result = await db.execute(
        select(OrderModel)
        .where(OrderModel.created_at >= start, OrderModel.created_at <= upper)
        .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
    )
    orders = result.scalars().all()

    await log.log_info("order", f"{len(orders)} заказов за период", {"start": start, "end": upper})
    return orders


async def read_order_service(id: int, request: Request) -> OrderModel:
    """
    Чтение заказа по ID.
    """
    db = request.state.db
    log = request.app.state.log

    db_order = await db.get(OrderModel, id)
    if db_order is None:
        await log.log_error("order", "Заказ не найден", {"id": id})
        raise HTTPException(status_code=404, detail="Order not found")

    return db_order


async def create_order_service(order: OrderCreate, request: Request) -> OrderModel:
    """
    Создание нового заказа: номер из счётчика, признак iswithout вычисляется.
    """
    db = request.state.db
    log = request.app.state.log

    data = order.model_dump()
    data["total"] = order_total(order)
    data["iswithout"] = await is_special_staff(order.assigned_to, request)
    data["order_number"] = await next_order_number(request)

    db_order = OrderModel(**data)
    db.add(db_order)
    await db.commit()
    await db.refresh(db_order)

    await log.log_info("order", "Заказ создан", {"id": db_order.id, "order_number": db_order.order_number})
    return db_order


async def update_order_service(id: int, order_update: OrderUpdate, request: Request) -> OrderModel:
    """
    Обновление заказа по ID. Изменения накладываются на сохранённую запись,
    итог проверяется схемой OrderCreate. Номер заказа не меняется.
    """
    db = request.state.db
    log = request.app.state.log

    db_order = await read_order_service(id, request)

    changes = order_update.model_dump(exclude_unset=True)
    merged = OrderCreate.model_validate(db_order).model_dump()
    merged.update(changes)
    validated = validate_payload(OrderCreate, merged)

    data = validated.model_dump()
    if validated.total is None:
        data["total"] = order_total(validated)
    for key, value in data.items():
        setattr(db_order, key, value)

    if "assigned_to" in changes:
        db_order.iswithout = await is_special_staff(validated.assigned_to, request)

    await db.commit()
    await db.refresh(db_order)
    await log.log_info("order", "Заказ обновлён", {"id": id, "fields": sorted(changes)})
    return db_order


async def mark_order_paid_service(
    id: int,
    request: Request,
    paid_by: str | None = None,
    payment_received_by: str | None = None,
) -> OrderModel:
    """
    Отметка об оплате. Статус заказа не меняется.
    """
    db = request.state.db
    log = request.app.state.log

    db_order = await read_order_service(id, request)

    # updated_at передаётся явно, иначе сработает onupdate
    await db.execute(
        update(OrderModel)
        .where(OrderModel.id == id)
        .values(
            is_paid=True,
            paid_at=utcnow(),
            paid_by=paid_by or None,
            payment_received_by=payment_received_by or None,
            updated_at=OrderModel.updated_at,
        )
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    await db.refresh(db_order)
    await log.log_info("order", "Заказ оплачен", {"id": id, "paid_by": paid_by})
    return db_order


async def assign_delivery_person_service(id: int, delivery_person_id: str, request: Request) -> OrderModel:
    """
    Назначение доставщика: меняется только поле delivery_person.
    """
    db = request.state.db
    log = request.app.state.log

    db_order = await read_order_service(id, request)

    merged = OrderCreate.model_validate(db_order).model_dump()
    merged["delivery_person"] = delivery_person_id
    validated = validate_payload(OrderCreate, merged)

    db_order.delivery_person = validated.delivery_person
    await db.commit()
    await db.refresh(db_order)
    await log.log_info("order", "Доставщик назначен", {"id": id, "delivery_person": delivery_person_id})
    return db_order


async def delete_order_service(id: int, request: Request) -> OrderModel:
    """
    Удаление заказа по ID. Возвращает удалённую запись (для очистки изображения).
    """
    db = request.state.db
    log = request.app.state.log

    db_order = await read_order_service(id, request)
    await db.delete(db_order)
    await db.commit()
    await log.log_info("order", "Заказ удалён", {"id": id, "order_number": db_order.order_number})
    return db_order
