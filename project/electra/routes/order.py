# electra/routes/order.py

import json
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from starlette.datastructures import UploadFile

from electra.middleware.auth import get_current_user
from electra.schemas.common import validate_payload
from electra.schemas.order import (
    DeliveryPersonRequest,
    MarkPaidRequest,
    Order,
    OrderCreate,
    OrderUpdate,
)
from electra.schemas.staff import TokenUser
from electra.services.order import (
    assign_delivery_person_service,
    create_order_service,
    delete_order_service,
    mark_order_paid_service,
    read_order_service,
    read_orders_by_date_range_service,
    read_orders_service,
    update_order_service,
)
from electra.utils.dates import parse_datetime
from electra.utils.images import (
    ImageUploadError,
    delete_image,
    public_id_from_url,
    store_order_image,
    upload_image,
)

router = APIRouter()

IMAGE_FIELD = "orderImage"
ORDER_DATA_FIELD = "orderData"


# ────────────── Разбор тела заказа ──────────────
def merge_order_data(data: dict) -> dict:
    """
    Поле orderData (JSON-строка) разбирается и накладывается на остальные поля.
    Ошибка разбора -> 400.
    """
    raw = data.pop(ORDER_DATA_FIELD, None)
    if raw is None:
        return data
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid order data format")
    if not isinstance(raw, dict):
        raise HTTPException(status_code=400, detail="Invalid order data format")
    return {**data, **raw}


async def read_order_payload(request: Request) -> tuple[dict, Optional[UploadFile]]:
    """
    Тело заказа: JSON или multipart/form-data с необязательным файлом orderImage.
    Возвращает (поля, файл). Типизированная валидация выполняется позже.
    """
    content_type = request.headers.get("content-type", "")
    upload = None

    if content_type.startswith("multipart/form-data") or content_type.startswith("application/x-www-form-urlencoded"):
        form = await request.form()
        data = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == IMAGE_FIELD and value.filename:
                    upload = value
                continue
            data[key] = value
    else:
        body = await request.body()
        if not body:
            data = {}
        else:
            try:
                data = json.loads(body)
            except ValueError:
                raise HTTPException(status_code=400, detail="Invalid JSON body")
            if not isinstance(data, dict):
                raise HTTPException(status_code=400, detail="Invalid JSON body")

    return merge_order_data(data), upload


def parse_date_param(value: str) -> datetime:
    try:
        return parse_datetime(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")


# ────────────── CREATE ──────────────
@router.post(
    "",
    response_model=Order,
    status_code=status.HTTP_201_CREATED,
    summary="Создать заказ",
    response_description="Возвращает созданный заказ с номером ORDxxx",
    responses={
        201: {"description": "Заказ успешно создан"},
        400: {"description": "Неверные данные заказа"},
        401: {"description": "Некорректный пользователь или токен"},
        500: {"description": "Ошибка загрузки изображения или сервера"},
    },
)
async def create_order(
    request: Request,
    current_user: TokenUser = Depends(get_current_user),
):
    """
    Создание заказа.

    - Тело: JSON или multipart/form-data (файл `orderImage`, поле `orderData` с JSON).
    - `createdBy` по умолчанию - сотрудник из токена.
    - `orderNumber` и `iswithout` назначаются сервером.
    """
    log = request.app.state.log
    data, upload = await read_order_payload(request)
    data.setdefault("createdBy", str(current_user.id))

    order = validate_payload(OrderCreate, data)

    try:
        if upload is not None:
            order.order_image = await store_order_image(upload)
            await log.log_info("image", "Изображение заказа загружено", {"url": order.order_image})
        return await create_order_service(order, request)
    except ImageUploadError as e:
        await log.log_error("image", f"Ошибка загрузки изображения: {e}")
        raise HTTPException(status_code=500, detail="Error uploading order image")
    except Exception as e:
        await log.log_error("order", f"Ошибка при создании заказа: {str(e)}")
        raise


# ────────────── READ ALL ──────────────
@router.get(
    "",
    response_model=List[Order],
    summary="Получить список заказов",
    responses={200: {"description": "Список заказов, новые первыми"}},
)
async def read_orders(request: Request):
    try:
        return await read_orders_service(request)
    except Exception as e:
        await request.app.state.log.log_error("order", f"Ошибка при получении списка заказов: {str(e)}")
        raise


# ────────────── READ BY STATUS ──────────────
@router.get(
    "/status/{status}",
    response_model=List[Order],
    summary="Заказы по статусу",
)
async def read_orders_by_status(status: str, request: Request):
    return await read_orders_service(request, status=status)


# ────────────── READ BY DATE RANGE ──────────────
@router.get(
    "/date-range/{start_date}/{end_date}",
    response_model=List[Order],
    summary="Заказы за период",
    responses={400: {"description": "Неверный формат даты"}},
)
async def read_orders_by_date_range(start_date: str, end_date: str, request: Request):
    start = parse_date_param(start_date)
    end = parse_date_param(end_date)
    return await read_orders_by_date_range_service(start, end, request)


# ────────────── READ BY STAFF ──────────────
@router.get("/assigned/{staff_id}", response_model=List[Order], summary="Заказы, назначенные сотруднику")
async def read_orders_by_assigned(staff_id: str, request: Request):
    return await read_orders_service(request, assigned_to=staff_id)


@router.get("/created/{staff_id}", response_model=List[Order], summary="Заказы, созданные сотрудником")
async def read_orders_by_creator(staff_id: str, request: Request):
    return await read_orders_service(request, created_by=staff_id)


# ────────────── READ ONE ──────────────
@router.get(
    "/{id}",
    response_model=Order,
    summary="Получить заказ по ID",
    responses={404: {"description": "Заказ не найден"}},
)
async def read_order(id: int, request: Request):
    try:
        return await read_order_service(id, request)
    except Exception as e:
        await request.app.state.log.log_error("order", f"Ошибка при получении заказа: {str(e)}", {"id": id})
        raise


# ────────────── UPDATE ──────────────
@router.put(
    "/{id}",
    response_model=Order,
    summary="Обновить заказ",
    responses={
        400: {"description": "Неверные данные заказа"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Заказ не найден"},
    },
)
async def update_order(
    id: int,
    request: Request,
    _: TokenUser = Depends(get_current_user),
):
    log = request.app.state.log
    data, upload = await read_order_payload(request)
    order_update = validate_payload(OrderUpdate, data)

    try:
        if upload is not None:
            order_update.order_image = await upload_image(upload)
            await log.log_info("image", "Изображение заказа обновлено", {"id": id, "url": order_update.order_image})
        return await update_order_service(id, order_update, request)
    except ImageUploadError as e:
        await log.log_error("image", f"Ошибка загрузки изображения: {e}", {"id": id})
        raise HTTPException(status_code=500, detail="Error uploading order image")
    except Exception as e:
        await log.log_error("order", f"Ошибка при обновлении заказа: {str(e)}", {"id": id})
        raise


# ────────────── PAID ──────────────
@router.put(
    "/{id}/paid",
    response_model=Order,
    summary="Отметить заказ оплаченным",
    responses={404: {"description": "Заказ не найден"}},
)
async def mark_order_paid(
    id: int,
    request: Request,
    payment: Optional[MarkPaidRequest] = None,
    _: TokenUser = Depends(get_current_user),
):
    payment = payment or MarkPaidRequest()
    return await mark_order_paid_service(id, request, payment.paid_by, payment.payment_received_by)


# ────────────── DELIVERY PERSON ──────────────
@router.put(
    "/{order_id}/delivery-person",
    response_model=Order,
    summary="Назначить доставщика",
    responses={
        400: {"description": "Не передан deliveryPersonId"},
        404: {"description": "Заказ не найден"},
    },
)
async def assign_delivery_person(
    order_id: int,
    body: DeliveryPersonRequest,
    request: Request,
    _: TokenUser = Depends(get_current_user),
):
    if not body.delivery_person_id:
        raise HTTPException(status_code=400, detail="Delivery person ID is required")
    return await assign_delivery_person_service(order_id, body.delivery_person_id, request)


# ────────────── DELETE ──────────────
async def cleanup_order_image(image_url: str, request: Request):
    """Удаление изображения после удаления заказа. Ошибки только логируются."""
    log = request.app.state.log
    public_id = public_id_from_url(image_url)
    if not public_id:
        return
    try:
        result = await delete_image(public_id)
        await log.log_info("image", "Изображение заказа удалено", {"public_id": public_id, "result": result})
    except Exception as e:
        await log.log_error("image", f"Не удалось удалить изображение: {e}", {"public_id": public_id})


@router.delete(
    "/{id}",
    summary="Удалить заказ",
    responses={
        200: {"description": "Заказ удалён"},
        404: {"description": "Заказ не найден"},
    },
)
async def delete_order(
    id: int,
    request: Request,
    background_tasks: BackgroundTasks,
    _: TokenUser = Depends(get_current_user),
):
    try:
        db_order = await delete_order_service(id, request)
    except Exception as e:
        await request.app.state.log.log_error("order", f"Ошибка при удалении заказа: {str(e)}", {"id": id})
        raise

    if db_order.order_image:
        background_tasks.add_task(cleanup_order_image, db_order.order_image, request)
    return {"message": "Order deleted successfully"}
