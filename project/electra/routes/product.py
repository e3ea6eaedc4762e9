# electra/routes/product.py

from fastapi import APIRouter, Depends, Request, status
from typing import List
from electra.schemas.product import Product, ProductCreate, ProductDeleted, ProductUpdate
from electra.schemas.staff import TokenUser
from electra.services.product import (
    create_product_service,
    read_products_service,
    read_product_service,
    update_product_service,
    delete_product_service,
)
from electra.middleware.auth import get_current_user

router = APIRouter()

# ────────────── CREATE ──────────────
@router.post(
    "",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    summary="Создать товар",
    response_description="Возвращает созданный товар",
    responses={
        201: {"description": "Товар успешно создан"},
        400: {"description": "Неверные данные (например, dimension вне списка)"},
        401: {"description": "Некорректный пользователь или токен"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def create_product(
    request: Request,
    product: ProductCreate,
    _: TokenUser = Depends(get_current_user),
):
    try:
        return await create_product_service(product, request)
    except Exception as e:
        await request.app.state.log.log_error("product", f"Ошибка при создании товара: {str(e)}")
        raise


# ────────────── READ ALL ──────────────
@router.get(
    "",
    response_model=List[Product],
    status_code=status.HTTP_200_OK,
    summary="Получить список товаров",
    response_description="Возвращает все товары, новые первыми",
    responses={
        200: {"description": "Список товаров успешно получен"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def read_products(request: Request):
    try:
        return await read_products_service(request)
    except Exception as e:
        await request.app.state.log.log_error("product", f"Ошибка при получении списка товаров: {str(e)}")
        raise


# ────────────── READ ONE ──────────────
@router.get(
    "/{id}",
    response_model=Product,
    status_code=status.HTTP_200_OK,
    summary="Получить товар по ID",
    responses={
        200: {"description": "Товар найден и возвращён"},
        404: {"description": "Товар не найден"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def read_product(id: int, request: Request):
    return await read_product_service(id, request)


# ────────────── UPDATE ──────────────
@router.put(
    "/{id}",
    response_model=Product,
    status_code=status.HTTP_200_OK,
    summary="Обновить товар",
    responses={
        200: {"description": "Товар успешно обновлён"},
        400: {"description": "Неверные данные запроса"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Товар не найден"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def update_product(
    id: int,
    product_update: ProductUpdate,
    request: Request,
    _: TokenUser = Depends(get_current_user),
):
    try:
        return await update_product_service(id, product_update, request)
    except Exception as e:
        await request.app.state.log.log_error("product", f"Ошибка при обновлении товара: {str(e)}", {"id": id})
        raise


# ────────────── DELETE ──────────────
@router.delete(
    "/{id}",
    response_model=ProductDeleted,
    status_code=status.HTTP_200_OK,
    summary="Удалить товар",
    responses={
        200: {"description": "Товар удалён"},
        401: {"description": "Некорректный пользователь или токен"},
        404: {"description": "Товар не найден"},
        500: {"description": "Внутренняя ошибка сервера"},
    },
)
async def delete_product(
    id: int,
    request: Request,
    _: TokenUser = Depends(get_current_user),
):
    try:
        product = await delete_product_service(id, request)
        return {"message": "Product deleted successfully", "product": product}
    except Exception as e:
        await request.app.state.log.log_error("product", f"Ошибка при удалении товара: {str(e)}", {"id": id})
        raise
