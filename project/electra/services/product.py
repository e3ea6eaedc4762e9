# electra/services/product.py

from sqlalchemy.future import select
from fastapi import HTTPException, Request

from electra.models.product import Product as ProductModel
from electra.schemas.common import validate_payload
from electra.schemas.product import ProductCreate, ProductUpdate


async def read_products_service(request: Request) -> list[ProductModel]:
    """
    Получение списка товаров, новые первыми.
    """
    db = request.state.db
    log = request.app.state.log

    result = await db.execute(
        select(ProductModel).order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
    )
    products = result.scalars().all()

    await log.log_info("product", f"{len(products)} товаров загружено")
    return products


async def read_product_service(id: int, request: Request) -> ProductModel:
    """
    Чтение товара по ID.
    """
    db = request.state.db
    log = request.app.state.log

    db_product = await db.get(ProductModel, id)
    if db_product is None:
        await log.log_error("product", "Товар не найден", {"id": id})
        raise HTTPException(status_code=404, detail="Product not found")

    return db_product


async def create_product_service(product: ProductCreate, request: Request) -> ProductModel:
    """
    Создание нового товара.
    """
    db = request.state.db
    log = request.app.state.log

    db_product = ProductModel(**product.model_dump())
    db.add(db_product)
    await db.commit()
    await db.refresh(db_product)

    await log.log_info("product", "Товар создан", {"id": db_product.id, "product": product})
    return db_product


async def update_product_service(id: int, product_update: ProductUpdate, request: Request) -> ProductModel:
    """
    Обновление товара по ID. Итоговая запись проверяется схемой создания.
    """
    db = request.state.db
    log = request.app.state.log

    db_product = await read_product_service(id, request)

    merged = ProductCreate.model_validate(db_product).model_dump()
    merged.update(product_update.model_dump(exclude_unset=True))
    validated = validate_payload(ProductCreate, merged)

    for key, value in validated.model_dump().items():
        setattr(db_product, key, value)

    await db.commit()
    await db.refresh(db_product)
    await log.log_info("product", "Товар обновлён", {"id": id, "product": validated})
    return db_product


async def delete_product_service(id: int, request: Request) -> ProductModel:
    """
    Удаление товара по ID. Заказы с этим товаром не затрагиваются.
    """
    db = request.state.db
    log = request.app.state.log

    db_product = await read_product_service(id, request)
    await db.delete(db_product)
    await db.commit()
    await log.log_info("product", "Товар удалён", {"id": id, "name": db_product.name})
    return db_product
