# electra/services/staff.py

from sqlalchemy.exc import IntegrityError
from sqlalchemy.future import select
from fastapi import HTTPException, Request, status

from electra.models.staff import Staff as StaffModel
from electra.schemas.common import validate_payload
from electra.schemas.staff import StaffCreate, StaffRecord, StaffUpdate
from electra.utils.errors import DuplicateKeyError
from electra.utils.security import create_access_token, hash_password, verify_password

PHONE_EXISTS = "Phone number already exists"


async def read_staff_list_service(request: Request) -> list[StaffModel]:
    """
    Получение списка сотрудников.
    """
    db = request.state.db
    log = request.app.state.log

    result = await db.execute(select(StaffModel).order_by(StaffModel.id))
    staff = result.scalars().all()

    await log.log_info("staff", f"{len(staff)} сотрудников загружено")
    return staff


async def read_staff_service(id: int, request: Request) -> StaffModel:
    """
    Чтение сотрудника по ID.
    """
    db = request.state.db
    log = request.app.state.log

    db_staff = await db.get(StaffModel, id)
    if db_staff is None:
        await log.log_error("staff", "Сотрудник не найден", {"id": id})
        raise HTTPException(status_code=404, detail="Staff member not found")

    return db_staff


async def _phone_taken(db, phone: str, exclude_id: int | None = None) -> bool:
    query = select(StaffModel.id).where(StaffModel.phone == phone)
    if exclude_id is not None:
        query = query.where(StaffModel.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None


async def create_staff_service(staff: StaffCreate, request: Request) -> StaffModel:
    """
    Создание сотрудника. Телефон уникален, пароль хранится только в виде хэша.
    """
    db = request.state.db
    log = request.app.state.log

    if await _phone_taken(db, staff.phone):
        await log.log_warning("staff", "Телефон уже занят", {"phone": staff.phone})
        raise DuplicateKeyError("phone", PHONE_EXISTS)

    db_staff = StaffModel(
        name=staff.name,
        phone=staff.phone,
        password=hash_password(staff.password),
        role=staff.role,
        email=staff.email,
        attendance=[],
    )
    db.add(db_staff)
    try:
        await db.commit()
    except IntegrityError:
        # телефон заняли между проверкой и вставкой
        await db.rollback()
        raise DuplicateKeyError("phone", PHONE_EXISTS)
    await db.refresh(db_staff)

    await log.log_info("staff", "Сотрудник создан", {"id": db_staff.id, "role": db_staff.role})
    return db_staff


async def update_staff_service(id: int, staff_update: StaffUpdate, request: Request) -> StaffModel:
    """
    Обновление сотрудника по ID.
    Пароль перехэшируется только если передан новый непустой пароль.
    """
    db = request.state.db
    log = request.app.state.log

    db_staff = await read_staff_service(id, request)

    changes = staff_update.model_dump(exclude_unset=True)
    password = changes.pop("password", None)

    # повторная валидация итоговой записи
    merged = {
        "name": db_staff.name,
        "phone": db_staff.phone,
        "role": db_staff.role,
        "email": db_staff.email,
    }
    merged.update({k: v for k, v in changes.items() if v is not None or k == "email"})
    validated = validate_payload(StaffRecord, merged)

    if validated.phone != db_staff.phone and await _phone_taken(db, validated.phone, exclude_id=id):
        raise DuplicateKeyError("phone", PHONE_EXISTS)

    db_staff.name = validated.name
    db_staff.phone = validated.phone
    db_staff.role = validated.role
    db_staff.email = validated.email
    if password:
        db_staff.password = hash_password(password)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateKeyError("phone", PHONE_EXISTS)
    await db.refresh(db_staff)

    await log.log_info("staff", "Сотрудник обновлён", {"id": id, "fields": sorted(changes)})
    return db_staff


async def delete_staff_service(id: int, request: Request) -> None:
    """
    Удаление сотрудника по ID.
    """
    db = request.state.db
    log = request.app.state.log

    db_staff = await read_staff_service(id, request)
    await db.delete(db_staff)
    await db.commit()
    await log.log_info("staff", "Сотрудник удалён", {"id": id})


async def login_staff_service(phone: str, password: str, request: Request) -> tuple[str, StaffModel]:
    """
    Вход по телефону и паролю.
    Неизвестный телефон и неверный пароль дают один и тот же ответ 401.
    """
    db = request.state.db
    log = request.app.state.log

    result = await db.execute(select(StaffModel).where(StaffModel.phone == phone))
    db_staff = result.scalar_one_or_none()

    if db_staff is None or not verify_password(password, db_staff.password):
        await log.log_warning("auth", "Неудачная попытка входа", {"phone": phone})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token({"id": db_staff.id, "phone": db_staff.phone, "role": db_staff.role})
    await log.log_info("auth", "Сотрудник авторизован", {"id": db_staff.id, "role": db_staff.role})
    return token, db_staff
