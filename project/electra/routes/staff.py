# electra/routes/staff.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from electra.middleware.auth import get_current_user, require_admin, require_admin_or_executive
from electra.schemas.staff import (
    AttendanceCreate,
    DailyAttendanceResponse,
    LoginRequest,
    LoginResponse,
    StaffAttendanceResponse,
    StaffCreate,
    StaffResponse,
    StaffUpdate,
    TokenUser,
)
from electra.services.attendance import (
    read_attendance_by_date_service,
    read_staff_attendance_service,
    record_attendance_service,
)
from electra.services.staff import (
    create_staff_service,
    delete_staff_service,
    login_staff_service,
    read_staff_list_service,
    read_staff_service,
    update_staff_service,
)
from electra.utils.dates import parse_datetime

router = APIRouter()


def parse_date_query(value: Optional[str]):
    if not value:
        return None
    try:
        return parse_datetime(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")


# ────────────── LOGIN ──────────────
@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Вход сотрудника по телефону и паролю",
    responses={
        200: {
            "description": "✅ Токен выдан",
            "content": {
                "application/json": {
                    "example": {
                        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "staff": {
                            "id": 1,
                            "name": "Admin User",
                            "phone": "9876543210",
                            "role": "admin",
                            "email": "admin@electrical.com",
                            "attendance": [],
                        },
                    }
                }
            },
        },
        401: {"description": "❌ Неверный телефон или пароль"},
        400: {"description": "⚠️ Не переданы phone или password"},
    },
)
async def login_staff(credentials: LoginRequest, request: Request):
    """
    Авторизация сотрудника.

    **Входные данные (JSON):** `phone`, `password`

    **Выходные данные:** `token` (JWT на 24 часа, payload `{id, phone, role}`)
    и данные сотрудника без пароля.

    Неизвестный телефон и неверный пароль возвращают одинаковый `401`.
    """
    token, staff = await login_staff_service(credentials.phone, credentials.password, request)
    return {"token": token, "staff": staff}


# ────────────── ATTENDANCE ──────────────
@router.get(
    "/attendance/date",
    response_model=DailyAttendanceResponse,
    summary="Посещаемость всех сотрудников за день (admin, executive)",
    responses={400: {"description": "Дата не передана или неверна"}},
)
async def read_attendance_by_date(
    request: Request,
    date: Optional[str] = None,
    _: TokenUser = Depends(require_admin_or_executive),
):
    if not date:
        raise HTTPException(status_code=400, detail="Date parameter is required")
    target = parse_date_query(date)
    return await read_attendance_by_date_service(target, request)


@router.post(
    "/{staff_id}/attendance",
    response_model=StaffResponse,
    summary="Отметить посещаемость (admin, executive)",
    responses={
        400: {"description": "Неверная дата"},
        404: {"description": "Сотрудник не найден"},
    },
)
async def record_attendance(
    staff_id: int,
    entry: AttendanceCreate,
    request: Request,
    current_user: TokenUser = Depends(require_admin_or_executive),
):
    """
    Запись за тот же календарный день перезаписывается, новая не добавляется.
    """
    try:
        return await record_attendance_service(staff_id, entry, request)
    except Exception as e:
        await request.app.state.log.log_error(
            "attendance", f"Ошибка при отметке посещаемости: {e}", {"staff_id": staff_id, "by": current_user.id}
        )
        raise


@router.get(
    "/{staff_id}/attendance",
    response_model=StaffAttendanceResponse,
    summary="Посещаемость сотрудника за период (admin, executive)",
    responses={404: {"description": "Сотрудник не найден"}},
)
async def read_staff_attendance(
    staff_id: int,
    request: Request,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    _: TokenUser = Depends(require_admin_or_executive),
):
    return await read_staff_attendance_service(
        staff_id, request, start=parse_date_query(start_date), end=parse_date_query(end_date)
    )


# ────────────── CRUD STAFF ──────────────
@router.get(
    "",
    response_model=List[StaffResponse],
    summary="Список сотрудников",
    responses={401: {"description": "Токен невалиден"}},
)
async def get_staff_list(request: Request, _: TokenUser = Depends(get_current_user)):
    return await read_staff_list_service(request)


@router.post(
    "",
    response_model=StaffResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создание сотрудника (только администратор)",
    responses={
        201: {"description": "Сотрудник создан"},
        400: {"description": "Ошибка валидации или телефон уже занят"},
        401: {"description": "Отсутствует или неверный токен"},
        403: {"description": "Только администратор"},
    },
)
async def create_staff(
    staff: StaffCreate,
    request: Request,
    current_user: TokenUser = Depends(require_admin),
):
    """
    ## Создание сотрудника

    - Обязательны `name`, `phone` (10 цифр), `password` (от 6 символов), `role`.
    - Телефон уникален: повтор -> `400` с `field: "phone"`.
    - Пароль хранится только в виде хэша и не возвращается.
    """
    try:
        return await create_staff_service(staff, request)
    except Exception as e:
        await request.app.state.log.log_error(
            "staff", f"Ошибка при создании сотрудника: {e!r}", {"by": current_user.id}
        )
        raise


@router.get(
    "/{id}",
    response_model=StaffResponse,
    summary="Сотрудник по ID",
    responses={404: {"description": "Сотрудник не найден"}},
)
async def get_staff(id: int, request: Request, _: TokenUser = Depends(get_current_user)):
    return await read_staff_service(id, request)


@router.put(
    "/{id}",
    response_model=StaffResponse,
    summary="Обновление сотрудника (только администратор)",
    responses={
        400: {"description": "Ошибка валидации или телефон уже занят"},
        403: {"description": "Только администратор"},
        404: {"description": "Сотрудник не найден"},
    },
)
async def update_staff(
    id: int,
    staff_update: StaffUpdate,
    request: Request,
    _: TokenUser = Depends(require_admin),
):
    try:
        return await update_staff_service(id, staff_update, request)
    except Exception as e:
        await request.app.state.log.log_error("staff", f"Ошибка при обновлении сотрудника: {e!r}", {"id": id})
        raise


@router.delete(
    "/{id}",
    summary="Удаление сотрудника (только администратор)",
    responses={
        200: {"description": "Сотрудник удалён"},
        403: {"description": "Только администратор"},
        404: {"description": "Сотрудник не найден"},
    },
)
async def delete_staff(id: int, request: Request, _: TokenUser = Depends(require_admin)):
    await delete_staff_service(id, request)
    return {"message": "Staff member deleted successfully"}
