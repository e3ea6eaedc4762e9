# electra/services/attendance.py

"""
Учёт посещаемости. Записи хранятся внутри сотрудника (JSON-колонка attendance),
не больше одной записи на календарный день.
"""

from datetime import datetime

from sqlalchemy.future import select
from sqlalchemy.orm.attributes import flag_modified
from fastapi import Request

from electra.models.staff import Staff as StaffModel
from electra.schemas.staff import AttendanceCreate
from electra.services.staff import read_staff_service
from electra.utils.dates import end_of_day, parse_datetime, start_of_day, utcnow


def record_day(record: dict) -> datetime:
    return start_of_day(parse_datetime(record["date"]))


def find_record(records: list[dict], day: datetime) -> dict | None:
    return next((r for r in records if record_day(r) == day), None)


def upsert_record(records: list[dict], entry: AttendanceCreate) -> list[dict]:
    """
    Возвращает новый список записей: запись за тот же день изменяется
    (remarks - только если переданы), иначе добавляется новая.
    """
    day = start_of_day(entry.date)
    records = [dict(r) for r in records]

    existing = find_record(records, day)
    if existing is not None:
        existing["is_present"] = entry.is_present
        if entry.remarks:
            existing["remarks"] = entry.remarks
    else:
        records.append({
            "date": day.isoformat(),
            "is_present": entry.is_present,
            "remarks": entry.remarks,
        })
    return records


async def record_attendance_service(staff_id: int, entry: AttendanceCreate, request: Request) -> StaffModel:
    """
    Отметка посещаемости сотрудника за день.
    """
    db = request.state.db
    log = request.app.state.log

    db_staff = await read_staff_service(staff_id, request)

    db_staff.attendance = upsert_record(db_staff.attendance or [], entry)
    flag_modified(db_staff, "attendance")
    await db.commit()
    await db.refresh(db_staff)

    await log.log_info(
        "attendance",
        "Посещаемость отмечена",
        {"staff_id": staff_id, "date": start_of_day(entry.date), "is_present": entry.is_present},
    )
    return db_staff


async def read_staff_attendance_service(
    staff_id: int,
    request: Request,
    start: datetime | None = None,
    end: datetime | None = None,
) -> dict:
    """
    Посещаемость сотрудника за период, новые записи первыми.
    Начало включительно, конец - до конца указанного дня.
    """
    db_staff = await read_staff_service(staff_id, request)

    records = list(db_staff.attendance or [])
    if start is not None or end is not None:
        lower = start or datetime(1970, 1, 1)
        upper = end_of_day(end or utcnow())
        records = [r for r in records if lower <= parse_datetime(r["date"]) <= upper]

    records.sort(key=lambda r: parse_datetime(r["date"]), reverse=True)

    return {
        "staff_id": db_staff.id,
        "name": db_staff.name,
        "attendance": records,
    }


async def read_attendance_by_date_service(target: datetime, request: Request) -> dict:
    """
    Посещаемость всех сотрудников за один день: для каждого - запись или None.
    """
    db = request.state.db
    log = request.app.state.log

    day = start_of_day(target)
    result = await db.execute(select(StaffModel).order_by(StaffModel.id))
    staff = result.scalars().all()

    staff_attendance = [
        {
            "staff_id": s.id,
            "name": s.name,
            "phone": s.phone,
            "role": s.role,
            "attendance": find_record(s.attendance or [], day),
        }
        for s in staff
    ]

    await log.log_info("attendance", "Посещаемость за день загружена", {"date": day, "count": len(staff)})
    return {"date": day, "staff_attendance": staff_attendance}
