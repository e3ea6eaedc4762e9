# electra/schemas/staff.py

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from electra.schemas.common import CamelModel, FlexibleDatetime

Role = Literal["admin", "staff", "executive"]

PHONE_PATTERN = r"^\d{10}$"


class StaffBase(CamelModel):
    """Поля сотрудника, общие для создания и обновления."""
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN, description="10 цифр")
    email: Optional[EmailStr] = None
    role: Optional[Role] = None

    @field_validator("name", "phone", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value


class StaffRecord(StaffBase):
    """Итоговая запись сотрудника без пароля (проверяется и после обновления)."""
    name: str = Field(..., min_length=1)
    phone: str = Field(..., pattern=PHONE_PATTERN, description="10 цифр")
    role: Role


class StaffCreate(StaffRecord):
    """
    Создание сотрудника администратором.
    Обязательны name, phone, password и role.
    """
    password: str = Field(..., min_length=6)


class StaffUpdate(StaffBase):
    """
    Обновление сотрудника. Передаются только изменяемые поля;
    пароль меняется, только если передан непустой.
    """
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("password", mode="before")
    @classmethod
    def empty_password(cls, value):
        return value or None


class AttendanceRecord(CamelModel):
    date: datetime
    is_present: bool = True
    remarks: Optional[str] = None


class AttendanceCreate(CamelModel):
    date: FlexibleDatetime
    is_present: bool = True
    remarks: Optional[str] = None


class StaffResponse(CamelModel):
    id: int
    name: str
    phone: str
    role: Role
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    attendance: List[AttendanceRecord] = []


class LoginRequest(CamelModel):
    phone: str
    password: str


class LoginResponse(BaseModel):
    token: str
    staff: StaffResponse


class StaffAttendanceResponse(CamelModel):
    staff_id: int
    name: str
    attendance: List[AttendanceRecord]


class StaffDayAttendance(CamelModel):
    staff_id: int
    name: str
    phone: str
    role: Role
    attendance: Optional[AttendanceRecord] = None


class DailyAttendanceResponse(CamelModel):
    date: datetime
    staff_attendance: List[StaffDayAttendance]


class TokenUser(BaseModel):
    """Данные сотрудника из JWT токена."""
    id: int
    phone: str
    role: Role
