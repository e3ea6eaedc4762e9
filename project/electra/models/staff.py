# electra/models/staff.py

from sqlalchemy import Column, Integer, String, DateTime, JSON
from electra.utils.database import Base
from electra.utils.dates import utcnow

class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)  # автоинкремент
    name = Column(String, nullable=False)
    phone = Column(String(10), unique=True, nullable=False, index=True)  # логин
    password = Column(String, nullable=False)            # хэш пароля
    role = Column(String, nullable=False, default="staff")
    email = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow)
    # [{"date": "2025-01-31T00:00:00", "is_present": true, "remarks": null}, ...]
    attendance = Column(JSON, nullable=False, default=list)
