# electra/models/counter.py

from sqlalchemy import Column, Integer, String
from electra.utils.database import Base

class Counter(Base):
    """Именованная последовательность (номера заказов)."""
    __tablename__ = "counters"

    name = Column(String, primary_key=True)
    value = Column(Integer, nullable=False, default=0)
