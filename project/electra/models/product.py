# electra/models/product.py

from sqlalchemy import Column, Integer, String, DateTime
from electra.utils.database import Base
from electra.utils.dates import utcnow

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)  # автоинкремент
    name = Column(String, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    dimension = Column(String, nullable=False, default="Pc")  # единица измерения
    threshold = Column(Integer, nullable=True)                # минимальный остаток
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
