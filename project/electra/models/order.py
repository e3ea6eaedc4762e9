# electra/models/order.py

from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, JSON
from electra.utils.database import Base
from electra.utils.dates import utcnow

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)  # автоинкремент
    order_number = Column(String, unique=True, nullable=False, index=True)  # ORD001

    customer_name    = Column(String, nullable=False)
    customer_email   = Column(String, nullable=True)
    customer_phone   = Column(String, nullable=False)
    customer_address = Column(Text, nullable=True)

    items  = Column(JSON, nullable=False, default=list)   # позиции заказа (снимок на момент создания)
    total  = Column(Float, nullable=False, default=0)
    status = Column(String, nullable=False, default="pending")
    notes  = Column(Text, nullable=True)

    payment_condition = Column(String, nullable=False, default="immediate")
    priority          = Column(String, nullable=False, default="normal")
    dispatch_date     = Column(DateTime, nullable=True)
    scheduled_date    = Column(DateTime, nullable=True)
    order_image       = Column(String, nullable=True)     # URL на Cloudinary

    is_paid             = Column(Boolean, nullable=False, default=False)
    paid_at             = Column(DateTime, nullable=True)
    paid_by             = Column(String, nullable=True)
    payment_received_by = Column(String, nullable=True)

    created_by      = Column(String, nullable=False, index=True)
    assigned_to     = Column(String, nullable=True, index=True)
    delivery_person = Column(String, nullable=True)
    iswithout       = Column(Boolean, nullable=False, default=False)  # назначен особому сотруднику

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
