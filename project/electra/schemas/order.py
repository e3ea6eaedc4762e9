# electra/schemas/order.py

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from electra.schemas.common import CamelModel, FlexibleDatetime

OrderStatus = Literal["pending", "invoice", "dispatched", "dc"]
PaymentCondition = Literal["immediate", "days15", "days30"]
Priority = Literal["urgent", "normal"]


class OrderItem(CamelModel):
    """Позиция заказа - снимок товара на момент создания."""
    product_id: str
    product_name: str
    quantity: float
    price: float


class OrderBase(CamelModel):
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    items: Optional[List[OrderItem]] = None
    total: Optional[float] = None
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None
    payment_condition: Optional[PaymentCondition] = None
    priority: Optional[Priority] = None
    dispatch_date: Optional[FlexibleDatetime] = None
    scheduled_date: Optional[FlexibleDatetime] = None
    order_image: Optional[str] = None
    is_paid: Optional[bool] = None
    paid_at: Optional[FlexibleDatetime] = None
    created_by: Optional[str] = None
    assigned_to: Optional[str] = None
    delivery_person: Optional[str] = None


class OrderCreate(OrderBase):
    """
    Полная запись заказа, прошедшая валидацию.
    orderNumber и iswithout назначает сервер, из запроса они не принимаются.
    """
    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1)
    items: List[OrderItem] = []
    status: OrderStatus = "pending"
    payment_condition: PaymentCondition = "immediate"
    priority: Priority = "normal"
    is_paid: bool = False
    created_by: str = Field(..., min_length=1)


class OrderUpdate(OrderBase):
    pass


class Order(OrderCreate):
    id: int
    order_number: str
    total: float
    paid_by: Optional[str] = None
    payment_received_by: Optional[str] = None
    iswithout: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MarkPaidRequest(CamelModel):
    paid_by: Optional[str] = None
    payment_received_by: Optional[str] = None


class DeliveryPersonRequest(CamelModel):
    delivery_person_id: Optional[str] = None
