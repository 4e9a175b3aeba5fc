import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Numeric, Boolean, JSON, ForeignKey

from foodorder.data.database import Base
from foodorder.domain.order_status import OrderStatus


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)

    # snapshot: [{"item_id", "name", "price", "quantity"}]
    items = Column(JSON, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    address = Column(JSON, nullable=False)

    status = Column(String, nullable=False, default=OrderStatus.FOOD_PROCESSING.value)
    payment = Column(Boolean, nullable=False, default=False)
    # checkout completed with a delayed payment method, kept out of the sweep
    awaiting_settlement = Column(Boolean, nullable=False, default=False)
    session_id = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
