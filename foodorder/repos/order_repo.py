# foodorder/repos/order_repo.py
from datetime import datetime
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from foodorder.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_by_user(self, user_id: str) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc())
            ).scalars()
        )

    def list_all(self) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel).order_by(OrderModel.created_at.desc())
            ).scalars()
        )

    def set_session_id(self, order_id: str, session_id: str) -> int:
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(session_id=session_id)
        )
        self.db.commit()
        return result.rowcount

    def mark_paid(self, order_id: str) -> int:
        # UPDATE orders SET payment = true WHERE id = :id AND payment = false
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.payment.is_(False))
            .values(payment=True)
        )
        self.db.commit()
        return result.rowcount

    def mark_awaiting_settlement(self, order_id: str) -> int:
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.payment.is_(False))
            .values(awaiting_settlement=True)
        )
        self.db.commit()
        return result.rowcount

    def delete_unpaid(self, order_id: str) -> int:
        result = self.db.execute(
            delete(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.payment.is_(False))
        )
        self.db.commit()
        return result.rowcount

    def update_status(self, order_id: str, old_status: str, new_status: str) -> int:
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == old_status)
            .values(status=new_status)
        )
        self.db.commit()
        return result.rowcount

    def delete_unpaid_before(self, cutoff: datetime) -> int:
        result = self.db.execute(
            delete(OrderModel)
            .where(
                OrderModel.payment.is_(False),
                OrderModel.awaiting_settlement.is_(False),
                OrderModel.created_at < cutoff,
            )
        )
        self.db.commit()
        return result.rowcount

    def rollback(self):
        self.db.rollback()
