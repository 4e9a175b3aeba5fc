# foodorder/repos/user_repo.py
from typing import Dict

from sqlalchemy import update
from sqlalchemy.orm import Session

from foodorder.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save_cart(self, user_id: str, cart_data: Dict[str, int]) -> int:
        # whole-document write, the JSON column is replaced not patched
        result = self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(cart_data=cart_data)
        )
        self.db.commit()
        return result.rowcount

    def rollback(self):
        self.db.rollback()
