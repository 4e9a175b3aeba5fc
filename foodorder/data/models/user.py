from sqlalchemy import Column, String, JSON

from foodorder.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)

    # item_id -> quantity
    cart_data = Column(JSON, nullable=False, default=dict)
