# import all models so SQLAlchemy registers them in Base.metadata

from foodorder.data.models.user import UserModel
from foodorder.data.models.order import OrderModel

__all__ = ["UserModel", "OrderModel"]
