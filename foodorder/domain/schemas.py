# foodorder/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for request/response bodies; JSON keys are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageOut(ApiModel):
    success: bool
    message: str


class ErrorOut(MessageOut):
    """Failure envelope, ``error`` is the machine-readable kind."""

    error: str
    detail: str | None = None


# cart


class CartItemIn(ApiModel):
    """Body for adding/removing a single unit of an item."""

    item_id: str = Field(..., min_length=1, description="Food item identifier")


class CartDataOut(ApiModel):
    success: bool = True
    cart_data: Dict[str, int]


# orders


class OrderItemIn(ApiModel):
    """Line item as submitted by the storefront."""

    item_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("itemId", "item_id", "_id"),
        description="Catalog id; when present the catalog price is used",
    )
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    quantity: int = Field(..., gt=0)


class PlaceOrderIn(ApiModel):
    items: List[OrderItemIn]
    amount: Decimal = Field(..., ge=0, decimal_places=2)
    address: Dict[str, Any] | str


class PlaceOrderOut(ApiModel):
    success: bool = True
    session_url: str = Field(..., alias="session_url")


class VerifyOrderIn(ApiModel):
    order_id: str = Field(..., min_length=1)
    success: bool


class StatusUpdateIn(ApiModel):
    order_id: str = Field(..., min_length=1)
    status: str


class OrderItemOut(ApiModel):
    item_id: str | None = None
    name: str
    price: float
    quantity: int


class OrderOut(ApiModel):
    id: str
    user_id: str
    items: List[OrderItemOut]
    amount: float
    address: Dict[str, Any] | str
    status: str
    payment: bool
    created_at: datetime


class OrdersOut(ApiModel):
    success: bool = True
    data: List[OrderOut]
