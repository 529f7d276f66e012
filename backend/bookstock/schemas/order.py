"""Pydantic schemas for Order CRUD operations."""

from datetime import date

from pydantic import AliasChoices, BaseModel, Field, field_validator

from bookstock.models.order import OrderStatus
from bookstock.schemas.validators import (
    MAX_QUANTITY,
    normalize_status,
    validate_iso_date,
    validate_required_text,
)


class OrderIn(BaseModel):
    """Body of POST and PUT /api/orders. Every field is required."""

    book_name: str = Field(..., validation_alias=AliasChoices("bookName", "book_name"))
    quantity: int = Field(..., ge=0, le=MAX_QUANTITY)
    customer_name: str = Field(
        ..., validation_alias=AliasChoices("customerName", "customer_name")
    )
    category: str
    order_date: date = Field(
        ..., validation_alias=AliasChoices("orderDate", "order_date")
    )
    status: OrderStatus

    @field_validator("book_name", "customer_name", mode="before")
    @classmethod
    def validate_names(cls, v):
        return validate_required_text(v, max_length=255)

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v):
        return validate_required_text(v, max_length=100)

    @field_validator("order_date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return validate_iso_date(v)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v):
        return normalize_status(v)


class OrderOut(BaseModel):
    id: int
    book_name: str = Field(
        validation_alias=AliasChoices("book_name", "bookName"), serialization_alias="bookName"
    )
    quantity: int
    customer_name: str = Field(
        validation_alias=AliasChoices("customer_name", "customerName"),
        serialization_alias="customerName",
    )
    category: str
    order_date: date = Field(
        validation_alias=AliasChoices("order_date", "orderDate"), serialization_alias="orderDate"
    )
    status: OrderStatus

    model_config = {"from_attributes": True}
