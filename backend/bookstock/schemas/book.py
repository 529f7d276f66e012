"""Pydantic schemas for Book CRUD operations.

Wire names (`amount`, `cost`, `date`) map onto the columns `quantity`,
`price` and `date_added`. The column names, and `book_name` /
`dateAdded`, are accepted on input as well.
"""

from datetime import date

from pydantic import AliasChoices, BaseModel, Field, field_validator

from bookstock.schemas.validators import (
    MAX_QUANTITY,
    validate_iso_date,
    validate_required_text,
)


class BookIn(BaseModel):
    """Body of POST and PUT /api/books. Every field is required."""

    name: str = Field(..., validation_alias=AliasChoices("name", "book_name"))
    category: str
    quantity: int = Field(
        ..., ge=0, le=MAX_QUANTITY, validation_alias=AliasChoices("amount", "quantity")
    )
    price: float = Field(..., ge=0, validation_alias=AliasChoices("cost", "price"))
    date_added: date = Field(
        ..., validation_alias=AliasChoices("date", "date_added", "dateAdded")
    )

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        return validate_required_text(v, max_length=255)

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v):
        return validate_required_text(v, max_length=100)

    @field_validator("date_added", mode="before")
    @classmethod
    def validate_date(cls, v):
        return validate_iso_date(v)


class BookOut(BaseModel):
    id: int
    name: str
    category: str
    quantity: int = Field(
        validation_alias=AliasChoices("quantity", "amount"), serialization_alias="amount"
    )
    price: float = Field(
        validation_alias=AliasChoices("price", "cost"), serialization_alias="cost"
    )
    date_added: date = Field(
        validation_alias=AliasChoices("date_added", "date"), serialization_alias="date"
    )

    model_config = {"from_attributes": True}
