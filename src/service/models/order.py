"""
Order domain models for the read-only order view.

Rows of ``v_customer_orders`` are denormalized: one row per order, with the
customer attributes and the ordered item list embedded. These models only
consume snapshots; nothing here writes back to the store.
"""

from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from typing import Annotated, Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

CENTS_PER_UNIT = Decimal(100)
TWO_PLACES = Decimal('0.01')


def cents_to_amount(cents: int) -> Decimal:
    """Convert minor currency units to a major-unit amount with two decimals."""
    return (Decimal(cents) / CENTS_PER_UNIT).quantize(TWO_PLACES)


def format_amount(cents: int) -> str:
    """Render minor currency units as a two-decimal string, e.g. ``1050 -> '10.50'``."""
    return f'{cents_to_amount(cents):.2f}'


def short_id(identifier: str) -> str:
    """First eight characters of an identifier, as shown to customers."""
    return identifier[:8]


def format_order_date(value: datetime, display_tz: tzinfo = timezone.utc) -> str:
    """
    Render an order timestamp as a pt-BR calendar date (``DD/MM/YYYY``).

    Naive timestamps are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(display_tz).strftime('%d/%m/%Y')


class OrderItem(BaseModel):
    """A single line of an order."""

    model_config = ConfigDict(extra='ignore')

    product_name: Annotated[str, Field(
        description='Display name of the product',
        examples=['Widget']
    )]

    quantity: Annotated[int, Field(
        ge=0,
        description='Number of units ordered',
        examples=[2]
    )]

    price_cents: Annotated[int, Field(
        ge=0,
        description='Unit price in minor currency units',
        examples=[1050]
    )]

    @property
    def line_total_cents(self) -> int:
        return self.price_cents * self.quantity


class CustomerOrder(BaseModel):
    """One row of the denormalized customer order view."""

    model_config = ConfigDict(extra='ignore')

    order_id: Annotated[str, Field(
        min_length=1,
        description='Unique identifier for the order',
        examples=['abc12345-6789-4def-8123-456789abcdef']
    )]

    status: Annotated[str, Field(
        description='Order lifecycle state as stored upstream',
        examples=['confirmed']
    )]

    total_cents: Annotated[int, Field(
        ge=0,
        description='Order total in minor currency units',
        examples=[2100]
    )]

    order_date: Annotated[datetime, Field(
        description='Timestamp when the order was placed'
    )]

    customer_name: Annotated[str, Field(
        description='Customer name attached to the order',
        examples=['Maria Silva']
    )]

    email: Annotated[str, Field(
        description='Customer email attached to the order',
        examples=['maria@example.com']
    )]

    items: Annotated[List[OrderItem], Field(
        default_factory=list,
        description='Ordered list of items, possibly empty'
    )]

    @field_validator('items', mode='before')
    @classmethod
    def null_items_as_empty(cls, v: Any) -> Any:
        """The view yields ``null`` for orders without item rows."""
        return [] if v is None else v

    @property
    def short_id(self) -> str:
        return short_id(self.order_id)

    @property
    def total_amount(self) -> str:
        return format_amount(self.total_cents)
