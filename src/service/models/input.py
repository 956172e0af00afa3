"""
Input models for request validation using Pydantic.

This module defines the request bodies accepted by the order export and order
confirmation functions. Field names follow the camelCase wire format through
aliases.
"""

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# pydantic error types that mean "the caller did not supply a value"
_MISSING_ERROR_TYPES = frozenset({'missing', 'string_too_short'})


def _validate_iso_date(v: Optional[str], field_name: str) -> Optional[str]:
    if v is None or v == '':
        return None
    try:
        date.fromisoformat(v)
    except ValueError:
        try:
            datetime.fromisoformat(v)
        except ValueError:
            raise ValueError(f'{field_name} must be an ISO-8601 date')
    return v


class ExportOrdersRequest(BaseModel):
    """Request model for exporting a customer's orders as CSV."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    customer_id: Annotated[str, Field(
        alias='customerId',
        strict=True,
        min_length=1,
        description='Customer whose orders are exported',
        examples=['7f1c2d3e-4b5a-6978-8a9b-0c1d2e3f4a5b']
    )]

    start_date: Annotated[Optional[str], Field(
        default=None,
        alias='startDate',
        description='Inclusive lower bound on the order date',
        examples=['2024-01-01']
    )] = None

    end_date: Annotated[Optional[str], Field(
        default=None,
        alias='endDate',
        description='Inclusive upper bound on the order date',
        examples=['2024-12-31']
    )] = None

    @field_validator('start_date')
    @classmethod
    def validate_start_date(cls, v: Optional[str]) -> Optional[str]:
        return _validate_iso_date(v, 'startDate')

    @field_validator('end_date')
    @classmethod
    def validate_end_date(cls, v: Optional[str]) -> Optional[str]:
        return _validate_iso_date(v, 'endDate')


class OrderConfirmationRequest(BaseModel):
    """Request model for sending an order confirmation email."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    order_id: Annotated[str, Field(
        alias='orderId',
        strict=True,
        min_length=1,
        description='Order to confirm',
        examples=['abc12345-6789-4def-8123-456789abcdef']
    )]


def describe_validation_error(error: ValidationError) -> str:
    """
    Turn a pydantic validation error into a single caller-facing message.

    A missing or empty field reads ``"<field> is required"``; anything else
    carries the validator message.
    """
    first = error.errors()[0]
    field = str(first['loc'][-1]) if first.get('loc') else 'body'

    if first['type'] in _MISSING_ERROR_TYPES or first.get('input', '') is None:
        return f'{field} is required'

    message = first['msg']
    # Custom validators surface as "Value error, <message>"
    if message.startswith('Value error, '):
        return message[len('Value error, '):]
    return f'{field}: {message}'
