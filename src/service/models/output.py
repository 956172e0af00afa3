"""
Output models for API responses using Pydantic.

This module defines the JSON bodies returned by the order confirmation function
and the shared error body. Responses are serialized with camelCase aliases and
without unset optional fields.
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field


class EmailContent(BaseModel):
    """Rendered confirmation email."""

    subject: Annotated[str, Field(
        description='Email subject line',
        examples=['Confirmação do Pedido #abc12345']
    )]

    body: Annotated[str, Field(
        description='Plain-text email body'
    )]


class OrderConfirmationOutput(BaseModel):
    """Response model for a processed order confirmation."""

    model_config = ConfigDict(populate_by_name=True)

    success: Annotated[bool, Field(
        default=True,
        description='The confirmation was processed'
    )] = True

    message: Annotated[str, Field(
        description='Human-readable outcome',
        examples=['Order confirmation email sent successfully']
    )]

    order_id: Annotated[str, Field(
        alias='orderId',
        description='Identifier of the confirmed order'
    )]

    email_sent: Annotated[bool, Field(
        alias='emailSent',
        description='Whether the mail transport accepted the email'
    )]

    mail_result: Annotated[Any | None, Field(
        default=None,
        alias='mailResult',
        description='Payload returned by the mail transport on success'
    )] = None

    error: Annotated[str | None, Field(
        default=None,
        description='Delivery failure reason'
    )] = None

    email_content: Annotated[EmailContent | None, Field(
        default=None,
        alias='emailContent',
        description='Rendered email, returned whenever it was not delivered'
    )] = None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class ErrorOutput(BaseModel):
    """Standard error response model."""

    error: Annotated[str, Field(
        description='Human-readable error message',
        examples=['Method not allowed', 'customerId is required']
    )]

    details: Annotated[str | None, Field(
        default=None,
        description='Underlying failure detail when available'
    )] = None
