"""
Environment variable models for type-safe configuration.

This module defines Pydantic models for the environment variables read by the
order export and order confirmation handlers.
"""

from typing import Annotated, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field, field_validator


class OrdersDataEnvVars(BaseModel):
    """Connection settings for the order view data API."""

    # Base URL of the PostgREST-compatible data API
    SUPABASE_URL: Annotated[str, Field(
        default='',
        description='Base URL of the order data API'
    )] = ''

    SUPABASE_SERVICE_ROLE_KEY: Annotated[str, Field(
        default='',
        description='API key sent to the order data API'
    )] = ''

    SUPABASE_SERVICE_ROLE_KEY_SECRET_NAME: Annotated[Optional[str], Field(
        default=None,
        description='Secrets Manager secret holding the data API key'
    )] = None

    ORDERS_VIEW_NAME: Annotated[str, Field(
        default='v_customer_orders',
        min_length=1,
        description='Denormalized order view queried by the handlers'
    )] = 'v_customer_orders'

    # Timezone used when rendering order dates
    DISPLAY_TIMEZONE: Annotated[str, Field(
        default='UTC',
        description='IANA timezone for rendered order dates'
    )] = 'UTC'

    @field_validator('DISPLAY_TIMEZONE')
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate that the display timezone is a known IANA zone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f'Unknown timezone: {v}')
        return v

    @property
    def display_timezone(self) -> ZoneInfo:
        return ZoneInfo(self.DISPLAY_TIMEZONE)


class ExportHandlerEnvVars(OrdersDataEnvVars):
    """Environment variables for the order CSV export handler."""


class ConfirmationHandlerEnvVars(OrdersDataEnvVars):
    """Environment variables for the order confirmation handler."""

    MAIL_API_URL: Annotated[Optional[str], Field(
        default=None,
        description='Endpoint of the HTTP mail transport'
    )] = None

    MAIL_API_KEY: Annotated[Optional[str], Field(
        default=None,
        description='Bearer token for the HTTP mail transport'
    )] = None

    MAIL_API_KEY_SECRET_NAME: Annotated[Optional[str], Field(
        default=None,
        description='Secrets Manager secret holding the mail transport token'
    )] = None

    MAIL_FROM_ADDRESS: Annotated[str, Field(
        default='noreply@ecommerce.com',
        min_length=3,
        description='Sender address of confirmation emails'
    )] = 'noreply@ecommerce.com'

    @property
    def mail_transport_configured(self) -> bool:
        """Check if both the mail endpoint and a credential source are set."""
        return bool(self.MAIL_API_URL) and bool(self.MAIL_API_KEY or self.MAIL_API_KEY_SECRET_NAME)


def get_export_env_vars() -> ExportHandlerEnvVars:
    """
    Get typed environment variables for the export handler.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=ExportHandlerEnvVars)


def get_confirmation_env_vars() -> ConfirmationHandlerEnvVars:
    """
    Get typed environment variables for the confirmation handler.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=ConfirmationHandlerEnvVars)
