"""
Service Models Package

This package contains all Pydantic models used throughout the service,
including input validation models, output response models, and the order
view row models.
"""

from .input import ExportOrdersRequest, OrderConfirmationRequest, describe_validation_error
from .output import EmailContent, ErrorOutput, OrderConfirmationOutput
from .order import CustomerOrder, OrderItem, cents_to_amount, format_amount, format_order_date, short_id

__all__ = [
    # Input models
    "ExportOrdersRequest",
    "OrderConfirmationRequest",
    "describe_validation_error",

    # Output models
    "EmailContent",
    "ErrorOutput",
    "OrderConfirmationOutput",

    # Order view models
    "CustomerOrder",
    "OrderItem",
    "cents_to_amount",
    "format_amount",
    "format_order_date",
    "short_id",
]
