"""
AWS Lambda Handlers Module.

This module contains the Lambda function handlers that serve as entry points
for the order notification functions. Each handler implements the three-layer
architecture pattern:

1. Handler Layer (this module): request parsing, validation, error-to-response mapping
2. Logic Layer: CSV and email rendering, confirmation workflow
3. Data Access Layer: order view reads and mail transport calls

Handlers:
- export_orders_handler: CSV export of a customer's order history
- order_confirmation_handler: order confirmation email dispatch
"""

__version__ = "1.0.0"

# Re-export handler utilities for convenience
from service.handlers.utils.http import CORS_HEADERS
from service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "CORS_HEADERS",
    "logger",
    "tracer",
    "metrics",
]
