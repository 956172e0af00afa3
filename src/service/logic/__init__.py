"""
Business Logic Layer Module.

This module contains the rendering and workflow logic of the order
notification functions. It sits between the handlers (HTTP boundary) and the
data access layer (order view reads, mail transport).

- order_export: CSV rendering of a customer's order history
- order_confirmation: confirmation email rendering and best-effort delivery
"""

from service.logic.order_confirmation import confirm_order, render_confirmation_email
from service.logic.order_export import CsvExport, export_customer_orders, render_orders_csv

__all__ = [
    "CsvExport",
    "confirm_order",
    "export_customer_orders",
    "render_confirmation_email",
    "render_orders_csv",
]
