"""
Data Access Layer (DAL) for the order notification functions.

This module provides the read interface over the denormalized customer order
view and the factory that builds the configured implementation.
"""

from typing import List, Optional, Protocol, runtime_checkable

from service.models.order import CustomerOrder


@runtime_checkable
class OrdersReader(Protocol):
    """Protocol defining the read-only order view interface."""

    def list_customer_orders(
        self,
        customer_id: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[CustomerOrder]:
        """List a customer's orders, newest first, optionally bounded by order date."""
        ...

    def get_order_by_id(self, order_id: str) -> Optional[CustomerOrder]:
        """Retrieve a single order by its ID."""
        ...


def get_orders_reader(base_url: str, api_key: str, view_name: str = 'v_customer_orders') -> OrdersReader:
    """
    Factory function to get the order view reader.

    Args:
        base_url: Base URL of the data API
        api_key: Key sent with every query
        view_name: Name of the order view

    Returns:
        OrdersReader instance
    """
    # Import here to avoid circular imports
    from service.dal.orders_view_handler import OrdersViewHandler

    return OrdersViewHandler(base_url=base_url, api_key=api_key, view_name=view_name)


__all__ = [
    'OrdersReader',
    'get_orders_reader',
]
