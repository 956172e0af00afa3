"""
Business logic for exporting a customer's order history as CSV.

One header row is followed by one row per (order, item) pair. Orders without
items still produce a single row with zeroed item fields, so every order is
represented at least once.
"""

import csv
import io
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from typing import Iterable, List, Optional

from aws_lambda_powertools.metrics import MetricUnit

from service.dal import OrdersReader
from service.handlers.utils.errors import ResourceNotFoundError
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.input import ExportOrdersRequest
from service.models.order import CustomerOrder, cents_to_amount, format_order_date

CSV_HEADER = [
    'Order ID',
    'Order Date',
    'Status',
    'Customer Name',
    'Customer Email',
    'Product Name',
    'Quantity',
    'Unit Price (R$)',
    'Item Total (R$)',
    'Order Total (R$)',
]

ZERO_AMOUNT = Decimal('0.00')


@dataclass(frozen=True)
class CsvExport:
    """A rendered export ready to be returned as a download."""

    content: str
    filename: str
    order_count: int
    row_count: int


def build_order_rows(order: CustomerOrder, display_tz: tzinfo = timezone.utc) -> List[list]:
    """Build the CSV rows for one order."""
    order_columns = [
        order.short_id,
        format_order_date(order.order_date, display_tz),
        order.status,
        order.customer_name,
        order.email,
    ]
    order_total = cents_to_amount(order.total_cents)

    if not order.items:
        return [order_columns + ['', 0, ZERO_AMOUNT, ZERO_AMOUNT, order_total]]

    return [
        order_columns + [
            item.product_name,
            item.quantity,
            cents_to_amount(item.price_cents),
            cents_to_amount(item.line_total_cents),
            order_total,
        ]
        for item in order.items
    ]


def render_orders_csv(orders: Iterable[CustomerOrder], display_tz: tzinfo = timezone.utc) -> str:
    """
    Render orders as CSV text.

    Text columns are always double-quoted and embedded quotes are doubled;
    numeric columns are written bare. Rows are separated by ``\\n`` with no
    trailing line break.
    """
    buffer = io.StringIO()
    # Header labels are plain, unquoted
    buffer.write(','.join(CSV_HEADER) + '\n')

    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator='\n')
    for order in orders:
        writer.writerows(build_order_rows(order, display_tz))

    return buffer.getvalue().rstrip('\n')


def build_export_filename(customer_id: str, now: Optional[datetime] = None) -> str:
    """``orders_<first 8 of customer id>_<UTC timestamp with hyphens>.csv``"""
    now = now or datetime.now(timezone.utc)
    timestamp = now.astimezone(timezone.utc).strftime('%Y-%m-%dT%H-%M-%S')
    return f'orders_{customer_id[:8]}_{timestamp}.csv'


@tracer.capture_method(capture_response=False)
def export_customer_orders(
    reader: OrdersReader,
    request: ExportOrdersRequest,
    display_tz: tzinfo = timezone.utc,
    now: Optional[datetime] = None,
) -> CsvExport:
    """
    Export a customer's orders, optionally bounded by order date.

    Args:
        reader: Order view reader
        request: Validated export request
        display_tz: Timezone for rendered order dates
        now: Clock override for the filename timestamp

    Returns:
        Rendered CSV export

    Raises:
        UpstreamError: If the order query fails
        ResourceNotFoundError: If the customer has no matching orders
    """
    tracer.put_annotation('customer_id', request.customer_id)

    orders = reader.list_customer_orders(
        customer_id=request.customer_id,
        start_date=request.start_date,
        end_date=request.end_date,
    )

    if not orders:
        raise ResourceNotFoundError(
            message='No orders found for this customer',
            resource_type='CustomerOrders',
            resource_id=request.customer_id,
        )

    content = render_orders_csv(orders, display_tz)
    row_count = sum(max(1, len(order.items)) for order in orders)

    metrics.add_metric(name='OrdersExported', unit=MetricUnit.Count, value=len(orders))
    metrics.add_metric(name='CsvRowsExported', unit=MetricUnit.Count, value=row_count)

    logger.info('Order export rendered', extra={
        'customer_id': request.customer_id,
        'order_count': len(orders),
        'row_count': row_count,
    })

    return CsvExport(
        content=content,
        filename=build_export_filename(request.customer_id, now),
        order_count=len(orders),
        row_count=row_count,
    )
