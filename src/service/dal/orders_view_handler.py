"""
PostgREST implementation of the order view reader.

Queries the denormalized ``v_customer_orders`` view through the REST interface
of the data API (``/rest/v1/<view>``). Every call opens its own HTTP client and
closes it before returning.
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from aws_lambda_powertools.metrics import MetricUnit
from pydantic import TypeAdapter, ValidationError

from service.handlers.utils.errors import UpstreamError
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.order import CustomerOrder

REST_PATH = '/rest/v1'

_orders_adapter = TypeAdapter(List[CustomerOrder])

QueryParams = Sequence[Tuple[str, str]]


class OrdersViewHandler:
    """Reads order rows from a PostgREST-compatible data API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        view_name: str = 'v_customer_orders',
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize the order view handler.

        Args:
            base_url: Base URL of the data API, e.g. ``https://xyz.supabase.co``
            api_key: Service key sent as ``apikey`` and bearer token
            view_name: Name of the order view
            transport: Optional httpx transport (for testing)
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.view_name = view_name
        self._transport = transport

    @property
    def view_url(self) -> str:
        return f'{self.base_url}{REST_PATH}/{self.view_name}'

    def _headers(self) -> Dict[str, str]:
        return {
            'apikey': self.api_key,
            'Authorization': f'Bearer {self.api_key}',
            'Accept': 'application/json',
        }

    def _query(self, operation: str, params: QueryParams) -> List[CustomerOrder]:
        operation_start = time.time()
        metrics.add_metric(name=f'OrdersView{operation}Count', unit=MetricUnit.Count, value=1)

        try:
            with httpx.Client(transport=self._transport) as client:
                response = client.get(self.view_url, params=list(params), headers=self._headers())
        except httpx.HTTPError as e:
            metrics.add_metric(name=f'OrdersView{operation}Error', unit=MetricUnit.Count, value=1)
            logger.error(f'Order view {operation} request failed', extra={
                'error': str(e),
                'view_name': self.view_name,
            })
            raise UpstreamError(message='Failed to fetch orders', details=str(e))

        if not response.is_success:
            error_message = _extract_error_message(response)
            metrics.add_metric(name=f'OrdersView{operation}Error', unit=MetricUnit.Count, value=1)
            logger.error(f'Order view {operation} rejected', extra={
                'status_code': response.status_code,
                'error_message': error_message,
                'view_name': self.view_name,
            })
            raise UpstreamError(message='Failed to fetch orders', details=error_message)

        try:
            orders = _orders_adapter.validate_json(response.content)
        except ValidationError as e:
            metrics.add_metric(name=f'OrdersView{operation}Error', unit=MetricUnit.Count, value=1)
            logger.error('Order view returned malformed rows', extra={
                'error_count': e.error_count(),
                'view_name': self.view_name,
            })
            raise UpstreamError(message='Failed to fetch orders', details=f'Malformed order rows: {e.error_count()} error(s)')

        operation_duration = (time.time() - operation_start) * 1000
        metrics.add_metric(name=f'OrdersView{operation}Duration', unit=MetricUnit.Milliseconds, value=operation_duration)
        tracer.put_annotation('orders_view_operation', operation)

        logger.debug('Order view query completed', extra={
            'operation': operation,
            'row_count': len(orders),
            'duration_ms': round(operation_duration, 2),
        })

        return orders

    @tracer.capture_method(capture_response=False)
    def list_customer_orders(
        self,
        customer_id: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[CustomerOrder]:
        """
        List a customer's orders sorted by order date, newest first.

        Args:
            customer_id: Customer whose orders are listed
            start_date: Inclusive lower bound on ``order_date``
            end_date: Inclusive upper bound on ``order_date``

        Returns:
            Matching orders, possibly empty

        Raises:
            UpstreamError: If the data API fails or rejects the query
        """
        params = build_customer_orders_params(customer_id, start_date, end_date)
        orders = self._query('List', params)

        logger.info('Customer orders retrieved', extra={
            'customer_id': customer_id,
            'order_count': len(orders),
            'start_date': start_date,
            'end_date': end_date,
        })
        return orders

    @tracer.capture_method(capture_response=False)
    def get_order_by_id(self, order_id: str) -> Optional[CustomerOrder]:
        """
        Retrieve exactly one order by its ID.

        Args:
            order_id: Unique identifier of the order

        Returns:
            The order if exactly one row matched, None if none did

        Raises:
            UpstreamError: If the query fails or more than one row matched
        """
        params = [
            ('select', '*'),
            ('order_id', f'eq.{order_id}'),
            ('limit', '2'),
        ]
        orders = self._query('Get', params)

        if not orders:
            logger.info('Order not found', extra={'order_id': order_id})
            return None

        if len(orders) > 1:
            raise UpstreamError(
                message='Failed to fetch orders',
                details=f'Expected a single row for order {order_id}, got {len(orders)}',
            )

        tracer.put_annotation('order_retrieved', order_id)
        return orders[0]


def build_customer_orders_params(
    customer_id: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> List[Tuple[str, str]]:
    """Build the PostgREST filter for a customer's orders within optional date bounds."""
    params = [
        ('select', '*'),
        ('customer_id', f'eq.{customer_id}'),
        ('order', 'order_date.desc'),
    ]
    if start_date:
        params.append(('order_date', f'gte.{start_date}'))
    if end_date:
        params.append(('order_date', f'lte.{end_date}'))
    return params


def _extract_error_message(response: httpx.Response) -> str:
    """PostgREST errors carry a JSON body with a ``message`` field."""
    try:
        payload: Any = response.json()
    except ValueError:
        return response.text or f'HTTP {response.status_code}'
    if isinstance(payload, dict) and payload.get('message'):
        return str(payload['message'])
    return f'HTTP {response.status_code}'
