"""
Pytest configuration and shared fixtures for the order notification functions.

This module provides common test fixtures and configuration used across
unit, integration, and end-to-end tests.
"""

import json
import os
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import Mock

import pytest

# Powertools reads these when the handler modules are imported during collection
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "test-order-notifications")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "TestOrderNotifications")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

from service.handlers.models.env_vars import ConfirmationHandlerEnvVars, ExportHandlerEnvVars
from service.models.order import CustomerOrder


# Test environment configuration
@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment variables."""
    os.environ.update({
        "AWS_DEFAULT_REGION": "us-east-1",
        "AWS_ACCESS_KEY_ID": "test",
        "AWS_SECRET_ACCESS_KEY": "test",
        "POWERTOOLS_SERVICE_NAME": "test-order-notifications",
        "POWERTOOLS_METRICS_NAMESPACE": "TestOrderNotifications",
        "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
        "LOG_LEVEL": "DEBUG",
    })


# Sample data fixtures
@pytest.fixture
def widget_order_row() -> Dict[str, Any]:
    """A single-item order row as returned by the order view."""
    return {
        "order_id": "abc12345-6789-4def-8123-456789abcdef",
        "customer_id": "cust9876-5432-4abc-9def-0123456789ab",
        "status": "confirmed",
        "total_cents": 2100,
        "order_date": "2024-03-15T14:30:00+00:00",
        "customer_name": "Maria Silva",
        "email": "maria@example.com",
        "items": [
            {"product_name": "Widget", "quantity": 2, "price_cents": 1050},
        ],
    }


@pytest.fixture
def multi_item_order_row() -> Dict[str, Any]:
    """An order with two items."""
    return {
        "order_id": "def67890-1111-4222-8333-444455556666",
        "customer_id": "cust9876-5432-4abc-9def-0123456789ab",
        "status": "shipped",
        "total_cents": 4597,
        "order_date": "2024-02-01T09:00:00Z",
        "customer_name": "Maria Silva",
        "email": "maria@example.com",
        "items": [
            {"product_name": "Gadget", "quantity": 1, "price_cents": 2599},
            {"product_name": "Cable", "quantity": 2, "price_cents": 999},
        ],
    }


@pytest.fixture
def empty_order_row() -> Dict[str, Any]:
    """An order without item rows."""
    return {
        "order_id": "00aa11bb-2222-4333-8444-555566667777",
        "customer_id": "cust9876-5432-4abc-9def-0123456789ab",
        "status": "pending",
        "total_cents": 0,
        "order_date": "2024-01-10T23:15:00+00:00",
        "customer_name": "Maria Silva",
        "email": "maria@example.com",
        "items": None,
    }


@pytest.fixture
def widget_order(widget_order_row) -> CustomerOrder:
    return CustomerOrder.model_validate(widget_order_row)


@pytest.fixture
def multi_item_order(multi_item_order_row) -> CustomerOrder:
    return CustomerOrder.model_validate(multi_item_order_row)


@pytest.fixture
def empty_order(empty_order_row) -> CustomerOrder:
    return CustomerOrder.model_validate(empty_order_row)


# Environment model fixtures
@pytest.fixture
def export_env() -> ExportHandlerEnvVars:
    return ExportHandlerEnvVars(
        SUPABASE_URL="https://orders.example.supabase.co",
        SUPABASE_SERVICE_ROLE_KEY="service-role-key",
    )


@pytest.fixture
def confirmation_env() -> ConfirmationHandlerEnvVars:
    return ConfirmationHandlerEnvVars(
        SUPABASE_URL="https://orders.example.supabase.co",
        SUPABASE_SERVICE_ROLE_KEY="service-role-key",
        MAIL_API_URL="https://mail.example.com/send",
        MAIL_API_KEY="mail-key",
    )


# API Gateway event fixtures
@pytest.fixture
def make_api_event() -> Callable[..., Dict[str, Any]]:
    """Build an API Gateway REST proxy event."""

    def _make(method: str = "POST", body: Optional[Any] = None, path: str = "/") -> Dict[str, Any]:
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        return {
            "resource": path,
            "path": path,
            "httpMethod": method,
            "headers": {
                "Content-Type": "application/json",
                "User-Agent": "test-agent/1.0",
            },
            "body": body,
            "requestContext": {
                "requestId": "test-request-id-123",
                "accountId": "123456789012",
                "stage": "test",
                "httpMethod": method,
                "path": path,
                "identity": {
                    "sourceIp": "127.0.0.1",
                    "userAgent": "test-agent/1.0",
                },
            },
            "pathParameters": None,
            "queryStringParameters": None,
            "multiValueQueryStringParameters": None,
            "stageVariables": None,
            "isBase64Encoded": False,
        }

    return _make


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-order-function"
    context.function_version = "$LATEST"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-order-function"
    context.memory_limit_in_mb = 512
    context.aws_request_id = "lambda-request-id-456"
    context.log_group_name = "/aws/lambda/test-order-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    context.get_remaining_time_in_millis.return_value = 30000
    return context


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 4, 2, 10, 20, 30, tzinfo=timezone.utc)


class FakeOrdersReader:
    """In-memory order view used in handler and logic tests."""

    def __init__(self, orders: Optional[List[CustomerOrder]] = None, error: Optional[Exception] = None):
        self.orders = orders or []
        self.error = error
        self.calls: List[tuple] = []

    def list_customer_orders(self, customer_id, start_date=None, end_date=None):
        self.calls.append(("list", customer_id, start_date, end_date))
        if self.error:
            raise self.error
        return list(self.orders)

    def get_order_by_id(self, order_id):
        self.calls.append(("get", order_id))
        if self.error:
            raise self.error
        matches = [order for order in self.orders if order.order_id == order_id]
        return matches[0] if matches else None


@pytest.fixture
def fake_reader_factory() -> Callable[..., FakeOrdersReader]:
    return FakeOrdersReader


# Deployed API fixtures
@pytest.fixture(scope="session")
def integration_client():
    """HTTP client for the deployed functions; skips when API_BASE_URL is unset."""
    import httpx

    base_url = os.environ.get("API_BASE_URL")
    if not base_url:
        pytest.skip("API_BASE_URL not set")

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        yield client


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "e2e" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)
