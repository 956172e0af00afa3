"""
Unit tests for the order confirmation Lambda handler.
"""

import json
from unittest.mock import Mock, patch

import pytest
from botocore.exceptions import NoRegionError

from service.dal.mail_transport import MailDeliveryResult
from service.handlers.order_confirmation_handler import lambda_handler
from service.handlers.utils.errors import UpstreamError

HANDLER = "service.handlers.order_confirmation_handler"


@pytest.fixture
def patched_handler(confirmation_env):
    """Patch the handler collaborators; yields a function installing reader and transport."""
    with patch(f"{HANDLER}.get_confirmation_env_vars", return_value=confirmation_env), \
            patch(f"{HANDLER}.build_orders_reader") as build_reader, \
            patch(f"{HANDLER}.build_mail_transport") as build_transport:

        def _install(reader, transport=None):
            build_reader.return_value = reader
            build_transport.return_value = transport
            return build_reader, build_transport

        yield _install


class TestConfirmationHandlerRequests:
    """Test cases for routing and validation."""

    def test_options_preflight(self, make_api_event, lambda_context):
        response = lambda_handler(make_api_event("OPTIONS"), lambda_context)

        assert response["statusCode"] == 200
        assert response["body"] == ""
        assert response["headers"]["Access-Control-Allow-Methods"] == "POST, OPTIONS"

    def test_wrong_method(self, make_api_event, lambda_context):
        response = lambda_handler(make_api_event("GET"), lambda_context)

        assert response["statusCode"] == 405
        assert json.loads(response["body"]) == {"error": "Method not allowed"}

    def test_missing_order_id(self, make_api_event, lambda_context, patched_handler, fake_reader_factory):
        reader = fake_reader_factory([])
        build_reader, _ = patched_handler(reader)

        response = lambda_handler(make_api_event("POST", {"customerId": "x"}), lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"]) == {"error": "orderId is required"}
        build_reader.assert_not_called()

    def test_malformed_json(self, make_api_event, lambda_context):
        response = lambda_handler(make_api_event("POST", "[1, 2"), lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["error"] == "Invalid JSON in request body"

    def test_unknown_order(self, make_api_event, lambda_context, patched_handler, fake_reader_factory):
        transport = Mock()
        patched_handler(fake_reader_factory([]), transport)

        response = lambda_handler(make_api_event("POST", {"orderId": "missing"}), lambda_context)

        assert response["statusCode"] == 404
        assert json.loads(response["body"]) == {"error": "Order not found"}
        transport.send.assert_not_called()

    def test_lookup_failure_reported_as_not_found(self, make_api_event, lambda_context, patched_handler,
                                                  fake_reader_factory):
        patched_handler(fake_reader_factory(error=UpstreamError(message="Failed to fetch orders", details="x")))

        response = lambda_handler(make_api_event("POST", {"orderId": "abc12345"}), lambda_context)

        assert response["statusCode"] == 404
        assert json.loads(response["body"]) == {"error": "Order not found"}

    def test_unexpected_failure(self, make_api_event, lambda_context, patched_handler, fake_reader_factory,
                                widget_order):
        transport = Mock()
        transport.send.side_effect = RuntimeError("socket closed")
        patched_handler(fake_reader_factory([widget_order]), transport)

        response = lambda_handler(make_api_event("POST", {"orderId": widget_order.order_id}), lambda_context)

        assert response["statusCode"] == 500
        assert json.loads(response["body"]) == {"error": "Internal server error", "details": "socket closed"}


class TestConfirmationHandlerOutcomes:
    """Test cases for the three acknowledgment shapes."""

    def test_mail_not_configured(self, make_api_event, lambda_context, patched_handler, fake_reader_factory,
                                 widget_order):
        patched_handler(fake_reader_factory([widget_order]), None)

        response = lambda_handler(make_api_event("POST", {"orderId": widget_order.order_id}), lambda_context)

        assert response["statusCode"] == 200
        assert response["headers"]["Content-Type"] == "application/json"
        body = json.loads(response["body"])
        assert body["success"] is True
        assert body["emailSent"] is False
        assert body["orderId"] == widget_order.order_id
        assert body["message"] == "Order confirmation processed (mail service not configured)"
        assert body["emailContent"]["subject"] == "Confirmação do Pedido #abc12345"
        assert "Total: R$ 21.00" in body["emailContent"]["body"]

    def test_mail_sent(self, make_api_event, lambda_context, patched_handler, fake_reader_factory, widget_order):
        transport = Mock()
        transport.send.return_value = MailDeliveryResult.delivered({"id": "msg-1"})
        patched_handler(fake_reader_factory([widget_order]), transport)

        response = lambda_handler(make_api_event("POST", {"orderId": widget_order.order_id}), lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body == {
            "success": True,
            "message": "Order confirmation email sent successfully",
            "orderId": widget_order.order_id,
            "emailSent": True,
            "mailResult": {"id": "msg-1"},
        }
        assert transport.send.call_args.args[0].sender == "noreply@ecommerce.com"

    def test_mail_failed(self, make_api_event, lambda_context, patched_handler, fake_reader_factory, widget_order):
        transport = Mock()
        transport.send.return_value = MailDeliveryResult.failed("Mail service error: 502")
        patched_handler(fake_reader_factory([widget_order]), transport)

        response = lambda_handler(make_api_event("POST", {"orderId": widget_order.order_id}), lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["emailSent"] is False
        assert body["message"] == "Order processed but email failed to send"
        assert body["error"] == "Mail service error: 502"
        assert body["emailContent"]["body"].startswith("Olá Maria Silva,")

    @pytest.mark.parametrize("api_url", ["http://[::1", "https://exa\x01mple.com"])
    def test_malformed_mail_url_still_acknowledged(self, make_api_event, lambda_context, confirmation_env,
                                                   fake_reader_factory, widget_order, api_url):
        env = confirmation_env.model_copy(update={"MAIL_API_URL": api_url})

        with patch(f"{HANDLER}.get_confirmation_env_vars", return_value=env), \
                patch(f"{HANDLER}.build_orders_reader", return_value=fake_reader_factory([widget_order])):
            response = lambda_handler(make_api_event("POST", {"orderId": widget_order.order_id}), lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["emailSent"] is False
        assert body["message"] == "Order processed but email failed to send"
        assert body["error"]
        assert body["emailContent"]["subject"] == "Confirmação do Pedido #abc12345"

    def test_mail_secret_without_region_still_acknowledged(self, make_api_event, lambda_context, confirmation_env,
                                                           fake_reader_factory, widget_order):
        env = confirmation_env.model_copy(update={"MAIL_API_KEY": None, "MAIL_API_KEY_SECRET_NAME": "mail/key"})

        with patch(f"{HANDLER}.get_confirmation_env_vars", return_value=env), \
                patch(f"{HANDLER}.build_orders_reader", return_value=fake_reader_factory([widget_order])), \
                patch("service.security.secrets_manager.boto3") as boto3_mock:
            boto3_mock.client.side_effect = NoRegionError()
            response = lambda_handler(make_api_event("POST", {"orderId": widget_order.order_id}), lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["emailSent"] is False
        assert body["error"].startswith("Mail service credential unavailable")


class TestConfirmationTracing:
    """Customer data must not be recorded as trace metadata."""

    def test_responses_not_captured(self, make_api_event, lambda_context, patched_handler, fake_reader_factory,
                                    widget_order):
        from service.handlers.utils.observability import tracer

        transport = Mock()
        transport.send.return_value = MailDeliveryResult.failed("Mail service error: 502")
        patched_handler(fake_reader_factory([widget_order]), transport)

        with patch.object(tracer, "_add_response_as_metadata") as add_metadata:
            lambda_handler(make_api_event("POST", {"orderId": widget_order.order_id}), lambda_context)

        captured = {
            call.kwargs["method_name"].rsplit(".", 1)[-1]: call.kwargs["capture_response"]
            for call in add_metadata.call_args_list
        }
        for name in ("process_confirmation_request", "confirm_order", "load_order"):
            assert captured[name] is False
