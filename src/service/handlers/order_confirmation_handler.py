"""
Order Confirmation Handler - Lambda function sending order confirmation emails.

Accepts ``POST {"orderId"}``. Once the order is found the response is always
200: delivery failures and a missing mail configuration are reported inside the
acknowledgment together with the rendered email.
"""

from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from service.handlers.models.env_vars import get_confirmation_env_vars
from service.handlers.utils.dependencies import build_mail_transport, build_orders_reader
from service.handlers.utils.errors import (
    BaseServiceError,
    InputError,
    MethodNotAllowedError,
    UnexpectedError,
    log_error_metrics,
)
from service.handlers.utils.http import (
    create_api_response,
    error_response,
    get_http_method,
    parse_json_body,
    preflight_response,
)
from service.handlers.utils.observability import logger, metrics, tracer
from service.logic.order_confirmation import confirm_order
from service.models.input import OrderConfirmationRequest, describe_validation_error


def parse_confirmation_request(event: Dict[str, Any]) -> OrderConfirmationRequest:
    """
    Validate the confirmation request body.

    Raises:
        InputError: If the body is malformed or ``orderId`` is missing
    """
    body = parse_json_body(event)
    try:
        return OrderConfirmationRequest.model_validate(body)
    except ValidationError as e:
        raise InputError(message=describe_validation_error(e))


@tracer.capture_method(capture_response=False)
def process_confirmation_request(event: Dict[str, Any], request_id: str) -> Dict[str, Any]:
    """Serve one confirmation request, raising service errors for every failure."""
    method = get_http_method(event)
    if method != 'POST':
        raise MethodNotAllowedError(method)

    confirmation_request = parse_confirmation_request(event)

    logger.info('Order confirmation requested', extra={'order_id': confirmation_request.order_id})

    env = get_confirmation_env_vars()
    reader = build_orders_reader(env)

    output = confirm_order(
        reader=reader,
        request=confirmation_request,
        mail_transport=build_mail_transport(env),
        sender=env.MAIL_FROM_ADDRESS,
        display_tz=env.display_timezone,
    )

    return create_api_response(
        status_code=200,
        body=output.to_json(),
        request_id=request_id,
    )


@metrics.log_metrics(capture_cold_start_metric=True)
@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Order confirmation Lambda handler.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway response with the confirmation acknowledgment or a JSON error
    """
    request_id = context.aws_request_id

    if get_http_method(event) == 'OPTIONS':
        return preflight_response(request_id)

    metrics.add_metric(name='ConfirmationRequestCount', unit=MetricUnit.Count, value=1)

    try:
        response = process_confirmation_request(event, request_id)
    except BaseServiceError as e:
        log_error_metrics(e)
        return error_response(e, request_id)
    except Exception as e:
        logger.exception('Order confirmation failed', extra={'error': str(e), 'request_id': request_id})
        unexpected = UnexpectedError(details=str(e))
        log_error_metrics(unexpected)
        return error_response(unexpected, request_id)

    metrics.add_metric(name='ConfirmationSuccessCount', unit=MetricUnit.Count, value=1)
    logger.info('Order confirmation completed')
    return response
