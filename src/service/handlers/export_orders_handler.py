"""
Order Export Handler - Lambda function exporting a customer's orders as CSV.

Accepts ``POST {"customerId", "startDate"?, "endDate"?}`` and answers with a
CSV download, or a JSON error body ``{"error", "details"?}``.
"""

from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from service.handlers.models.env_vars import get_export_env_vars
from service.handlers.utils.dependencies import build_orders_reader
from service.handlers.utils.errors import (
    BaseServiceError,
    InputError,
    MethodNotAllowedError,
    UnexpectedError,
    log_error_metrics,
)
from service.handlers.utils.http import (
    CSV_CONTENT_TYPE,
    create_api_response,
    error_response,
    get_http_method,
    parse_json_body,
    preflight_response,
)
from service.handlers.utils.observability import logger, metrics, tracer
from service.logic.order_export import export_customer_orders
from service.models.input import ExportOrdersRequest, describe_validation_error


def parse_export_request(event: Dict[str, Any]) -> ExportOrdersRequest:
    """
    Validate the export request body.

    Raises:
        InputError: If the body is malformed or ``customerId`` is missing
    """
    body = parse_json_body(event)
    try:
        return ExportOrdersRequest.model_validate(body)
    except ValidationError as e:
        raise InputError(message=describe_validation_error(e))


@tracer.capture_method(capture_response=False)
def process_export_request(event: Dict[str, Any], request_id: str) -> Dict[str, Any]:
    """Serve one export request, raising service errors for every failure."""
    method = get_http_method(event)
    if method != 'POST':
        raise MethodNotAllowedError(method)

    export_request = parse_export_request(event)

    logger.info('Order export requested', extra={
        'customer_id': export_request.customer_id,
        'start_date': export_request.start_date,
        'end_date': export_request.end_date,
    })

    env = get_export_env_vars()
    reader = build_orders_reader(env)

    export = export_customer_orders(
        reader=reader,
        request=export_request,
        display_tz=env.display_timezone,
    )

    return create_api_response(
        status_code=200,
        body=export.content,
        content_type=CSV_CONTENT_TYPE,
        headers={
            'Content-Disposition': f'attachment; filename="{export.filename}"',
            'Content-Length': str(len(export.content.encode('utf-8'))),
        },
        request_id=request_id,
    )


@metrics.log_metrics(capture_cold_start_metric=True)
@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Order export Lambda handler.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway response with the CSV document or a JSON error
    """
    request_id = context.aws_request_id

    if get_http_method(event) == 'OPTIONS':
        return preflight_response(request_id)

    metrics.add_metric(name='ExportRequestCount', unit=MetricUnit.Count, value=1)

    try:
        response = process_export_request(event, request_id)
    except BaseServiceError as e:
        log_error_metrics(e)
        return error_response(e, request_id)
    except Exception as e:
        logger.exception('Order export failed', extra={'error': str(e), 'request_id': request_id})
        unexpected = UnexpectedError(details=str(e))
        log_error_metrics(unexpected)
        return error_response(unexpected, request_id)

    metrics.add_metric(name='ExportSuccessCount', unit=MetricUnit.Count, value=1)
    logger.info('Order export completed')
    return response
