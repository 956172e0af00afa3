"""
Business logic for order confirmation emails.

The order was already confirmed upstream; the email is a best-effort
notification. Delivery problems change ``emailSent`` in the acknowledgment,
never the outcome of the request.
"""

from datetime import timezone, tzinfo
from typing import Optional, Protocol

from aws_lambda_powertools.metrics import MetricUnit

from service.dal import OrdersReader
from service.dal.mail_transport import MailDeliveryResult, MailMessage
from service.handlers.utils.errors import ResourceNotFoundError, UpstreamError
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.input import OrderConfirmationRequest
from service.models.order import CustomerOrder, format_amount, format_order_date
from service.models.output import EmailContent, OrderConfirmationOutput

DEFAULT_SENDER = 'noreply@ecommerce.com'

MESSAGE_SENT = 'Order confirmation email sent successfully'
MESSAGE_FAILED = 'Order processed but email failed to send'
MESSAGE_NOT_CONFIGURED = 'Order confirmation processed (mail service not configured)'

EMAIL_TEMPLATE = """\
Olá {customer_name},

Seu pedido foi confirmado com sucesso!

Detalhes do Pedido:
- Número: #{order_number}
- Status: {status}
- Data: {order_date}

Itens:
{items}

Total: R$ {total}

Obrigado pela sua compra!

Atenciosamente,
Equipe E-commerce"""


class MailTransport(Protocol):
    def send(self, message: MailMessage) -> MailDeliveryResult:
        ...


def format_item_line(product_name: str, quantity: int, price_cents: int) -> str:
    return (
        f'- {product_name} (Qtd: {quantity}) - R$ {format_amount(price_cents)} cada'
        f' = R$ {format_amount(price_cents * quantity)}'
    )


def render_confirmation_email(order: CustomerOrder, display_tz: tzinfo = timezone.utc) -> EmailContent:
    """
    Render the plain-text confirmation email for an order.

    Items are listed in the order they appear on the order, followed by the
    grand total.
    """
    items = '\n'.join(
        format_item_line(item.product_name, item.quantity, item.price_cents)
        for item in order.items
    )

    body = EMAIL_TEMPLATE.format(
        customer_name=order.customer_name,
        order_number=order.short_id,
        status=order.status,
        order_date=format_order_date(order.order_date, display_tz),
        items=items,
        total=order.total_amount,
    ).strip()

    return EmailContent(subject=f'Confirmação do Pedido #{order.short_id}', body=body)


@tracer.capture_method(capture_response=False)
def load_order(reader: OrdersReader, order_id: str) -> CustomerOrder:
    """
    Fetch the order to confirm.

    Raises:
        ResourceNotFoundError: If the order is missing or the lookup failed
    """
    try:
        order = reader.get_order_by_id(order_id)
    except UpstreamError as e:
        logger.warning('Order lookup failed', extra={
            'order_id': order_id,
            'error_details': e.details,
        })
        order = None

    if order is None:
        raise ResourceNotFoundError(message='Order not found', resource_type='Order', resource_id=order_id)

    return order


@tracer.capture_method(capture_response=False)
def confirm_order(
    reader: OrdersReader,
    request: OrderConfirmationRequest,
    mail_transport: Optional[MailTransport] = None,
    sender: str = DEFAULT_SENDER,
    display_tz: tzinfo = timezone.utc,
) -> OrderConfirmationOutput:
    """
    Render and dispatch the confirmation email for an order.

    Args:
        reader: Order view reader
        request: Validated confirmation request
        mail_transport: Configured mail transport, or None when mail is not set up
        sender: Sender address
        display_tz: Timezone for the rendered order date

    Returns:
        Acknowledgment describing whether the email was sent

    Raises:
        ResourceNotFoundError: If the order cannot be loaded
    """
    tracer.put_annotation('order_id', request.order_id)

    order = load_order(reader, request.order_id)
    content = render_confirmation_email(order, display_tz)

    if mail_transport is None:
        metrics.add_metric(name='ConfirmationEmailSkipped', unit=MetricUnit.Count, value=1)
        logger.info('Mail service not configured, returning email content', extra={'order_id': order.order_id})
        return OrderConfirmationOutput(
            message=MESSAGE_NOT_CONFIGURED,
            order_id=order.order_id,
            email_sent=False,
            email_content=content,
        )

    delivery = mail_transport.send(MailMessage(
        to=order.email,
        subject=content.subject,
        text=content.body,
        sender=sender,
    ))

    if delivery.sent:
        metrics.add_metric(name='ConfirmationEmailSent', unit=MetricUnit.Count, value=1)
        logger.info('Confirmation email sent', extra={'order_id': order.order_id})
        return OrderConfirmationOutput(
            message=MESSAGE_SENT,
            order_id=order.order_id,
            email_sent=True,
            mail_result=delivery.result,
        )

    metrics.add_metric(name='ConfirmationEmailFailed', unit=MetricUnit.Count, value=1)
    logger.warning('Confirmation email not delivered', extra={
        'order_id': order.order_id,
        'reason': delivery.error,
    })
    return OrderConfirmationOutput(
        message=MESSAGE_FAILED,
        order_id=order.order_id,
        email_sent=False,
        error=delivery.error or 'Unknown mail error',
        email_content=content,
    )
