"""
HTTP mail transport client.

Delivery is best effort: ``send`` never raises for delivery problems, it
returns a ``MailDeliveryResult`` describing either the accepted message or the
failure reason.
"""

from typing import Any, Dict, Optional

import httpx
from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel

from service.handlers.utils.errors import TransportError
from service.handlers.utils.observability import logger, metrics, tracer
from service.security.secrets_manager import SecretNotFoundError, SecretRetrievalError, resolve_credential


class MailMessage(BaseModel):
    """JSON envelope accepted by the mail transport."""

    to: str
    subject: str
    text: str
    sender: str

    def to_payload(self) -> Dict[str, str]:
        return {
            'to': self.to,
            'subject': self.subject,
            'text': self.text,
            'from': self.sender,
        }


class MailDeliveryResult(BaseModel):
    """Outcome of one delivery attempt: either sent with a result, or failed with an error."""

    sent: bool
    result: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def delivered(cls, result: Any) -> 'MailDeliveryResult':
        return cls(sent=True, result=result)

    @classmethod
    def failed(cls, error: str) -> 'MailDeliveryResult':
        return cls(sent=False, error=error)


class HttpMailTransport:
    """Sends mail through an HTTP API authenticated with a bearer token."""

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        api_key_secret_name: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize the mail transport.

        Args:
            api_url: Endpoint accepting the JSON envelope
            api_key: Bearer token
            api_key_secret_name: Secrets Manager secret holding the token, read when ``api_key`` is empty
            transport: Optional httpx transport (for testing)
        """
        self.api_url = api_url
        self.api_key = api_key
        self.api_key_secret_name = api_key_secret_name
        self._transport = transport

    def _post(self, message: MailMessage) -> Any:
        try:
            api_key = resolve_credential(self.api_key, self.api_key_secret_name)
        except (SecretNotFoundError, SecretRetrievalError) as e:
            raise TransportError(message=f'Mail service credential unavailable: {e}')
        if not api_key:
            raise TransportError(message='Mail service credential unavailable')

        with httpx.Client(transport=self._transport) as client:
            response = client.post(
                self.api_url,
                json=message.to_payload(),
                headers={
                    'Authorization': f'Bearer {api_key}',
                    'Content-Type': 'application/json',
                },
            )

        if not response.is_success:
            raise TransportError(message=f'Mail service error: {response.status_code}', status_code=response.status_code)

        return response.json()

    @tracer.capture_method
    def send(self, message: MailMessage) -> MailDeliveryResult:
        """
        Attempt delivery of a message.

        Args:
            message: Envelope to deliver

        Returns:
            Delivery result; no exception escapes this method
        """
        try:
            result = self._post(message)
        except TransportError as e:
            reason = e.message
        except httpx.HTTPError as e:
            reason = str(e) or e.__class__.__name__
        except ValueError as e:
            # Success status with a body that is not JSON
            reason = f'Invalid mail service response: {e}'
        except Exception as e:
            # Malformed endpoint URLs and client setup errors end up here
            logger.exception('Unexpected mail transport failure', extra={'api_url': self.api_url})
            reason = str(e) or e.__class__.__name__
        else:
            metrics.add_metric(name='MailDelivered', unit=MetricUnit.Count, value=1)
            logger.info('Mail delivered', extra={'subject': message.subject})
            return MailDeliveryResult.delivered(result)

        metrics.add_metric(name='MailDeliveryFailed', unit=MetricUnit.Count, value=1)
        logger.warning('Mail delivery failed', extra={'reason': reason, 'subject': message.subject})
        return MailDeliveryResult.failed(reason)
