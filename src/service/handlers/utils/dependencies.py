"""
Builders for the collaborators a handler needs on each invocation.

Nothing is cached between invocations; every request builds its own reader and
transport from the current environment.
"""

from typing import Optional

from service.dal import OrdersReader, get_orders_reader
from service.dal.mail_transport import HttpMailTransport
from service.handlers.models.env_vars import ConfirmationHandlerEnvVars, OrdersDataEnvVars
from service.handlers.utils.errors import UpstreamError
from service.handlers.utils.observability import logger
from service.security.secrets_manager import SecretNotFoundError, SecretRetrievalError, resolve_credential


def build_orders_reader(env: OrdersDataEnvVars) -> OrdersReader:
    """
    Build the order view reader from the environment.

    Raises:
        UpstreamError: If the data API key cannot be read from Secrets Manager
    """
    try:
        api_key = resolve_credential(env.SUPABASE_SERVICE_ROLE_KEY, env.SUPABASE_SERVICE_ROLE_KEY_SECRET_NAME)
    except (SecretNotFoundError, SecretRetrievalError) as e:
        raise UpstreamError(message='Failed to fetch orders', details=str(e))

    return get_orders_reader(
        base_url=env.SUPABASE_URL,
        api_key=api_key or '',
        view_name=env.ORDERS_VIEW_NAME,
    )


def build_mail_transport(env: ConfirmationHandlerEnvVars) -> Optional[HttpMailTransport]:
    """Build the mail transport, or return None when mail is not configured."""
    if not env.mail_transport_configured:
        logger.debug('Mail transport not configured')
        return None

    return HttpMailTransport(
        api_url=env.MAIL_API_URL,
        api_key=env.MAIL_API_KEY,
        api_key_secret_name=env.MAIL_API_KEY_SECRET_NAME,
    )
