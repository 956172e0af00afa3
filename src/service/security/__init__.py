"""
Security Module for the order notification functions.

Credentials for the data API and the mail transport may be supplied directly
through the environment or stored in AWS Secrets Manager.
"""

from .secrets_manager import (
    SecretNotFoundError,
    SecretRetrievalError,
    get_api_key,
    resolve_credential,
)

__all__ = [
    "SecretNotFoundError",
    "SecretRetrievalError",
    "get_api_key",
    "resolve_credential",
]
