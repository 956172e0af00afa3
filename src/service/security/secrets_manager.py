"""
AWS Secrets Manager lookups for API credentials.

Secrets are read once per invocation and never cached in the process.
A secret may hold the key as a plain string or as a JSON object with the key
stored under ``api_key``.
"""

import json
from typing import Any, Dict, Optional, Union

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from service.handlers.utils.observability import logger, metrics, tracer


class SecretNotFoundError(Exception):
    """Exception raised when secret is not found."""
    pass


class SecretRetrievalError(Exception):
    """Exception raised when a secret cannot be read or has the wrong shape."""
    pass


def _parse_secret_value(response: Dict[str, Any]) -> Union[str, Dict[str, Any]]:
    if 'SecretString' not in response:
        raise SecretRetrievalError("Secret has no string value")

    secret_string = response['SecretString']
    try:
        return json.loads(secret_string)
    except (json.JSONDecodeError, TypeError):
        return secret_string


@tracer.capture_method
def get_secret(secret_name: str, region_name: Optional[str] = None) -> Union[str, Dict[str, Any]]:
    """
    Get secret value from AWS Secrets Manager.

    Args:
        secret_name: Name or ARN of the secret
        region_name: AWS region, defaults to the Lambda region

    Returns:
        Secret value (string or parsed JSON dict)

    Raises:
        SecretNotFoundError: If secret doesn't exist
        SecretRetrievalError: If the secret cannot be read
    """
    try:
        client = boto3.client('secretsmanager', region_name=region_name)
        response = client.get_secret_value(SecretId=secret_name)
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        metrics.add_metric(name="SecretRetrievalError", unit=MetricUnit.Count, value=1)
        if error_code == 'ResourceNotFoundException':
            logger.error("Secret not found", extra={"secret_name": secret_name})
            raise SecretNotFoundError(f"Secret '{secret_name}' not found")
        logger.error("Failed to retrieve secret", extra={"secret_name": secret_name, "error_code": error_code})
        raise SecretRetrievalError(f"Failed to retrieve secret '{secret_name}': {error_code}")
    except BotoCoreError as e:
        metrics.add_metric(name="SecretRetrievalError", unit=MetricUnit.Count, value=1)
        logger.error("Failed to reach Secrets Manager", extra={"secret_name": secret_name, "error": str(e)})
        raise SecretRetrievalError(f"Failed to retrieve secret '{secret_name}': {e}")

    metrics.add_metric(name="SecretRetrieved", unit=MetricUnit.Count, value=1)
    logger.debug("Secret retrieved", extra={"secret_name": secret_name, "version_id": response.get("VersionId")})

    return _parse_secret_value(response)


def get_api_key(secret_name: str, key_name: str = "api_key", region_name: Optional[str] = None) -> str:
    """
    Get API key from secrets manager.

    Args:
        secret_name: Name of the secret
        key_name: Key name within the secret (if JSON)
        region_name: AWS region

    Returns:
        API key string
    """
    secret_value = get_secret(secret_name, region_name=region_name)

    if isinstance(secret_value, dict):
        if key_name not in secret_value:
            raise SecretRetrievalError(f"API key '{key_name}' not found in secret")
        return str(secret_value[key_name])
    return str(secret_value)


def resolve_credential(value: Optional[str], secret_name: Optional[str]) -> Optional[str]:
    """Return ``value`` when set, otherwise the API key stored in ``secret_name``."""
    if value:
        return value
    if secret_name:
        return get_api_key(secret_name)
    return None
