"""
Order Notifications Service Module.

This package contains the implementation of two API Gateway functions over a
read-only customer order view, following a three-layer architecture:

- handlers: Lambda entry points, request validation and error responses
- logic: CSV export rendering and order confirmation workflow
- dal: order view reads and the HTTP mail transport
- models: Pydantic models for rows, requests and responses
- security: credential lookup in AWS Secrets Manager

Observability is provided by AWS Lambda Powertools (structured logging,
tracing and metrics).
"""

__version__ = "1.0.0"
__description__ = "Order CSV export and order confirmation email functions"
