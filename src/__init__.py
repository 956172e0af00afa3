"""
Order Notifications - Source Package

This package contains the Lambda function entry points and the shared
``service`` package for the order CSV export and order confirmation
functions.
"""

__version__ = "1.0.0"

# Package metadata
__all__ = [
    "__version__",
]
