"""
HTTP API for the point classifier.
"""

from .app import create_app, handle_api_error, configure_logging
from .bootstrap import bootstrap_classifier, create_and_train, resolve_k

__all__ = [
    "create_app",
    "handle_api_error",
    "configure_logging",
    "bootstrap_classifier",
    "create_and_train",
    "resolve_k"
]
