"""Utility modules for logging, error handling, and polling."""

from neutron_deploy.utils.errors import (
    ErrorCategory,
    ErrorSeverity,
    ErrorContext,
    Diagnostic,
    ProviderError,
    ConfigurationError,
    CredentialError,
    PermissionError,
    NetworkError,
    StateError,
    ProvisioningError,
    ResourceNotFoundError,
    WaitTimeoutError,
    ResourceLimitError,
    ValidationError,
    CardinalityError,
    NoResultsError,
    MultipleResultsError,
    ErrorHandler,
    error_handler,
    is_not_found,
)
from neutron_deploy.utils.logging import get_logger, setup_logging, LogContext
from neutron_deploy.utils.waiter import StateWaiter, existence_refresh

__all__ = [
    # Errors
    'ErrorCategory',
    'ErrorSeverity',
    'ErrorContext',
    'Diagnostic',
    'ProviderError',
    'ConfigurationError',
    'CredentialError',
    'PermissionError',
    'NetworkError',
    'StateError',
    'ProvisioningError',
    'ResourceNotFoundError',
    'WaitTimeoutError',
    'ResourceLimitError',
    'ValidationError',
    'CardinalityError',
    'NoResultsError',
    'MultipleResultsError',
    'ErrorHandler',
    'error_handler',
    'is_not_found',

    # Logging
    'get_logger',
    'setup_logging',
    'LogContext',

    # Polling
    'StateWaiter',
    'existence_refresh',
]
