"""Error handling framework for provider operations."""

from typing import Optional, Dict, Any, List
from enum import Enum
from dataclasses import dataclass, field

from openstack import exceptions as os_exceptions
from pydantic import ValidationError as PydanticValidationError

from neutron_deploy.utils.logging import get_logger

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Categories of errors that can occur during provider operations."""
    CONFIGURATION = "configuration"
    OPENSTACK = "openstack"
    NETWORK = "network"
    STATE = "state"
    CARDINALITY = "cardinality"
    NOT_FOUND = "not_found"
    PROVISIONING = "provisioning"
    CREDENTIAL = "credential"
    PERMISSION = "permission"
    RESOURCE_LIMIT = "resource_limit"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    CRITICAL = "critical"  # Run cannot continue
    ERROR = "error"  # Operation failed
    WARNING = "warning"  # Non-fatal issue
    INFO = "info"  # Informational message


@dataclass
class ErrorContext:
    """Context information for an error."""
    resource_id: Optional[str] = None
    resource_type: Optional[str] = None
    operation: Optional[str] = None
    region: Optional[str] = None
    request_id: Optional[str] = None
    additional_info: Optional[Dict[str, Any]] = None


@dataclass
class Diagnostic:
    """A user-facing report attached to the result of a provider call."""
    severity: ErrorSeverity
    summary: str
    detail: str = ""
    address: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)

    @property
    def is_error(self) -> bool:
        return self.severity in (ErrorSeverity.CRITICAL, ErrorSeverity.ERROR)


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[str]] = None
    ):
        """Initialize provider error.

        Args:
            message: Human-readable error message
            category: Error category
            severity: Error severity
            context: Additional context about the error
            cause: Original exception that caused this error
            suggestions: List of suggested fixes
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.cause = cause
        self.suggestions = suggestions or []

    def to_user_message(self) -> str:
        """Convert error to user-friendly message.

        Returns:
            Formatted error message for display to user
        """
        lines = [f"{self.severity.value.upper()}: {self.message}"]

        if self.context.resource_id:
            lines.append(f"   Resource: {self.context.resource_id}")
        if self.context.operation:
            lines.append(f"   Operation: {self.context.operation}")

        if self.cause:
            lines.append(f"   Cause: {str(self.cause)}")

        if self.suggestions:
            lines.append("\nSuggested fixes:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"   {i}. {suggestion}")

        return "\n".join(lines)

    def rephrase(self, message: str) -> "ProviderError":
        """Replace the message, keeping category and context."""
        self.message = message
        self.args = (message,)
        return self

    def to_diagnostic(self) -> Diagnostic:
        """Convert error to a diagnostic for a provider result."""
        return Diagnostic(
            severity=self.severity,
            summary=self.message,
            detail=str(self.cause) if self.cause else "",
            address=self.context.resource_id,
            suggestions=list(self.suggestions),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error
        """
        return {
            'message': self.message,
            'category': self.category.value,
            'severity': self.severity.value,
            'context': {
                'resource_id': self.context.resource_id,
                'resource_type': self.context.resource_type,
                'operation': self.context.operation,
                'region': self.context.region,
                'request_id': self.context.request_id,
                'additional_info': self.context.additional_info
            },
            'cause': str(self.cause) if self.cause else None,
            'suggestions': self.suggestions
        }


class ConfigurationError(ProviderError):
    """Error in configuration file or settings."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class CredentialError(ProviderError):
    """Error related to OpenStack credentials."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CREDENTIAL,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class PermissionError(ProviderError):
    """Error related to OpenStack policy."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.PERMISSION,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class NetworkError(ProviderError):
    """Network-related error."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.NETWORK,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class StateError(ProviderError):
    """Error related to state management."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.STATE,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class ProvisioningError(ProviderError):
    """Error during resource provisioning."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.PROVISIONING,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class ResourceNotFoundError(ProviderError):
    """The remote object does not exist."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.NOT_FOUND,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class WaitTimeoutError(ProvisioningError):
    """A polled object did not reach its target state in time."""


class ResourceLimitError(ProviderError):
    """Error due to OpenStack quotas or rate limits."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.RESOURCE_LIMIT,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class ValidationError(ProviderError):
    """Error during argument validation."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class CardinalityError(ProviderError):
    """A singleton lookup did not resolve to exactly one object."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CARDINALITY,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class NoResultsError(CardinalityError):
    """A singleton lookup matched nothing."""


class MultipleResultsError(CardinalityError):
    """A singleton lookup matched more than one object."""


class ErrorHandler:
    """Handles and categorizes errors from OpenStack and other sources."""

    # Mapping of HTTP status codes to error categories and suggestions
    HTTP_ERROR_MAPPING = {
        400: {
            'error_class': ValidationError,
            'message': 'Invalid request',
            'suggestions': [
                'Review the error message for the rejected attribute',
                'Check the Networking API reference for valid values',
            ]
        },
        401: {
            'error_class': CredentialError,
            'message': 'OpenStack credentials are invalid or expired',
            'suggestions': [
                'Check the clouds.yaml entry or OS_* environment variables',
                'Verify credentials using: openstack token issue',
            ]
        },
        403: {
            'error_class': PermissionError,
            'message': 'Operation forbidden by policy',
            'suggestions': [
                'Check the roles assigned to your user in this project',
                'Some attributes (shared, is_default) require the admin role',
            ]
        },
        404: {
            'error_class': ResourceNotFoundError,
            'message': 'Resource not found',
            'suggestions': [
                'Verify the resource exists in the selected region',
                'Check if the resource was deleted outside of neutron-deploy',
            ]
        },
        409: {
            'error_class': ProvisioningError,
            'message': 'Request conflicts with the current state of the resource',
            'suggestions': [
                'Check for other resources still using this one',
                'Check project quotas: openstack quota show',
            ]
        },
        413: {
            'error_class': ResourceLimitError,
            'message': 'OpenStack quota exceeded',
            'suggestions': [
                'Request a quota increase from your cloud operator',
                'Clean up unused resources',
            ]
        },
        429: {
            'error_class': ResourceLimitError,
            'message': 'API rate limit exceeded',
            'suggestions': [
                'Reduce the frequency of API calls',
            ]
        },
        503: {
            'error_class': NetworkError,
            'message': 'OpenStack service temporarily unavailable',
            'suggestions': [
                'Wait a few moments and retry',
                'Check the status of the Networking service',
            ]
        },
    }

    def __init__(self):
        """Initialize error handler."""
        self.logger = get_logger(__name__)

    def handle_exception(
        self,
        error: Exception,
        context: Optional[ErrorContext] = None
    ) -> ProviderError:
        """Handle an exception and convert to ProviderError.

        Args:
            error: The exception to handle
            context: Additional context about where the error occurred

        Returns:
            ProviderError with categorization and suggestions
        """
        context = context or ErrorContext()

        if isinstance(error, ProviderError):
            if context.resource_id and not error.context.resource_id:
                error.context = context
            return error

        if isinstance(error, os_exceptions.HttpException):
            return self._handle_http_error(error, context)

        if isinstance(error, os_exceptions.ConfigException):
            return ConfigurationError(
                f'Invalid OpenStack client configuration: {error}',
                context=context,
                cause=error,
                suggestions=[
                    'Check that the cloud name exists in clouds.yaml',
                    'Set OS_CLOUD or provide auth_url, username and password',
                ]
            )

        if isinstance(error, os_exceptions.ResourceTimeout):
            return WaitTimeoutError(str(error), context=context, cause=error)

        if isinstance(error, os_exceptions.SDKException):
            return ProviderError(
                message=f'OpenStack SDK error: {error}',
                category=ErrorCategory.OPENSTACK,
                context=context,
                cause=error
            )

        if isinstance(error, PydanticValidationError):
            return self._handle_validation_error(error, context)

        if isinstance(error, (ConnectionError, TimeoutError)):
            return self._handle_network_error(error, context)

        return ProviderError(
            message=str(error),
            category=ErrorCategory.UNKNOWN,
            severity=ErrorSeverity.ERROR,
            context=context,
            cause=error,
            suggestions=['Check logs for more details']
        )

    def _handle_http_error(
        self,
        error: os_exceptions.HttpException,
        context: ErrorContext
    ) -> ProviderError:
        """Handle an HTTP error raised by the SDK.

        Args:
            error: The HttpException
            context: Error context

        Returns:
            Categorized ProviderError
        """
        status_code = error.status_code
        if isinstance(error, os_exceptions.ResourceNotFound):
            status_code = 404
        elif isinstance(error, os_exceptions.ConflictException):
            status_code = 409
        elif isinstance(error, os_exceptions.BadRequestException):
            status_code = 400
        context.request_id = getattr(error, 'request_id', None)
        details = getattr(error, 'details', None) or error.message

        error_info = self.HTTP_ERROR_MAPPING.get(status_code)
        if error_info is None and status_code and status_code >= 500:
            error_info = self.HTTP_ERROR_MAPPING[503]

        if error_info:
            return error_info['error_class'](
                f"{error_info['message']}: {details}",
                context=context,
                cause=error,
                suggestions=error_info['suggestions']
            )

        return ProviderError(
            message=f"OpenStack Error ({status_code}): {details}",
            category=ErrorCategory.OPENSTACK,
            severity=ErrorSeverity.ERROR,
            context=context,
            cause=error,
            suggestions=[f'OpenStack Request ID: {context.request_id}']
        )

    def _handle_validation_error(
        self,
        error: PydanticValidationError,
        context: ErrorContext
    ) -> ValidationError:
        """Handle invalid arguments rejected by a schema model."""
        problems = []
        for item in error.errors():
            location = ".".join(str(loc) for loc in item.get("loc", ()))
            problems.append(f"{location}: {item.get('msg', 'invalid value')}")

        return ValidationError(
            'Invalid arguments: ' + '; '.join(problems),
            context=context,
            cause=error
        )

    def _handle_network_error(
        self,
        error: Exception,
        context: ErrorContext
    ) -> NetworkError:
        """Handle network-related errors.

        Args:
            error: The network error
            context: Error context

        Returns:
            NetworkError
        """
        return NetworkError(
            message=f'Network error: {str(error)}',
            context=context,
            cause=error,
            suggestions=[
                'Check connectivity to the Identity endpoint (auth_url)',
                'Check if a VPN or proxy is interfering',
            ]
        )

    def log_error(self, error: ProviderError):
        """Log an error with appropriate level.

        Args:
            error: The error to log
        """
        log_message = error.to_user_message()

        if error.severity in (ErrorSeverity.CRITICAL, ErrorSeverity.ERROR):
            self.logger.error(log_message)
        elif error.severity == ErrorSeverity.WARNING:
            self.logger.warning(log_message)
        else:
            self.logger.info(log_message)

        self.logger.debug(f"Error details: {error.to_dict()}")


def is_not_found(error: Exception) -> bool:
    """Return True when an exception means the remote object is gone."""
    if isinstance(error, ResourceNotFoundError):
        return True
    return isinstance(error, os_exceptions.ResourceNotFound)


# Global error handler instance
error_handler = ErrorHandler()
