class ShortURLError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:short_url_error'
    default_message = 'Short URL request failed.'

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(ShortURLError):
    """Base exception for rejected caller input."""

    error_code = 'input:validation_error'
    default_message = 'Invalid input.'


class InvalidLongURLError(ValidationError):
    """Raised when a long URL is not an absolute URL with scheme and host."""

    error_code = 'input:invalid_long_url'
    default_message = 'Invalid long URL format.'


class CodeTooLongError(ValidationError):
    """Raised when a short code is empty or longer than SHORT_CODE_MAX_LENGTH."""

    error_code = 'input:code_too_long'
    default_message = 'Short code is too long.'


class InvalidShortCodeError(ValidationError):
    """Raised when a short code contains characters outside the alphabet."""

    error_code = 'input:invalid_short_code'
    default_message = 'Short code contains invalid characters.'


class ShortCodeAlreadyExistsError(ShortURLError):
    """Raised when a caller-supplied short code is already mapped."""

    error_code = 'conflict:code_already_exists'
    default_message = 'Short code already exists.'


class ShortCodeNotFoundError(ShortURLError):
    """Raised when a short code has no mapping."""

    error_code = 'lookup:code_not_found'
    default_message = 'Short code does not exist.'


class AllocationExhaustedError(ShortURLError):
    """Raised when random short code generation keeps colliding."""

    error_code = 'internal:allocation_exhausted'
    default_message = 'Could not allocate a unique short code.'


class ConfigurationError(ShortURLError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'
    default_message = 'Invalid configuration.'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class InfrastructureError(ShortURLError):
    """Raised when a backing data store cannot serve a request."""

    error_code = 'infra:data_store_error'
    default_message = 'Data store is unavailable.'

