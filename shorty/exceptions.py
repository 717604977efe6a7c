class ShortyError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:shorty_error'


class MalformedIdentifierError(ShortyError, ValueError):
    """Raised when a string is not the text form of an identifier."""

    error_code = 'app:malformed_identifier_error'


class InvalidTargetError(ShortyError, ValueError):
    """Raised when a target is not a syntactically valid URL."""

    error_code = 'app:invalid_target_error'


class ConfigurationError(ShortyError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
