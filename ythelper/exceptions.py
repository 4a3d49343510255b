class ConfigurationError(Exception):
    """Raised when a required server-side setting, such as the Gemini API key, is missing."""


class ClientInputError(Exception):
    """Raised when the submitted form is missing a field or carries an invalid one."""


class ProcessingError(Exception):
    """Raised when storing, uploading, generating or parsing fails."""


class IntegrationError(ProcessingError):
    """Raised when a Gemini API call fails."""


class ResponseParseError(ProcessingError):
    """Raised when the model output contains no parseable JSON object."""


class ProcessingTimeoutError(ProcessingError):
    """Raised when an analysis exceeds the configured processing ceiling."""
