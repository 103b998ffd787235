"""
Custom exceptions for repo-pdf-service.

Every error the service reports to a client or the CLI derives from
RepoPDFError. The HTTP layer maps ValidationError subclasses to 400 and
everything else to 500.
"""

from typing import Optional


class RepoPDFError(Exception):
    """
    Base exception for repo-pdf-service.

    ``message`` is what clients see in ``{"error": ...}``; ``details`` only
    goes to the server log.

    Args:
        message: Client-facing error message
        details: Extra context for the log (optional)

    Example:
        >>> try:
        ...     converter.generate(repo, options, out_dir)
        ... except RepoPDFError as e:
        ...     logger.error(f"Rendering failed: {e}")
    """

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\nDetails: {self.details}"
        return self.message


class ConfigurationError(RepoPDFError):
    """
    Raised when the YAML configuration or an environment override is invalid.

    Example:
        >>> raise ConfigurationError("Invalid PORT value: abc")
    """


class ValidationError(RepoPDFError):
    """Raised when request data is rejected before any upstream call."""


class InvalidRepositoryURLError(ValidationError):
    """
    Raised when a repository URL does not contain ``github.com/{owner}/{repo}``.

    Example:
        >>> raise InvalidRepositoryURLError("Invalid GitHub repository URL", "not-a-url")
    """


class GitHubAPIError(RepoPDFError):
    """
    Raised when a GitHub API call fails.

    Covers HTTP errors (404, rate limits, bad credentials), network errors
    and timeouts (``status_code`` is None) and unexpected payload shapes.

    Args:
        message: Client-facing error message
        details: Request URL or underlying error (optional)
        status_code: HTTP status returned by GitHub, if any
    """

    def __init__(
        self, message: str, details: Optional[str] = None, status_code: Optional[int] = None
    ):
        self.status_code = status_code
        super().__init__(message, details)


class ConversionError(RepoPDFError):
    """
    Raised when pandoc fails, times out or produces no PDF.

    Example:
        >>> raise ConversionError("Pandoc conversion failed", "! LaTeX Error: ...")
    """


class DeliveryError(RepoPDFError):
    """Raised when a rendered document cannot be staged or streamed to the client."""
